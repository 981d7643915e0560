from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from navtree.extensions import db
from navtree.application import fields
from navtree.application.pages.change_slug import assert_page_slug
from navtree.application.pages.redirects import release_redirect
from navtree.application.tree_ops import conflict_from_integrity_error, sibling_count, validate_parent
from navtree.domain.lifecycle.page import DRAFT, PAGE_STATUSES, PUBLISHED
from navtree.domain.slugs import generate_slug
from navtree.models.base import utc_now
from navtree.models.page import PAGE_VISIBILITIES, PUBLIC, Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional


def create_page(
    *,
    tenant_id: str,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> Page:
    """
    Create a new custom page (DRAFT unless a status is given).

    Edge cases handled:
    - Missing title; slug derived from the title when omitted
    - Bad slug format, reserved route, duplicate slug (with suggestion)
    - Unknown parent
    - Position defaults to the end of the sibling group
    """
    title = fields.required_str(data, "title", max_length=200)
    slug = data.get("slug") or generate_slug(title)
    parent_id = fields.optional_id(data, "parent_id")
    status = fields.choice(data, "status", PAGE_STATUSES, default=DRAFT)
    visibility = fields.choice(data, "visibility", PAGE_VISIBILITIES, default=PUBLIC)
    display_order = fields.order_value(data, "display_order")

    try:
        with transactional():
            assert_page_slug(tenant_id=tenant_id, slug=slug)
            validate_parent(
                Page,
                tenant_id=tenant_id,
                entity_id=None,
                parent_id=parent_id,
                label="Page",
            )

            page = Page()
            page.tenant_id = tenant_id
            page.title = title
            page.slug = slug
            page.content = fields.optional_str(data, "content")
            page.excerpt = fields.optional_str(data, "excerpt", max_length=500)
            page.meta_title = fields.optional_str(data, "meta_title", max_length=200)
            page.meta_description = fields.optional_str(data, "meta_description", max_length=500)
            page.custom_css = fields.optional_str(data, "custom_css")
            page.parent_id = parent_id
            page.status = status
            page.visibility = visibility
            page.show_in_navigation = fields.boolean(data, "show_in_navigation", default=True)
            page.required_permissions = fields.string_list(data, "required_permissions")
            page.required_roles = fields.string_list(data, "required_roles")
            page.feature_flag = fields.optional_str(data, "feature_flag", max_length=100)

            if display_order is None:
                display_order = sibling_count(Page, tenant_id=tenant_id, parent_id=parent_id)
            page.display_order = display_order

            if status == PUBLISHED:
                page.published_at = utc_now()

            release_redirect(tenant_id=tenant_id, slug=slug)

            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            log_action(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                    "status": page.status,
                    "parent_id": page.parent_id,
                },
            )

        return page

    except IntegrityError as exc:
        # Unique constraint (tenant_id + slug) lost a race with another insert
        raise conflict_from_integrity_error(Page, exc, value=slug, label="Slug") from exc

from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from navtree.extensions import db
from navtree.application import fields
from navtree.application.pages.change_slug import change_page_slug
from navtree.application.tree_ops import conflict_from_integrity_error, get_entity, validate_parent
from navtree.domain.exceptions import ValidationError
from navtree.domain.lifecycle.page import PAGE_STATUSES, PUBLISHED, assert_page_transition
from navtree.models.base import utc_now
from navtree.models.page import PAGE_VISIBILITIES, Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

_UNSET = object()


def _read_updates(data: Dict[str, Any]) -> Dict[str, Any]:
    """Whitelisted fields present in the payload, coerced to column types."""
    readers = {
        "title": lambda: fields.required_str(data, "title", max_length=200),
        "content": lambda: fields.optional_str(data, "content"),
        "excerpt": lambda: fields.optional_str(data, "excerpt", max_length=500),
        "meta_title": lambda: fields.optional_str(data, "meta_title", max_length=200),
        "meta_description": lambda: fields.optional_str(data, "meta_description", max_length=500),
        "custom_css": lambda: fields.optional_str(data, "custom_css"),
        "visibility": lambda: fields.choice(data, "visibility", PAGE_VISIBILITIES),
        "show_in_navigation": lambda: fields.boolean(data, "show_in_navigation"),
        "required_permissions": lambda: fields.string_list(data, "required_permissions"),
        "required_roles": lambda: fields.string_list(data, "required_roles"),
        "feature_flag": lambda: fields.optional_str(data, "feature_flag", max_length=100),
        "display_order": lambda: fields.order_value(data, "display_order"),
    }
    updates = {name: read() for name, read in readers.items() if name in data}

    for name in ("visibility", "show_in_navigation", "display_order"):
        if name in updates and updates[name] is None:
            raise ValidationError(f"{name} cannot be null")
    return updates


def update_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> Page:
    """
    Partial update of a page.

    Design rules:
    - Only whitelisted fields are mutable
    - parent_id goes through the cycle guard, slug through the slug manager
    - Everything is validated before the first write
    - No silent no-op updates
    """
    updates = _read_updates(data)
    new_slug = data.get("slug", _UNSET)
    new_parent = fields.optional_id(data, "parent_id") if "parent_id" in data else _UNSET
    new_status = fields.choice(data, "status", PAGE_STATUSES) if "status" in data else _UNSET

    try:
        with transactional():
            page = get_entity(Page, tenant_id=tenant_id, entity_id=page_id, label="Page", lock=True)

            changed_fields: list[str] = []
            # Redirects are owed only to slugs that were public before this update
            was_published = page.published_at is not None

            if new_parent is not _UNSET and new_parent != page.parent_id:
                validate_parent(
                    Page,
                    tenant_id=tenant_id,
                    entity_id=page.id,
                    parent_id=new_parent,
                    label="Page",
                )
                page.parent_id = new_parent
                changed_fields.append("parent_id")

            if new_status is not _UNSET and new_status != page.status:
                assert_page_transition(from_status=page.status, to_status=new_status)
                page.status = new_status
                if new_status == PUBLISHED:
                    page.published_at = utc_now()
                changed_fields.append("status")

            for field, value in updates.items():
                if getattr(page, field) != value:
                    setattr(page, field, value)
                    changed_fields.append(field)

            old_slug = None
            if new_slug is not _UNSET and new_slug != page.slug:
                old_slug = change_page_slug(
                    tenant_id=tenant_id,
                    page=page,
                    new_slug=new_slug,
                    was_published=was_published,
                )
                changed_fields.append("slug")

            if not changed_fields:
                # Explicitly fail instead of silently succeeding
                raise ValidationError("No valid fields provided for update")

            db.session.flush()

            log_action(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action="page.update",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "fields": sorted(changed_fields),
                    "old_slug": old_slug,
                },
            )

        return page

    except IntegrityError as exc:
        raise conflict_from_integrity_error(
            Page, exc, value=None if new_slug is _UNSET else new_slug, label="Slug"
        ) from exc

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select

from navtree.extensions import db
from navtree.application.pages.redirects import resolve_redirect
from navtree.application.pages.change_slug import assert_page_slug
from navtree.application.tree_ops import get_entity
from navtree.domain.access import CallerContext, filter_visible, is_visible
from navtree.domain.exceptions import NavigationError, NotFoundError, ValidationError
from navtree.domain.hierarchy import TreeNode, build_hierarchy
from navtree.domain.lifecycle.page import PAGE_STATUSES
from navtree.models.page import PAGE_VISIBILITIES, Page

SORTABLE_FIELDS = {"created_at", "updated_at", "title", "slug", "display_order", "published_at"}


def get_page(*, tenant_id: str, page_id: str) -> Page:
    return get_entity(Page, tenant_id=tenant_id, entity_id=page_id, label="Page")


def list_pages(
    *,
    tenant_id: str,
    caller: CallerContext,
    filters: Dict[str, Any],
    page: int,
    per_page: int,
    admin: bool = False,
) -> Tuple[List[Page], int]:
    """
    Filtered, sorted, offset-paginated page list.

    Admin callers page in SQL. Everyone else gets the access-filtered set,
    which depends on per-row rules and is therefore paged in memory.
    """
    stmt = select(Page).where(Page.tenant_id == tenant_id)

    if status := filters.get("status"):
        if status not in PAGE_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(PAGE_STATUSES)}")
        stmt = stmt.where(Page.status == status)

    if visibility := filters.get("visibility"):
        if visibility not in PAGE_VISIBILITIES:
            raise ValidationError(f"visibility must be one of {', '.join(PAGE_VISIBILITIES)}")
        stmt = stmt.where(Page.visibility == visibility)

    if "parent_id" in filters and filters["parent_id"] is not None:
        parent_id = filters["parent_id"]
        stmt = stmt.where(Page.parent_id.is_(None) if parent_id == "null" else Page.parent_id == parent_id)

    if filters.get("show_in_navigation") is not None:
        stmt = stmt.where(Page.show_in_navigation.is_(filters["show_in_navigation"]))

    if search := filters.get("search"):
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(or_(
            func.lower(Page.title).like(pattern),
            func.lower(Page.slug).like(pattern),
            func.lower(Page.content).like(pattern),
        ))

    sort_by = filters.get("sort_by") or "created_at"
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(f"sort_by must be one of {', '.join(sorted(SORTABLE_FIELDS))}")
    column = getattr(Page, sort_by)
    descending = (filters.get("sort_order") or "desc").lower() == "desc"
    stmt = stmt.order_by(column.desc() if descending else column.asc(), Page.id.asc())

    offset = (page - 1) * per_page

    if admin:
        total = db.session.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        ).scalar_one()
        items = db.session.execute(stmt.offset(offset).limit(per_page)).scalars().all()
        return list(items), total

    visible = filter_visible(db.session.execute(stmt).scalars().all(), caller)
    return visible[offset:offset + per_page], len(visible)


def get_page_hierarchy(*, tenant_id: str, caller: CallerContext) -> List[TreeNode]:
    """
    Navigation tree for the caller: access filter first, then nesting.
    A page hidden from the caller hides its whole subtree.
    """
    pages = db.session.execute(
        select(Page).where(
            Page.tenant_id == tenant_id,
            Page.show_in_navigation.is_(True),
        )
    ).scalars().all()

    return build_hierarchy(filter_visible(pages, caller), order_attr=Page.ORDER_FIELD)


def resolve_page_by_slug(
    *,
    tenant_id: str,
    slug: str,
    caller: CallerContext,
) -> Tuple[Page, Optional[str]]:
    """
    Find a page by slug, following redirects left behind by renames.

    Returns (page, redirected_from). Pages the caller may not see are
    reported as not found.
    """
    page = db.session.execute(
        select(Page).where(
            Page.tenant_id == tenant_id,
            func.lower(Page.slug) == slug.lower(),
        )
    ).scalar_one_or_none()

    redirected_from = None
    if page is None:
        page = resolve_redirect(tenant_id=tenant_id, slug=slug)
        redirected_from = slug if page is not None else None

    if page is None or not is_visible(page, caller):
        raise NotFoundError(f'Page with slug "{slug}" not found')

    return page, redirected_from


def validate_page_slug(
    *,
    tenant_id: str,
    slug: Any,
    exclude_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Pre-flight check for the slug editor. Never raises for a bad slug,
    it reports it.
    """
    try:
        assert_page_slug(tenant_id=tenant_id, slug=slug, exclude_id=exclude_id)
    except NavigationError as exc:
        result = {"is_valid": False, "message": exc.message}
        suggested = exc.extra.get("suggested_slug")
        if suggested:
            result["suggested_slug"] = suggested
        return result

    return {"is_valid": True, "message": "Slug is available"}

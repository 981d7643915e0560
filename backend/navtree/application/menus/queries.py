from typing import Any, Dict, List, Tuple

from sqlalchemy import func, select

from navtree.extensions import db
from navtree.application.tree_ops import get_entity
from navtree.domain.access import CallerContext, filter_visible
from navtree.domain.exceptions import NotFoundError, ValidationError
from navtree.domain.hierarchy import TreeNode, build_hierarchy, sibling_sort_key
from navtree.domain.lifecycle.menu import ACTIVE, MENU_STATUSES
from navtree.models.menu import DashboardMenu


def get_menu(*, tenant_id: str, menu_id: str) -> DashboardMenu:
    return get_entity(DashboardMenu, tenant_id=tenant_id, entity_id=menu_id, label="Menu")


def list_menus(
    *,
    tenant_id: str,
    filters: Dict[str, Any],
    page: int,
    per_page: int,
) -> Tuple[List[DashboardMenu], int]:
    """Flat admin list in sibling order."""
    stmt = select(DashboardMenu).where(DashboardMenu.tenant_id == tenant_id)

    if status := filters.get("status"):
        if status not in MENU_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(MENU_STATUSES)}")
        stmt = stmt.where(DashboardMenu.status == status)

    if filters.get("parent_id") is not None:
        parent_id = filters["parent_id"]
        stmt = stmt.where(
            DashboardMenu.parent_id.is_(None) if parent_id == "null" else DashboardMenu.parent_id == parent_id
        )

    total = db.session.execute(
        select(func.count()).select_from(stmt.subquery())
    ).scalar_one()

    items = db.session.execute(
        stmt.order_by(
            DashboardMenu.order.asc(),
            DashboardMenu.created_at.asc(),
            DashboardMenu.id.asc(),
        )
        .offset((page - 1) * per_page)
        .limit(per_page)
    ).scalars().all()

    return list(items), total


def get_user_menus(*, tenant_id: str, caller: CallerContext) -> List[TreeNode]:
    """
    Sidebar for the caller: role, permission and feature flag filtering,
    then nesting. Children of a hidden menu are hidden with it.
    """
    menus = db.session.execute(
        select(DashboardMenu).where(DashboardMenu.tenant_id == tenant_id)
    ).scalars().all()

    return build_hierarchy(filter_visible(menus, caller), order_attr=DashboardMenu.ORDER_FIELD)


def find_menu_by_route(*, tenant_id: str, route: str) -> DashboardMenu:
    """
    Page configuration for dynamic page rendering. The first active entry
    in sibling order wins when several share a route.
    """
    menus = db.session.execute(
        select(DashboardMenu).where(
            DashboardMenu.tenant_id == tenant_id,
            DashboardMenu.route == route,
            DashboardMenu.status == ACTIVE,
        )
    ).scalars().all()

    if not menus:
        raise NotFoundError(f"Menu not found for route: {route}")

    return min(menus, key=lambda menu: sibling_sort_key(menu))

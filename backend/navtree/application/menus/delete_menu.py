from typing import Optional

from navtree.extensions import db
from navtree.application.tree_ops import assert_no_children, get_entity
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

CHILDREN_EXIST_MESSAGE = (
    "Cannot delete menu with children. Delete children first or reassign them."
)


def remove_menu(*, tenant_id: str, menu_id: str, actor_id: Optional[str]) -> None:
    menu = get_entity(DashboardMenu, tenant_id=tenant_id, entity_id=menu_id, label="Menu", lock=True)

    assert_no_children(
        DashboardMenu,
        tenant_id=tenant_id,
        entity_id=menu.id,
        message=CHILDREN_EXIST_MESSAGE,
    )

    db.session.delete(menu)
    db.session.flush()

    log_action(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="menu.delete",
        entity_type="menu",
        entity_id=menu_id,
        payload={"key": menu.key},
    )


def delete_menu(*, tenant_id: str, menu_id: str, actor_id: Optional[str]) -> None:
    with transactional():
        remove_menu(tenant_id=tenant_id, menu_id=menu_id, actor_id=actor_id)

from typing import Optional

from navtree.application.tree_ops import get_entity
from navtree.domain.lifecycle.menu import ACTIVE, INACTIVE
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

# Menus share the publish/unpublish vocabulary with pages
MENU_STATUS_ACTIONS = {
    "publish": ACTIVE,
    "unpublish": INACTIVE,
}


def transition_menu(
    *,
    tenant_id: str,
    menu_id: str,
    action: str,
    actor_id: Optional[str],
) -> DashboardMenu:
    """
    publish -> ACTIVE, unpublish -> INACTIVE, toggle flips. Publishing an
    active menu (or unpublishing an inactive one) is a no-op that succeeds.
    Runs inside the caller's transaction.
    """
    menu = get_entity(DashboardMenu, tenant_id=tenant_id, entity_id=menu_id, label="Menu", lock=True)

    if action == "toggle":
        to_status = INACTIVE if menu.status == ACTIVE else ACTIVE
    else:
        to_status = MENU_STATUS_ACTIONS[action]

    from_status = menu.status
    menu.status = to_status

    log_action(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action=f"menu.{action}",
        entity_type="menu",
        entity_id=menu.id,
        payload={"from": from_status, "to": to_status},
    )
    return menu


def set_menu_status(*, tenant_id: str, menu_id: str, action: str, actor_id: Optional[str]) -> DashboardMenu:
    with transactional():
        return transition_menu(tenant_id=tenant_id, menu_id=menu_id, action=action, actor_id=actor_id)

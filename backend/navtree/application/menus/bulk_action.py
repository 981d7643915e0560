from typing import Any, Dict, Optional

from navtree.application.menus.delete_menu import remove_menu
from navtree.application.menus.set_menu_status import transition_menu
from navtree.application.tree_ops import deepest_first, parse_bulk_ids, run_bulk
from navtree.domain.exceptions import ValidationError
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

ALLOWED_ACTIONS = {"publish", "unpublish", "delete"}


def bulk_menu_action(
    *,
    tenant_id: str,
    menu_ids: Any,
    action: str,
    actor_id: Optional[str],
) -> Dict[str, Any]:
    """Independent per-item activate / deactivate / delete with a partial-success report."""
    if action not in ALLOWED_ACTIONS:
        raise ValidationError(f"Invalid action: {action}")

    ids = parse_bulk_ids(menu_ids)

    with transactional():
        if action == "delete":
            ids = deepest_first(DashboardMenu, tenant_id=tenant_id, ids=ids)

            def apply(menu_id):
                remove_menu(tenant_id=tenant_id, menu_id=menu_id, actor_id=actor_id)
        else:
            def apply(menu_id):
                transition_menu(tenant_id=tenant_id, menu_id=menu_id, action=action, actor_id=actor_id)

        result = run_bulk(ids=ids, action=action, apply=apply)

        log_action(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action=f"menu.bulk_{action}",
            entity_type="menu",
            entity_id="*",
            payload={
                "succeeded": len(result["succeeded"]),
                "failed": len(result["failed"]),
            },
        )

    return result

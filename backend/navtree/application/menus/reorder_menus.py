from typing import Any, List, Optional

from navtree.application.tree_ops import apply_reorder
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional


def reorder_menus(
    *,
    tenant_id: str,
    updates: Any,
    actor_id: Optional[str],
) -> List[DashboardMenu]:
    """All-or-nothing order update for a batch of menu entries."""
    with transactional():
        menus = apply_reorder(DashboardMenu, tenant_id=tenant_id, updates=updates, label="Menu")

        log_action(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action="menu.reorder",
            entity_type="menu",
            entity_id="*",
            payload={"updates": [{"id": m.id, "order": m.order} for m in menus]},
        )

    return menus

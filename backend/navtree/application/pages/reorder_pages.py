from typing import Any, List, Optional

from navtree.application.tree_ops import apply_reorder
from navtree.models.page import Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional


def reorder_pages(
    *,
    tenant_id: str,
    updates: Any,
    actor_id: Optional[str],
) -> List[Page]:
    """
    Atomic batch update of display_order: every listed page is updated or
    none is (an unknown id aborts the whole batch).
    """
    with transactional():
        pages = apply_reorder(Page, tenant_id=tenant_id, updates=updates, label="Page")

        log_action(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action="page.reorder",
            entity_type="page",
            entity_id="*",
            payload={"updates": [{"id": p.id, "order": p.display_order} for p in pages]},
        )

    return pages

from typing import Any, Dict, List, Optional

from navtree.application.pages.delete_page import remove_page
from navtree.application.pages.publish_page import transition_page
from navtree.application.tree_ops import deepest_first, parse_bulk_ids, run_bulk
from navtree.domain.exceptions import ValidationError
from navtree.models.page import Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

ALLOWED_ACTIONS = {"publish", "unpublish", "archive", "delete"}


def bulk_page_action(
    *,
    tenant_id: str,
    page_ids: Any,
    action: str,
    actor_id: Optional[str],
) -> Dict[str, Any]:
    """
    Bulk publish / unpublish / archive / delete.

    Unlike reorder this is a batch of independent operations: each page
    succeeds or fails on its own and the report lists both.
    """
    if action not in ALLOWED_ACTIONS:
        raise ValidationError(f"Invalid action: {action}")

    ids: List[str] = parse_bulk_ids(page_ids)

    with transactional():
        if action == "delete":
            ids = deepest_first(Page, tenant_id=tenant_id, ids=ids)

            def apply(page_id):
                remove_page(tenant_id=tenant_id, page_id=page_id, actor_id=actor_id)
        else:
            def apply(page_id):
                transition_page(tenant_id=tenant_id, page_id=page_id, action=action, actor_id=actor_id)

        result = run_bulk(ids=ids, action=action, apply=apply)

        # Audit once per batch
        log_action(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action=f"page.bulk_{action}",
            entity_type="page",
            entity_id="*",
            payload={
                "succeeded": len(result["succeeded"]),
                "failed": len(result["failed"]),
            },
        )

    return result

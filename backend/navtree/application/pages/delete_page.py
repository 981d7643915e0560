from typing import Optional

from flask import current_app

from navtree.extensions import db
from navtree.application.pages.redirects import drop_redirects_for_page
from navtree.application.tree_ops import assert_no_children, get_entity
from navtree.models.page import Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

CHILDREN_EXIST_MESSAGE = (
    "Cannot delete page with child pages. Please reassign or delete child pages first."
)


def remove_page(*, tenant_id: str, page_id: str, actor_id: Optional[str]) -> None:
    """
    Hard-delete one page inside the caller's transaction.

    Blocked while child pages exist; redirects that pointed at the page
    go with it.
    """
    page = get_entity(Page, tenant_id=tenant_id, entity_id=page_id, label="Page", lock=True)

    assert_no_children(Page, tenant_id=tenant_id, entity_id=page.id, message=CHILDREN_EXIST_MESSAGE)

    dropped = drop_redirects_for_page(tenant_id=tenant_id, page_id=page.id)

    db.session.delete(page)
    db.session.flush()

    log_action(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="page.delete",
        entity_type="page",
        entity_id=page_id,
        payload={
            "slug": page.slug,
            "redirects_removed": dropped,
        },
    )
    current_app.logger.info("Page %s (%s) deleted", page_id, page.slug)


def delete_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: Optional[str],
) -> None:
    with transactional():
        remove_page(tenant_id=tenant_id, page_id=page_id, actor_id=actor_id)

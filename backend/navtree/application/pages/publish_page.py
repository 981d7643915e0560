from typing import Optional

from navtree.application.tree_ops import get_entity
from navtree.domain.lifecycle.page import ARCHIVED, DRAFT, PUBLISHED, assert_page_transition
from navtree.models.base import utc_now
from navtree.models.page import Page
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

# action name -> target status
PAGE_STATUS_ACTIONS = {
    "publish": PUBLISHED,
    "unpublish": DRAFT,
    "archive": ARCHIVED,
}


def transition_page(
    *,
    tenant_id: str,
    page_id: str,
    action: str,
    actor_id: Optional[str],
) -> Page:
    """
    Apply a lifecycle action inside the caller's transaction.

    Responsibilities:
    - row-level lock
    - lifecycle transition enforcement
    - published_at bookkeeping
    - audit logging
    """
    to_status = PAGE_STATUS_ACTIONS[action]

    # 1️⃣ Fetch page with row-level lock
    page = get_entity(Page, tenant_id=tenant_id, entity_id=page_id, label="Page", lock=True)

    # 2️⃣ Lifecycle transition enforcement
    assert_page_transition(from_status=page.status, to_status=to_status)

    # 3️⃣ Apply state change
    from_status = page.status
    page.status = to_status
    if to_status == PUBLISHED:
        page.published_at = utc_now()

    # 4️⃣ Audit logging
    log_action(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action=f"page.{action}",
        entity_type="page",
        entity_id=page.id,
        payload={"from": from_status, "to": to_status},
    )
    return page


def publish_page(*, tenant_id: str, page_id: str, actor_id: Optional[str]) -> Page:
    """Publish a page and stamp published_at."""
    with transactional():
        return transition_page(tenant_id=tenant_id, page_id=page_id, action="publish", actor_id=actor_id)


def unpublish_page(*, tenant_id: str, page_id: str, actor_id: Optional[str]) -> Page:
    """Back to DRAFT; published_at is kept so old links keep redirecting."""
    with transactional():
        return transition_page(tenant_id=tenant_id, page_id=page_id, action="unpublish", actor_id=actor_id)


def archive_page(*, tenant_id: str, page_id: str, actor_id: Optional[str]) -> Page:
    with transactional():
        return transition_page(tenant_id=tenant_id, page_id=page_id, action="archive", actor_id=actor_id)

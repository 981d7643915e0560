from typing import Set

from navtree.domain.exceptions import ValidationError

DRAFT = "DRAFT"
PUBLISHED = "PUBLISHED"
ARCHIVED = "ARCHIVED"

PAGE_STATUSES = (DRAFT, PUBLISHED, ARCHIVED)

# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: dict[str, Set[str]] = {
    DRAFT: {PUBLISHED, ARCHIVED},
    PUBLISHED: {DRAFT, ARCHIVED},
    ARCHIVED: {DRAFT},
}


def assert_page_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for status changes.

    Re-applying the current status is allowed, so bulk actions over a
    mixed selection do not fail on items already in the target state.
    """
    if from_status == to_status:
        return

    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise ValidationError(
            f"Illegal page transition: {from_status} → {to_status}"
        )

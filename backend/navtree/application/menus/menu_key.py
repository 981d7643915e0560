from typing import Any, Dict, Optional

from navtree.application.tree_ops import is_slug_taken
from navtree.domain.exceptions import NavigationError
from navtree.domain.slugs import assert_slug
from navtree.models.menu import DashboardMenu


def assert_menu_key(*, tenant_id: str, key: Any, exclude_id: Optional[str] = None) -> None:
    """
    Menu keys follow the page slug format and are unique per tenant.
    They name sidebar entries, not public routes, so reserved routes
    such as "dashboard" are fine here.
    """
    assert_slug(
        key,
        is_taken=lambda candidate: is_slug_taken(
            DashboardMenu, tenant_id=tenant_id, slug=candidate, exclude_id=exclude_id
        ),
        check_reserved=False,
        label="Menu key",
    )


def validate_menu_key(*, tenant_id: str, key: Any, exclude_id: Optional[str] = None) -> Dict[str, Any]:
    try:
        assert_menu_key(tenant_id=tenant_id, key=key, exclude_id=exclude_id)
    except NavigationError as exc:
        result = {"is_valid": False, "message": exc.message}
        if exc.extra.get("suggested_slug"):
            result["suggested_key"] = exc.extra["suggested_slug"]
        return result

    return {"is_valid": True, "message": "Key is available"}

from dataclasses import dataclass, field, replace
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

SUPER_PERMISSION = "*:*"


def _no_features(name: str) -> bool:
    return False


@dataclass(frozen=True)
class AccessRule:
    """
    Everything the access filter needs to know about one page or menu.

    live: the entity is PUBLISHED (pages) or ACTIVE (menus)
    requires_auth: PRIVATE visibility
    """

    live: bool = True
    requires_auth: bool = False
    permissions: FrozenSet[str] = frozenset()
    roles: FrozenSet[str] = frozenset()
    feature_flag: Optional[str] = None


@dataclass(frozen=True)
class CallerContext:
    """
    Explicit description of whoever is asking.

    admin_read lets the caller see drafts / inactive items; it is only set
    for callers that hold the kind's read permission and asked for it.
    """

    user_id: Optional[str] = None
    tenant_id: Optional[str] = None
    roles: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()
    admin_read: bool = False
    feature_enabled: Callable[[str], bool] = field(default=_no_features, compare=False)

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None

    def can(self, permission: str) -> bool:
        return has_permission(self.permissions, permission)

    def with_admin_read(self, enabled: bool = True) -> "CallerContext":
        return replace(self, admin_read=enabled)


ANONYMOUS = CallerContext()


def has_permission(held: Iterable[str], required: str) -> bool:
    """
    True when `held` grants `required`.

    "*:*" grants everything, "pages:*" grants every pages permission.
    """
    held = set(held)
    if required in held or SUPER_PERMISSION in held:
        return True
    resource = required.split(":", 1)[0]
    return f"{resource}:*" in held


def has_any_permission(held: Iterable[str], required: Iterable[str]) -> bool:
    held = set(held)
    return any(has_permission(held, permission) for permission in required)


def rule_for(entity: Any) -> AccessRule:
    if isinstance(entity, AccessRule):
        return entity
    return entity.access_rule()


def is_visible(entity: Any, caller: CallerContext) -> bool:
    """
    Pure visibility predicate, a conjunction of independent gates.
    """
    rule = rule_for(entity)

    # Status
    if not rule.live and not caller.admin_read:
        return False

    # Visibility
    if rule.requires_auth and not caller.authenticated:
        return False

    # Permissions (any one of them)
    if rule.permissions and not has_any_permission(caller.permissions, rule.permissions):
        return False

    # Roles
    if rule.roles and not (set(rule.roles) & set(caller.roles)):
        return False

    # Feature flag
    if rule.feature_flag and not caller.feature_enabled(rule.feature_flag):
        return False

    return True


def filter_visible(items: Iterable[Any], caller: CallerContext) -> List[Any]:
    return [item for item in items if is_visible(item, caller)]

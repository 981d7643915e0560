from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from navtree.domain.access import CallerContext
from navtree.domain.exceptions import AuthenticationRequiredError, PermissionDeniedError
from navtree.models.role import Role
from navtree.models.user import User


def load_caller() -> CallerContext:
    """
    Build the explicit caller context for the current request.

    Anonymous requests get an unauthenticated context that still knows the
    tenant's feature flags. Permissions come from the user's role row, not
    from the token, so revoking a permission takes effect immediately.
    """
    cached = g.get("current_caller")
    if cached is not None:
        return cached

    tenant = g.current_tenant

    verify_jwt_in_request(optional=True)
    user_id = get_jwt_identity()

    if not user_id:
        caller = CallerContext(tenant_id=tenant.id, feature_enabled=tenant.has_feature)
        g.current_caller = caller
        return caller

    if get_jwt().get("tenant_id") != tenant.id:
        raise PermissionDeniedError("Tenant mismatch")

    user = User.query.filter_by(id=user_id, tenant_id=tenant.id, is_active=True).first()
    if not user:
        raise AuthenticationRequiredError("User account not found or disabled")

    role = Role.query.filter_by(tenant_id=tenant.id, name=user.role).first()
    permissions = frozenset(role.permissions or ()) if role else frozenset()

    caller = CallerContext(
        user_id=user.id,
        tenant_id=tenant.id,
        roles=frozenset({user.role}),
        permissions=permissions,
        feature_enabled=tenant.has_feature,
    )
    g.current_caller = caller
    return caller


def load_viewer(read_permission: str, *, preview: bool = False) -> CallerContext:
    """
    Caller context for read endpoints. Drafts / inactive items are only
    included when the caller asked for a preview and may read the kind.
    """
    caller = load_caller()
    if preview and caller.can(read_permission):
        return caller.with_admin_read()
    return caller

from functools import wraps
from flask import g

from navtree.domain.access import has_any_permission
from navtree.domain.exceptions import (
    AuthenticationRequiredError,
    PermissionDeniedError,
    ValidationError,
)
from navtree.utils.caller import load_caller


def tenant_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        tenant = g.get("current_tenant")
        if not tenant:
            raise ValidationError("Tenant context missing")

        # Resolves the caller and rejects tokens issued for another tenant
        load_caller()

        return fn(*args, **kwargs)
    return wrapper


def permission_required(*permissions):
    """
    Caller must hold at least one of `permissions`
    (wildcards such as "pages:*" and "*:*" count).
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            caller = load_caller()

            if not caller.authenticated:
                raise AuthenticationRequiredError("Authentication required")

            if not has_any_permission(caller.permissions, permissions):
                raise PermissionDeniedError(
                    f"Missing required permission: {' or '.join(permissions)}"
                )

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def feature_enabled(feature_name):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tenant = g.current_tenant

            if not tenant.has_feature(feature_name):
                raise PermissionDeniedError(
                    f"Feature '{feature_name}' is disabled for this tenant"
                )

            return fn(*args, **kwargs)
        return wrapper
    return decorator

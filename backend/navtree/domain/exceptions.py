from typing import Any, Dict, Optional


class NavigationError(Exception):
    """
    Base class for every error the navigation domain reports to callers.

    status_code and code drive the JSON error response, extra is merged
    into the response body (e.g. suggested_slug).
    """

    status_code = 400
    code = "NavigationError"

    def __init__(self, message: str, *, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.extra}


class ValidationError(NavigationError):
    code = "ValidationError"


class InvalidSlugFormatError(ValidationError):
    code = "InvalidSlugFormat"


class ReservedRouteError(ValidationError):
    code = "ReservedRoute"


class SelfParentError(ValidationError):
    code = "SelfParent"


class CircularReferenceError(ValidationError):
    code = "CircularReference"


class ChildrenExistError(ValidationError):
    code = "ChildrenExist"


class AuthenticationRequiredError(NavigationError):
    status_code = 401
    code = "AuthenticationRequired"


class PermissionDeniedError(NavigationError):
    status_code = 403
    code = "PermissionDenied"


class NotFoundError(NavigationError):
    status_code = 404
    code = "NotFound"


class SlugConflictError(NavigationError):
    status_code = 409
    code = "SlugConflict"

    def __init__(self, message: str, *, suggested_slug: Optional[str] = None):
        extra = {"suggested_slug": suggested_slug} if suggested_slug else None
        super().__init__(message, extra=extra)
        self.suggested_slug = suggested_slug


class ConcurrencyConflictError(NavigationError):
    """Raised when a write races another one; clients refresh and retry."""

    status_code = 409
    code = "ConcurrencyConflict"

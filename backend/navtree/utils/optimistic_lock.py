from flask import request
from datetime import timezone
from dateutil.parser import parse, ParserError

from navtree.domain.exceptions import ConcurrencyConflictError, ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises ConcurrencyConflictError if the entity has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts or entity.updated_at is None:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, ValueError, OverflowError):
        raise ValidationError("Invalid If-Unmodified-Since header")

    # HTTP dates carry whole seconds only
    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        raise ConcurrencyConflictError(
            "Conflict detected. Resource has been modified."
        )

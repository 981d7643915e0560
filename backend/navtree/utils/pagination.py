# navtree/utils/pagination.py
from typing import Tuple

from flask import current_app, request

from navtree.domain.exceptions import ValidationError


def pagination_args() -> Tuple[int, int]:
    """
    Read ?page=&per_page= with the configured default and ceiling.
    """
    default = current_app.config.get("DEFAULT_PER_PAGE", 20)
    ceiling = current_app.config.get("MAX_PER_PAGE", 100)

    page = request.args.get("page", 1, type=int)
    per_page = request.args.get("per_page", default, type=int)

    if page is None or page < 1:
        raise ValidationError("page must be a positive integer")

    if per_page is None or per_page <= 0:
        raise ValidationError("Limit must be greater than zero")

    return page, min(per_page, ceiling)


def bool_arg(name: str):
    """?flag=true|false -> True/False, absent -> None."""
    raw = request.args.get(name)
    if raw is None:
        return None

    lowered = raw.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"{name} must be true or false")

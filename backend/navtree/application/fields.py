"""Request payload coercion shared by the page and menu use cases."""
from typing import Any, Dict, Iterable, List, Optional

from navtree.domain.exceptions import ValidationError


def required_str(data: Dict[str, Any], field: str, *, max_length: Optional[int] = None) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return optional_str(data, field, max_length=max_length)


def optional_str(data: Dict[str, Any], field: str, *, max_length: Optional[int] = None) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value or None


def string_list(data: Dict[str, Any], field: str) -> List[str]:
    value = data.get(field)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ValidationError(f"{field} must be a list of non-empty strings")
    return list(dict.fromkeys(value))


def choice(data: Dict[str, Any], field: str, choices: Iterable[str], *, default: Optional[str] = None) -> Optional[str]:
    value = data.get(field, default)
    if value is None:
        return None
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(f"{field} must be one of {', '.join(choices)}")
    return value


def boolean(data: Dict[str, Any], field: str, *, default: Optional[bool] = None) -> Optional[bool]:
    value = data.get(field, default)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean")
    return value


def order_value(data: Dict[str, Any], field: str) -> Optional[int]:
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer")
    return value


def optional_id(data: Dict[str, Any], field: str) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a string id or null")
    return value

import re
from typing import Callable, Iterable, Optional

from navtree.domain.exceptions import (
    InvalidSlugFormatError,
    ReservedRouteError,
    SlugConflictError,
)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
MAX_SLUG_LENGTH = 200
MAX_SUGGESTION_ATTEMPTS = 1000

# Top-level routes owned by the application itself
RESERVED_ROUTES = frozenset({
    "dashboard",
    "login",
    "signup",
    "logout",
    "api",
    "auth",
    "admin",
    "settings",
    "profile",
    "users",
    "roles",
    "permissions",
    "notifications",
    "blog",
    "pages",
    "landing",
    "uploads",
    "_next",
    "static",
})

INVALID_FORMAT_MESSAGE = (
    "Invalid slug format. Use lowercase letters, numbers, and hyphens only."
)


def generate_slug(title: str) -> str:
    """
    Build a URL-safe slug from a human title.

    >>> generate_slug("The Ultimate Guide to Next.js 14!")
    'the-ultimate-guide-to-nextjs-14'
    """
    slug = (title or "").strip().lower()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")[:MAX_SLUG_LENGTH].strip("-")


def is_valid_slug_format(slug: Optional[str]) -> bool:
    if not isinstance(slug, str) or not slug or len(slug) > MAX_SLUG_LENGTH:
        return False
    return bool(SLUG_PATTERN.fullmatch(slug))


def is_reserved_route(slug: str, extra: Iterable[str] = ()) -> bool:
    reserved = RESERVED_ROUTES | {route.lower() for route in extra}
    return slug.lower() in reserved


def suggest_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """
    First free "<base>-N" for N = 2, 3, ...
    """
    for n in range(2, MAX_SUGGESTION_ATTEMPTS + 2):
        candidate = f"{base}-{n}"
        if not is_taken(candidate):
            return candidate
    raise SlugConflictError(f"No free slug found for '{base}'")


def assert_slug(
    slug: Optional[str],
    *,
    is_taken: Callable[[str], bool],
    check_reserved: bool = True,
    reserved_extra: Iterable[str] = (),
    label: str = "Slug",
) -> None:
    """
    Format, reserved route and uniqueness checks, in that order.
    Raises before anything is written.
    """
    if not is_valid_slug_format(slug):
        raise InvalidSlugFormatError(INVALID_FORMAT_MESSAGE)

    if check_reserved and is_reserved_route(slug, reserved_extra):
        raise ReservedRouteError(f'{label} "{slug}" conflicts with system route')

    if is_taken(slug):
        raise SlugConflictError(
            f'{label} "{slug}" is already in use',
            suggested_slug=suggest_slug(slug, is_taken),
        )

from navtree.domain.exceptions import ValidationError

ACTIVE = "ACTIVE"
INACTIVE = "INACTIVE"

MENU_STATUSES = (ACTIVE, INACTIVE)

WIDGET_BASED = "WIDGET_BASED"
HARDCODED = "HARDCODED"
CUSTOM = "CUSTOM"
EXTERNAL = "EXTERNAL"

MENU_PAGE_TYPES = (WIDGET_BASED, HARDCODED, CUSTOM, EXTERNAL)


def assert_menu_status(status: str) -> None:
    if status not in MENU_STATUSES:
        raise ValidationError(f"Invalid menu status: {status}")


def assert_menu_page_config(*, page_type: str, page_identifier, component_path) -> None:
    """
    A menu entry must carry what its page type needs to render.
    """
    if page_type not in MENU_PAGE_TYPES:
        raise ValidationError(f"Invalid page type: {page_type}")

    if page_type == WIDGET_BASED and not page_identifier:
        raise ValidationError("page_identifier is required for WIDGET_BASED page type")

    if page_type == HARDCODED and not component_path:
        raise ValidationError("component_path is required for HARDCODED page type")

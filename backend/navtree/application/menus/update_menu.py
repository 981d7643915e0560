from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from navtree.extensions import db
from navtree.application import fields
from navtree.application.menus.menu_key import assert_menu_key
from navtree.application.tree_ops import conflict_from_integrity_error, get_entity, validate_parent
from navtree.domain.exceptions import ValidationError
from navtree.domain.lifecycle.menu import MENU_PAGE_TYPES, MENU_STATUSES, assert_menu_page_config
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional

NOT_NULL_FIELDS = ("label", "route", "page_type", "status", "order")


def _read_updates(data: Dict[str, Any]) -> Dict[str, Any]:
    readers = {
        "label": lambda: fields.required_str(data, "label", max_length=200),
        "route": lambda: fields.required_str(data, "route", max_length=512),
        "icon": lambda: fields.optional_str(data, "icon", max_length=100),
        "description": lambda: fields.optional_str(data, "description", max_length=500),
        "badge": lambda: fields.optional_str(data, "badge", max_length=50),
        "order": lambda: fields.order_value(data, "order"),
        "status": lambda: fields.choice(data, "status", MENU_STATUSES),
        "page_type": lambda: fields.choice(data, "page_type", MENU_PAGE_TYPES),
        "page_identifier": lambda: fields.optional_str(data, "page_identifier", max_length=200),
        "component_path": lambda: fields.optional_str(data, "component_path", max_length=512),
        "required_permissions": lambda: fields.string_list(data, "required_permissions"),
        "required_roles": lambda: fields.string_list(data, "required_roles"),
        "feature_flag": lambda: fields.optional_str(data, "feature_flag", max_length=100),
    }
    updates = {name: read() for name, read in readers.items() if name in data}

    for name in NOT_NULL_FIELDS:
        if name in updates and updates[name] is None:
            raise ValidationError(f"{name} cannot be null")
    return updates


def update_menu(
    *,
    tenant_id: str,
    menu_id: str,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> DashboardMenu:
    """
    Partial update of a menu entry. parent_id changes go through the
    cycle guard, key changes through the key validator.
    """
    updates = _read_updates(data)

    try:
        with transactional():
            menu = get_entity(DashboardMenu, tenant_id=tenant_id, entity_id=menu_id, label="Menu", lock=True)

            changed_fields: list[str] = []

            if "parent_id" in data:
                new_parent = fields.optional_id(data, "parent_id")
                if new_parent != menu.parent_id:
                    validate_parent(
                        DashboardMenu,
                        tenant_id=tenant_id,
                        entity_id=menu.id,
                        parent_id=new_parent,
                        label="Menu",
                    )
                    menu.parent_id = new_parent
                    changed_fields.append("parent_id")

            if "key" in data and data["key"] != menu.key:
                assert_menu_key(tenant_id=tenant_id, key=data["key"], exclude_id=menu.id)
                menu.key = data["key"]
                changed_fields.append("key")

            # Page config is checked against the merged state
            assert_menu_page_config(
                page_type=updates.get("page_type", menu.page_type),
                page_identifier=updates.get("page_identifier", menu.page_identifier),
                component_path=updates.get("component_path", menu.component_path),
            )

            for field, value in updates.items():
                if getattr(menu, field) != value:
                    setattr(menu, field, value)
                    changed_fields.append(field)

            if not changed_fields:
                raise ValidationError("No valid fields provided for update")

            db.session.flush()

            log_action(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action="menu.update",
                entity_type="menu",
                entity_id=menu.id,
                payload={"fields": sorted(changed_fields)},
            )

        return menu

    except IntegrityError as exc:
        raise conflict_from_integrity_error(
            DashboardMenu, exc, value=data.get("key"), label="Menu key"
        ) from exc

from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from navtree.extensions import db
from navtree.application import fields
from navtree.application.menus.menu_key import assert_menu_key
from navtree.application.tree_ops import conflict_from_integrity_error, sibling_count, validate_parent
from navtree.domain.lifecycle.menu import (
    ACTIVE,
    HARDCODED,
    MENU_PAGE_TYPES,
    MENU_STATUSES,
    assert_menu_page_config,
)
from navtree.models.menu import DashboardMenu
from navtree.utils.audit import log_action
from navtree.utils.transaction import transactional


def create_menu(
    *,
    tenant_id: str,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> DashboardMenu:
    """
    Create a dashboard menu entry.

    Edge cases handled:
    - Missing key / label / route
    - Bad key format, duplicate key (with suggestion)
    - Unknown parent
    - Page type without the identifier or component it needs
    """
    key = data.get("key")
    label = fields.required_str(data, "label", max_length=200)
    route = fields.required_str(data, "route", max_length=512)
    parent_id = fields.optional_id(data, "parent_id")
    page_type = fields.choice(data, "page_type", MENU_PAGE_TYPES, default=HARDCODED)
    page_identifier = fields.optional_str(data, "page_identifier", max_length=200)
    component_path = fields.optional_str(data, "component_path", max_length=512)
    status = fields.choice(data, "status", MENU_STATUSES, default=ACTIVE)
    order = fields.order_value(data, "order")

    assert_menu_page_config(
        page_type=page_type,
        page_identifier=page_identifier,
        component_path=component_path,
    )

    try:
        with transactional():
            assert_menu_key(tenant_id=tenant_id, key=key)
            validate_parent(
                DashboardMenu,
                tenant_id=tenant_id,
                entity_id=None,
                parent_id=parent_id,
                label="Menu",
            )

            menu = DashboardMenu()
            menu.tenant_id = tenant_id
            menu.key = key
            menu.label = label
            menu.route = route
            menu.icon = fields.optional_str(data, "icon", max_length=100)
            menu.description = fields.optional_str(data, "description", max_length=500)
            menu.badge = fields.optional_str(data, "badge", max_length=50)
            menu.parent_id = parent_id
            menu.status = status
            menu.page_type = page_type
            menu.page_identifier = page_identifier
            menu.component_path = component_path
            menu.required_permissions = fields.string_list(data, "required_permissions")
            menu.required_roles = fields.string_list(data, "required_roles")
            menu.feature_flag = fields.optional_str(data, "feature_flag", max_length=100)

            if order is None:
                order = sibling_count(DashboardMenu, tenant_id=tenant_id, parent_id=parent_id)
            menu.order = order

            db.session.add(menu)
            db.session.flush()

            log_action(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action="menu.create",
                entity_type="menu",
                entity_id=menu.id,
                payload={"key": menu.key, "parent_id": menu.parent_id, "order": menu.order},
            )

        return menu

    except IntegrityError as exc:
        raise conflict_from_integrity_error(DashboardMenu, exc, value=key, label="Menu key") from exc

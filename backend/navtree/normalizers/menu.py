from ._dates import iso


def normalize_menu(menu, admin=False):
    data = {
        "id": menu.id,
        "key": menu.key,
        "label": menu.label,
        "icon": menu.icon,
        "route": menu.route,
        "description": menu.description,
        "badge": menu.badge,
        "parent_id": menu.parent_id,
        "order": menu.order,
        "page_type": menu.page_type,
        "page_identifier": menu.page_identifier,
        "component_path": menu.component_path,
    }

    if admin:
        data["status"] = menu.status
        data["is_active"] = menu.is_active
        data["required_permissions"] = list(menu.required_permissions or [])
        data["required_roles"] = list(menu.required_roles or [])
        data["feature_flag"] = menu.feature_flag
        data["created_at"] = iso(menu.created_at)
        data["updated_at"] = iso(menu.updated_at)

    return data


def normalize_route_config(menu):
    return {
        "page_type": menu.page_type,
        "page_identifier": menu.page_identifier,
        "component_path": menu.component_path,
        "required_permissions": list(menu.required_permissions or []),
        "required_roles": list(menu.required_roles or []),
    }

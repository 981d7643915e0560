from ._dates import iso


def normalize_page(page, admin=False):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "content": page.content,
        "excerpt": page.excerpt,
        "meta_title": page.meta_title,
        "meta_description": page.meta_description,
        "custom_css": page.custom_css,
        "parent_id": page.parent_id,
        "display_order": page.display_order,
        "status": page.status,
        "visibility": page.visibility,
        "show_in_navigation": page.show_in_navigation,
        "published_at": iso(page.published_at),
    }

    if admin:
        data["required_permissions"] = list(page.required_permissions or [])
        data["required_roles"] = list(page.required_roles or [])
        data["feature_flag"] = page.feature_flag
        data["created_at"] = iso(page.created_at)
        data["updated_at"] = iso(page.updated_at)

    return data


def normalize_page_node(page):
    """Navigation-sized page: just enough to render a link."""
    return {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "parent_id": page.parent_id,
        "display_order": page.display_order,
    }

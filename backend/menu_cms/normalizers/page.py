from .menu_type import normalize_menu_type


def normalize_file(page):
    if not page.has_file:
        return None

    return {
        "file_name": page.file_name,
        "original_file_name": page.original_file_name,
        "file_size": page.file_size,
        "file_mime_type": page.file_mime_type,
        "url": page.file_url,
    }


def normalize_page(page, admin=True, parent_title=None):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "menu_type": normalize_menu_type(page.menu_type) if page.menu_type else None,
        "menu_type_id": page.menu_type_id,
        "parent_id": page.parent_id,
        "parent": (
            {"id": page.parent_id, "title": parent_title}
            if page.parent_id and parent_title is not None
            else None
        ),
        "order": page.order,
        "content_kind": page.content_kind,
        "body": page.body,
        "external_url": page.external_url,
        "open_in_new_window": page.open_in_new_window,
        "file": normalize_file(page),
        "file_url": page.file_url,
        "enabled": page.enabled,
        "seo": {
            "window_title": page.window_title,
            "meta_keywords": page.meta_keywords,
            "meta_description": page.meta_description,
        },
    }

    if admin:
        data["created_by"] = page.created_by
        data["updated_by"] = page.updated_by
        data["created_at"] = page.created_at.isoformat() if page.created_at else None
        data["updated_at"] = page.updated_at.isoformat() if page.updated_at else None

    return data


def normalize_page_option(row):
    """Dropdown / parent-selection entry."""
    return {"id": row.id, "title": row.title}

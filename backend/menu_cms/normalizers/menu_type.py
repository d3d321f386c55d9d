def normalize_menu_type(menu_type, admin=False):
    data = {
        "id": menu_type.id,
        "name": menu_type.name,
    }

    if admin:
        data["created_at"] = menu_type.created_at.isoformat() if menu_type.created_at else None
        data["updated_at"] = menu_type.updated_at.isoformat() if menu_type.updated_at else None

    return data

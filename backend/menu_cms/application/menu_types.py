# menu_cms/application/menu_types.py
from typing import Any, Dict, Iterable, List
from flask import current_app
from sqlalchemy.exc import IntegrityError
from menu_cms.extensions import db
from menu_cms.models.menu_type import MenuType, MENU_TYPE_NAME_MAX
from menu_cms.models.page import CmsPage
from menu_cms.domain.exceptions import ConflictError, NotFoundError, ValidationError
from menu_cms.utils.transaction import transactional

NAME_TAKEN = "Menu type name already exists"


def _clean_name(data: Dict[str, Any]) -> str:
    name = data.get("name")
    name = name.strip() if isinstance(name, str) else ""

    if not name:
        raise ValidationError.for_field("name", "Menu type name is required")
    if len(name) > MENU_TYPE_NAME_MAX:
        raise ValidationError.for_field(
            "name", f"Menu type name cannot exceed {MENU_TYPE_NAME_MAX} characters"
        )
    return name


def list_menu_types() -> List[MenuType]:
    return MenuType.query.order_by(MenuType.name.asc()).all()


def get_menu_type(menu_type_id: str) -> MenuType:
    menu_type = db.session.get(MenuType, menu_type_id)
    if menu_type is None:
        raise NotFoundError("Menu type not found")
    return menu_type


def create_menu_type(*, actor_id: str, data: Dict[str, Any]) -> MenuType:
    name = _clean_name(data)

    if MenuType.query.filter_by(name=name).first():
        raise ConflictError(NAME_TAKEN)

    menu_type = MenuType()
    menu_type.name = name

    try:
        with transactional():
            db.session.add(menu_type)
    except IntegrityError as exc:
        raise ConflictError(NAME_TAKEN) from exc

    current_app.logger.info("Menu type %s created by %s", menu_type.id, actor_id)
    return menu_type


def update_menu_type(*, menu_type_id: str, actor_id: str, data: Dict[str, Any]) -> MenuType:
    menu_type = get_menu_type(menu_type_id)
    name = _clean_name(data)

    clash = MenuType.query.filter(MenuType.name == name, MenuType.id != menu_type.id).first()
    if clash:
        raise ConflictError(NAME_TAKEN)

    try:
        with transactional():
            menu_type.name = name
    except IntegrityError as exc:
        raise ConflictError(NAME_TAKEN) from exc

    current_app.logger.info("Menu type %s renamed by %s", menu_type.id, actor_id)
    return menu_type


def delete_menu_type(*, menu_type_id: str, actor_id: str) -> None:
    """Refuses while pages still belong to the menu type."""
    menu_type = get_menu_type(menu_type_id)

    in_use = CmsPage.query.filter_by(menu_type_id=menu_type.id).count()
    if in_use:
        raise ValidationError(
            f"Menu type is used by {in_use} page(s); move or delete them first"
        )

    with transactional():
        db.session.delete(menu_type)

    current_app.logger.info("Menu type %s deleted by %s", menu_type_id, actor_id)


def seed_default_menu_types(names: Iterable[str]) -> int:
    """Insert the given names, skipping ones that already exist."""
    existing = {name for (name,) in db.session.query(MenuType.name).all()}
    created = 0

    with transactional():
        for name in names:
            if name in existing:
                continue
            menu_type = MenuType()
            menu_type.name = name
            db.session.add(menu_type)
            existing.add(name)
            created += 1

    return created

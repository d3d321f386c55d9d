"""Helpers shared by the create and update use cases."""
from typing import List, Optional
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage, CONTENT, EXTERNAL_LINK, FILE
from menu_cms.models.menu_type import MenuType
from menu_cms.domain.exceptions import ConflictError, ValidationError

SLUG_TAKEN = "Slug already exists. Please choose a different slug."


def ensure_menu_type(menu_type_id: str) -> MenuType:
    menu_type = db.session.get(MenuType, menu_type_id)
    if menu_type is None:
        raise ValidationError.for_field("menu_type_id", "Menu type not found")
    return menu_type


def load_parent(parent_id: Optional[str]) -> Optional[CmsPage]:
    if parent_id is None:
        return None

    parent = db.session.get(CmsPage, parent_id)
    if parent is None:
        raise ValidationError.for_field("parent_id", "Parent page not found")
    return parent


def ensure_slug_free(slug: str, *, exclude_id: Optional[str] = None) -> None:
    query = CmsPage.query.filter(CmsPage.slug == slug)
    if exclude_id:
        query = query.filter(CmsPage.id != exclude_id)

    if query.first() is not None:
        raise ConflictError(SLUG_TAKEN)


def attach_file(page: CmsPage, meta: dict) -> None:
    page.content_kind = FILE
    for field, value in meta.items():
        setattr(page, field, value)


def drop_inactive_payload(page: CmsPage) -> List[str]:
    """
    Clear the fields that do not match ``content_kind``.

    Returns stored file paths released by the change, for deletion once the
    write has committed.
    """
    released: List[str] = []

    if page.content_kind != FILE and page.file_path:
        released.append(page.file_path)
    if page.content_kind != FILE:
        page.clear_file()

    if page.content_kind != EXTERNAL_LINK:
        page.external_url = None

    # Links and files may open in a new window; inline content cannot
    if page.content_kind == CONTENT:
        page.open_in_new_window = False
    else:
        page.body = ""

    return released

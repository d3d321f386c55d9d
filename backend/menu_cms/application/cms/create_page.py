from typing import Any, Dict, Optional
from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.datastructures import FileStorage
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage
from menu_cms.domain.exceptions import ConflictError, ValidationError
from menu_cms.domain.invariants.page import assert_page
from menu_cms.domain.slug import slugify
from menu_cms.utils.media import save_file, delete_file
from menu_cms.utils.transaction import transactional
from .validation import validate_page_data
from .content import (
    SLUG_TAKEN,
    attach_file,
    drop_inactive_payload,
    ensure_menu_type,
    ensure_slug_free,
    load_parent,
)

CREATE_FIELDS = (
    "title",
    "slug",
    "menu_type_id",
    "parent_id",
    "content_kind",
    "body",
    "external_url",
    "open_in_new_window",
    "enabled",
    "window_title",
    "meta_keywords",
    "meta_description",
)


def next_order() -> int:
    """Appends after every existing page, whatever its menu type."""
    max_order = db.session.query(db.func.max(CmsPage.order)).scalar() or 0
    return max_order + 1


def create_page(
    *,
    actor_id: str,
    data: Dict[str, Any],
    file: Optional[FileStorage] = None,
) -> CmsPage:
    """
    Create a page at the end of the global order.

    Edge cases handled:
    - Missing slug (derived from the title)
    - Duplicate slug
    - Unknown menu type or parent, parent in another menu type
    - Uploaded file removed again if the row cannot be written
    """
    cleaned = validate_page_data(data)

    if not cleaned.get("slug"):
        cleaned["slug"] = slugify(cleaned["title"])
        if not cleaned["slug"]:
            raise ValidationError.for_field(
                "slug", "Slug is required when the title has no usable characters"
            )

    ensure_menu_type(cleaned["menu_type_id"])
    ensure_slug_free(cleaned["slug"])
    parent = load_parent(cleaned.get("parent_id"))

    page = CmsPage()
    for field in CREATE_FIELDS:
        if field in cleaned:
            setattr(page, field, cleaned[field])
    page.created_by = actor_id
    page.updated_by = actor_id

    meta = save_file(file) if file is not None else None
    if meta:
        attach_file(page, meta)

    try:
        drop_inactive_payload(page)
        assert_page(page, parent)

        with transactional():
            page.order = next_order()
            db.session.add(page)
            db.session.flush()  # ensures page.id exists

    except IntegrityError as exc:
        # Unique slug lost a race with a concurrent create
        if meta:
            delete_file(meta["file_path"])
        raise ConflictError(SLUG_TAKEN) from exc

    except Exception:
        if meta:
            delete_file(meta["file_path"])
        raise

    current_app.logger.info("Page %s (%s) created by %s", page.id, page.slug, actor_id)
    return page

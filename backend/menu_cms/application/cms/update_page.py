from typing import Any, Dict, List, Optional
from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.datastructures import FileStorage
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage
from menu_cms.domain.exceptions import ConflictError, ValidationError
from menu_cms.domain.invariants.page import assert_page
from menu_cms.domain.invariants.hierarchy import assert_not_own_ancestor
from menu_cms.domain.slug import slugify
from menu_cms.utils.media import save_file, delete_file
from menu_cms.utils.transaction import transactional
from .validation import validate_page_data
from .queries import get_page
from .content import (
    SLUG_TAKEN,
    attach_file,
    drop_inactive_payload,
    ensure_menu_type,
    ensure_slug_free,
    load_parent,
)


ALLOWED_UPDATE_FIELDS = (
    "title",
    "slug",
    "menu_type_id",
    "parent_id",
    "order",
    "content_kind",
    "body",
    "external_url",
    "open_in_new_window",
    "enabled",
    "window_title",
    "meta_keywords",
    "meta_description",
)


def update_page(
    *,
    page_id: str,
    actor_id: str,
    data: Dict[str, Any],
    file: Optional[FileStorage] = None,
    remove_file: bool = False,
) -> CmsPage:
    """
    Update mutable fields on a page.

    Design rules:
    - Only whitelisted fields are mutable
    - Invariants always revalidated (content kind, parent scope, no cycles)
    - Replaced or removed files are deleted after the commit, best-effort
    """
    page = get_page(page_id)
    cleaned = validate_page_data(data, partial=True)

    # A blank slug means "derive it again"
    if "slug" in data and not cleaned.get("slug"):
        cleaned["slug"] = slugify(cleaned.get("title", page.title))
        if not cleaned["slug"]:
            raise ValidationError.for_field("slug", "Slug is required")

    if "slug" in cleaned and cleaned["slug"] != page.slug:
        ensure_slug_free(cleaned["slug"], exclude_id=page.id)

    if "menu_type_id" in cleaned and cleaned["menu_type_id"] != page.menu_type_id:
        ensure_menu_type(cleaned["menu_type_id"])
        if CmsPage.query.filter_by(parent_id=page.id).count():
            raise ValidationError.for_field(
                "menu_type_id", "A page with child pages cannot move to another menu type"
            )

    parent = load_parent(cleaned["parent_id"]) if "parent_id" in cleaned else None

    meta = save_file(file) if file is not None else None
    released: List[str] = []
    changed_fields: List[str] = []

    try:
        with transactional():
            for field in ALLOWED_UPDATE_FIELDS:
                if field in cleaned and getattr(page, field) != cleaned[field]:
                    setattr(page, field, cleaned[field])
                    changed_fields.append(field)

            if meta:
                if page.file_path:
                    released.append(page.file_path)
                attach_file(page, meta)
                changed_fields.append("file")
            elif remove_file and page.file_path:
                released.append(page.file_path)
                page.clear_file()
                changed_fields.append("file")

            released.extend(drop_inactive_payload(page))

            if parent is None and page.parent_id is not None:
                # Parent untouched by this request; still re-check scope
                parent = db.session.get(CmsPage, page.parent_id)
            assert_page(page, parent)

            if "parent_id" in changed_fields:
                siblings = CmsPage.query.filter_by(menu_type_id=page.menu_type_id).all()
                parent_by_id = {p.id: p.parent_id for p in siblings}
                assert_not_own_ancestor(page.id, page.parent_id, parent_by_id)

            page.updated_by = actor_id

    except IntegrityError as exc:
        if meta:
            delete_file(meta["file_path"])
        raise ConflictError(SLUG_TAKEN) from exc

    except Exception:
        if meta:
            delete_file(meta["file_path"])
        raise

    for path in released:
        delete_file(path)

    if changed_fields:
        current_app.logger.info(
            "Page %s updated by %s: %s", page.id, actor_id, ", ".join(changed_fields)
        )

    return page

from typing import Any, Dict, List, Mapping
from menu_cms.domain.exceptions import ValidationError
from menu_cms.domain.slug import is_valid_slug
from menu_cms.models.page import (
    CONTENT,
    CONTENT_KINDS,
    META_DESCRIPTION_MAX,
    META_KEYWORDS_MAX,
    SLUG_MAX,
    TITLE_MAX,
    URL_MAX,
    WINDOW_TITLE_MAX,
)

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}

BOOLEAN_FIELDS = ("enabled", "open_in_new_window")

# field -> max length
OPTIONAL_TEXT_FIELDS = {
    "external_url": URL_MAX,
    "window_title": WINDOW_TITLE_MAX,
    "meta_keywords": META_KEYWORDS_MAX,
    "meta_description": META_DESCRIPTION_MAX,
}
SEO_FIELDS = ("window_title", "meta_keywords", "meta_description")


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUE_VALUES:
        return True
    if isinstance(value, str) and value.strip().lower() in FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _optional_id(value: Any):
    if value is None:
        return None
    value = str(value).strip()
    if value in ("", "null", "none"):
        return None
    return value


def validate_page_data(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Check and coerce a create/update payload (JSON or multipart form).

    Returns only the recognised fields that were supplied. On create
    (``partial=False``) the required fields must be present. All problems
    are reported together.
    """
    errors: List[Dict[str, str]] = []
    cleaned: Dict[str, Any] = {}

    def fail(field: str, message: str):
        errors.append({"field": field, "message": message})

    # Flatten a nested "seo" object onto the top level
    data = dict(data)
    seo = data.pop("seo", None)
    if isinstance(seo, Mapping):
        for field in SEO_FIELDS:
            if field in seo and field not in data:
                data[field] = seo[field]

    # title
    if "title" in data or not partial:
        title = data.get("title")
        title = title.strip() if isinstance(title, str) else ""
        if not title:
            fail("title", "Page title is required")
        elif len(title) > TITLE_MAX:
            fail("title", f"Page title cannot exceed {TITLE_MAX} characters")
        else:
            cleaned["title"] = title

    # slug (blank means "derive from title")
    if "slug" in data:
        slug = data.get("slug")
        slug = slug.strip().lower() if isinstance(slug, str) else ""
        if slug:
            if len(slug) > SLUG_MAX:
                fail("slug", f"Slug cannot exceed {SLUG_MAX} characters")
            elif not is_valid_slug(slug):
                fail("slug", "Slug can only contain lowercase letters, numbers, and hyphens")
            else:
                cleaned["slug"] = slug

    # menu type
    if "menu_type_id" in data or not partial:
        menu_type_id = _optional_id(data.get("menu_type_id"))
        if not menu_type_id:
            fail("menu_type_id", "Menu type is required")
        else:
            cleaned["menu_type_id"] = menu_type_id

    if "parent_id" in data:
        cleaned["parent_id"] = _optional_id(data.get("parent_id"))

    # content kind
    if "content_kind" in data or not partial:
        kind = data.get("content_kind") or CONTENT
        if kind not in CONTENT_KINDS:
            fail("content_kind", f"Content kind must be one of: {', '.join(CONTENT_KINDS)}")
        else:
            cleaned["content_kind"] = kind

    if "body" in data:
        body = data.get("body")
        if body is not None and not isinstance(body, str):
            fail("body", "Body must be text")
        else:
            cleaned["body"] = body or ""

    for field, max_len in OPTIONAL_TEXT_FIELDS.items():
        if field not in data:
            continue
        value = data.get(field)
        if value is None:
            cleaned[field] = None
            continue
        if not isinstance(value, str):
            fail(field, f"{field} must be text")
            continue
        value = value.strip()
        if len(value) > max_len:
            fail(field, f"{field} cannot exceed {max_len} characters")
        else:
            cleaned[field] = value or None

    for field in BOOLEAN_FIELDS:
        if field not in data:
            continue
        try:
            cleaned[field] = parse_bool(data.get(field))
        except ValueError:
            fail(field, f"{field} must be a boolean")

    if "order" in data:
        order = data.get("order")
        try:
            if isinstance(order, bool):
                raise ValueError(order)
            order = int(order)
            if order < 0:
                raise ValueError(order)
            cleaned["order"] = order
        except (TypeError, ValueError):
            fail("order", "Order must be a non-negative integer")

    if errors:
        raise ValidationError("Validation errors", errors=errors)

    return cleaned

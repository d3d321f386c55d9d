# menu_cms/api/v1/cms_pages.py
import os
from flask import current_app, request, jsonify, send_file
from menu_cms.application.cms.create_page import create_page
from menu_cms.application.cms.update_page import update_page
from menu_cms.application.cms.delete_page import delete_page
from menu_cms.application.cms.toggle_page_status import toggle_page_status
from menu_cms.application.cms.reorder_pages import reorder_pages
from menu_cms.application.cms.tree import get_menu_tree
from menu_cms.application.cms.validation import parse_bool
from menu_cms.application.cms.queries import (
    get_page,
    get_page_by_slug,
    list_pages,
    list_dropdown_pages,
    list_parent_choices,
    parent_titles,
)
from menu_cms.application.menu_types import get_menu_type
from menu_cms.domain.exceptions import InvalidInput, NotFoundError, ValidationError
from menu_cms.normalizers.page import normalize_page, normalize_page_option
from menu_cms.normalizers.pagination import normalize_pagination
from menu_cms.utils.identity import current_actor
from menu_cms.utils.media import resolve_path
from menu_cms.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


def _page_payload():
    """JSON body, or the form fields of a multipart upload."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidInput("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def _uploaded_file():
    file = request.files.get("file")
    if file is None or not file.filename:
        return None
    return file


def _page_response(page, status_code=200, message=None):
    titles = parent_titles([page])
    body = {
        "success": True,
        "data": normalize_page(page, admin=True, parent_title=titles.get(page.parent_id)),
    }
    if message:
        body["message"] = message
    return jsonify(body), status_code


def _query_int(name, default, *, minimum=1, maximum=None):
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError.for_field(name, f"{name} must be an integer")
    value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value


# ------------------------
# Reads
# ------------------------

@v1_bp.route("/cms-pages", methods=["GET"])
def list_pages_route():
    enabled = request.args.get("enabled", "")
    try:
        enabled = parse_bool(enabled) if enabled != "" else None
    except ValueError:
        raise ValidationError.for_field("enabled", "enabled must be true or false")

    pagination = list_pages(
        search=request.args.get("search", "").strip(),
        menu_type_id=request.args.get("menu_type") or None,
        parent_id=request.args.get("parent_page") or None,
        enabled=enabled,
        page=_query_int("page", 1),
        limit=_query_int(
            "limit",
            current_app.config["DEFAULT_PAGE_SIZE"],
            maximum=current_app.config["MAX_PAGE_SIZE"],
        ),
    )

    titles = parent_titles(pagination.items)
    return jsonify(
        normalize_pagination(
            pagination,
            lambda p: normalize_page(p, admin=True, parent_title=titles.get(p.parent_id)),
        )
    )


@v1_bp.route("/cms-pages/dropdown", methods=["GET"])
def dropdown_route():
    rows = list_dropdown_pages()
    return jsonify({"success": True, "data": [normalize_page_option(r) for r in rows]})


@v1_bp.route("/cms-pages/parents/<menu_type_id>", methods=["GET"])
def parent_choices_route(menu_type_id):
    get_menu_type(menu_type_id)
    pages = list_parent_choices(menu_type_id, exclude_id=request.args.get("exclude") or None)
    return jsonify({"success": True, "data": [normalize_page_option(p) for p in pages]})


@v1_bp.route("/cms-pages/tree/<menu_type_id>", methods=["GET"])
def tree_route(menu_type_id):
    try:
        public = parse_bool(request.args.get("public", "false"))
    except ValueError:
        raise ValidationError.for_field("public", "public must be true or false")

    forest = get_menu_tree(menu_type_id, public=public)
    return jsonify({"success": True, "data": [node.to_dict() for node in forest]})


@v1_bp.route("/cms-pages/slug/<slug>", methods=["GET"])
def get_page_by_slug_route(slug):
    page = get_page_by_slug(slug)
    titles = parent_titles([page])
    return jsonify({
        "success": True,
        "data": normalize_page(page, admin=False, parent_title=titles.get(page.parent_id)),
    })


@v1_bp.route("/cms-pages/file/<page_id>", methods=["GET"])
def serve_file_route(page_id):
    page = get_page(page_id)
    if not page.has_file:
        raise NotFoundError("File not found")

    path = resolve_path(page.file_path)
    if not os.path.exists(path):
        current_app.logger.warning("File for page %s missing on disk: %s", page.id, path)
        raise NotFoundError("File not found on server")

    return send_file(
        path,
        mimetype=page.file_mime_type,
        as_attachment=False,
        download_name=page.original_file_name or page.file_name,
    )


@v1_bp.route("/cms-pages/<page_id>", methods=["GET"])
def get_page_route(page_id):
    return _page_response(get_page(page_id))


# ------------------------
# Writes
# ------------------------

@v1_bp.route("/cms-pages", methods=["POST"])
def create_page_route():
    page = create_page(
        actor_id=current_actor(),
        data=_page_payload(),
        file=_uploaded_file(),
    )
    return _page_response(page, 201, "Page created successfully")


@v1_bp.route("/cms-pages/<page_id>", methods=["PUT"])
def update_page_route(page_id):
    enforce_optimistic_lock(get_page(page_id))

    data = _page_payload()
    try:
        remove_file = parse_bool(data.pop("remove_file", False))
    except ValueError:
        raise ValidationError.for_field("remove_file", "remove_file must be a boolean")

    page = update_page(
        page_id=page_id,
        actor_id=current_actor(),
        data=data,
        file=_uploaded_file(),
        remove_file=remove_file,
    )
    return _page_response(page, 200, "Page updated successfully")


@v1_bp.route("/cms-pages/<page_id>", methods=["DELETE"])
def delete_page_route(page_id):
    delete_page(page_id=page_id, actor_id=current_actor())
    return jsonify({"success": True, "message": "Page deleted successfully"}), 200


@v1_bp.route("/cms-pages/<page_id>/toggle-status", methods=["PATCH"])
def toggle_status_route(page_id):
    page = toggle_page_status(page_id=page_id, actor_id=current_actor())
    state = "enabled" if page.enabled else "disabled"
    return _page_response(page, 200, f"Page {state} successfully")


@v1_bp.route("/cms-pages/reorder", methods=["POST"])
def reorder_route():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "tree" not in data:
        raise InvalidInput("Request body must be an object with a 'tree' list")

    result = reorder_pages(
        tree=data["tree"],
        actor_id=current_actor(),
        menu_type_id=data.get("menu_type_id"),
    )

    if result.partial:
        return jsonify({
            "success": False,
            "message": "Some pages could not be reordered",
            "data": result.to_dict(),
        }), 207

    return jsonify({
        "success": True,
        "message": "Pages reordered successfully",
        "data": result.to_dict(),
    }), 200

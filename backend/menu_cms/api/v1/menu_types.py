# menu_cms/api/v1/menu_types.py
from flask import request, jsonify
from menu_cms.application.menu_types import (
    list_menu_types,
    get_menu_type,
    create_menu_type,
    update_menu_type,
    delete_menu_type,
)
from menu_cms.normalizers.menu_type import normalize_menu_type
from menu_cms.utils.identity import current_actor
from . import v1_bp


@v1_bp.route("/menu-types", methods=["GET"])
def list_menu_types_route():
    menu_types = list_menu_types()

    return jsonify({
        "success": True,
        "data": [normalize_menu_type(m, admin=True) for m in menu_types],
        "count": len(menu_types),
    })


@v1_bp.route("/menu-types/<menu_type_id>", methods=["GET"])
def get_menu_type_route(menu_type_id):
    menu_type = get_menu_type(menu_type_id)
    return jsonify({"success": True, "data": normalize_menu_type(menu_type, admin=True)})


@v1_bp.route("/menu-types", methods=["POST"])
def create_menu_type_route():
    data = request.get_json(silent=True) or {}
    menu_type = create_menu_type(actor_id=current_actor(), data=data)

    return jsonify({
        "success": True,
        "message": "Menu type created successfully",
        "data": normalize_menu_type(menu_type, admin=True),
    }), 201


@v1_bp.route("/menu-types/<menu_type_id>", methods=["PUT"])
def update_menu_type_route(menu_type_id):
    data = request.get_json(silent=True) or {}
    menu_type = update_menu_type(menu_type_id=menu_type_id, actor_id=current_actor(), data=data)

    return jsonify({
        "success": True,
        "message": "Menu type updated successfully",
        "data": normalize_menu_type(menu_type, admin=True),
    }), 200


@v1_bp.route("/menu-types/<menu_type_id>", methods=["DELETE"])
def delete_menu_type_route(menu_type_id):
    delete_menu_type(menu_type_id=menu_type_id, actor_id=current_actor())
    return jsonify({"success": True, "message": "Menu type deleted successfully"}), 200

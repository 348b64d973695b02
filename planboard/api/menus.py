from flask import request, jsonify
from firebase_admin import firestore

from . import menus_bp
from planboard.middleware.auth_middleware import AuthMiddleware, admin_required
from planboard.models.menu_model import MenuModel
from planboard.models.records import ActionKind
from planboard.services.actions import ActionDispatcher
from planboard.services.menu_directory import current_directory


@menus_bp.get("")
def list_menus():
    """List menus in display order together with the navigation links."""
    db = firestore.client()
    directory = current_directory(db)
    return jsonify({
        "menus": [m.to_dict() for m in directory.get()],
        "links": directory.links(),
    }), 200


@menus_bp.get("/<menu_id>")
def get_menu(menu_id):
    db = firestore.client()
    return jsonify(MenuModel(db).get_menu(menu_id).to_dict()), 200


@menus_bp.post("")
@admin_required
def create_menu():
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    menu = MenuModel(db).create_menu(payload)
    ActionDispatcher(db).dispatch(
        ActionKind.MENU_CREATED, menu.id, AuthMiddleware.get_current_user(),
        content=f"Created menu {menu.name}",
    )
    return jsonify(menu.to_dict()), 201


@menus_bp.patch("/<menu_id>")
@admin_required
def update_menu(menu_id):
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    menu = MenuModel(db).update_menu(menu_id, payload)
    ActionDispatcher(db).dispatch(
        ActionKind.MENU_UPDATED, menu.id, AuthMiddleware.get_current_user(),
        content=f"Updated menu {menu.name}",
    )
    return jsonify(menu.to_dict()), 200


@menus_bp.delete("/<menu_id>")
@admin_required
def delete_menu(menu_id):
    db = firestore.client()
    menu = MenuModel(db).delete_menu(menu_id)
    ActionDispatcher(db).dispatch(
        ActionKind.MENU_DELETED, menu.id, AuthMiddleware.get_current_user(),
        content=f"Deleted menu {menu.name}",
    )
    return jsonify({"message": "Menu deleted successfully", "menu_id": menu_id}), 200

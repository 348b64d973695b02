"""Path resolution endpoints used by the single-page client's router."""
from flask import request, jsonify
from firebase_admin import firestore

from . import navigation_bp
from planboard.services.menu_directory import current_directory
from planboard.services.path_resolver import path_for_menu, resolve_path
from planboard.services.reference_recorder import REMOVED_SECTION_MESSAGE, ReferenceRecorder


@navigation_bp.get("/resolve")
def resolve():
    """Resolve ?path= to a static page, a menu, or a redirect target.

    Not-found is an ordinary outcome, so this always answers 200.
    """
    db = firestore.client()
    route = resolve_path(request.args.get("path", ""), current_directory(db))
    return jsonify(route.to_dict()), 200


@navigation_bp.get("/links")
def links():
    db = firestore.client()
    return jsonify(current_directory(db).links()), 200


@navigation_bp.get("/menus/<menu_id>/path")
def menu_path(menu_id):
    db = firestore.client()
    directory = current_directory(db)
    path = path_for_menu(menu_id, directory)
    if path is None:
        fallback = ReferenceRecorder(directory).fallback_path
        return jsonify({"path": fallback, "exists": False, "message": REMOVED_SECTION_MESSAGE}), 200
    return jsonify({"path": path, "exists": True, "message": None}), 200

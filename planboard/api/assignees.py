from flask import request, jsonify
from firebase_admin import firestore

from . import assignees_bp
from planboard.middleware.auth_middleware import admin_required
from planboard.models.assignee_model import AssigneeModel


@assignees_bp.get("")
def list_assignees():
    db = firestore.client()
    return jsonify(AssigneeModel(db).list_assignees()), 200


@assignees_bp.get("/<assignee_id>")
def get_assignee(assignee_id):
    db = firestore.client()
    return jsonify(AssigneeModel(db).get_assignee(assignee_id)), 200


@assignees_bp.post("")
@admin_required
def create_assignee():
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    return jsonify(AssigneeModel(db).create_assignee(payload)), 201


@assignees_bp.patch("/<assignee_id>")
@admin_required
def update_assignee(assignee_id):
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    return jsonify(AssigneeModel(db).update_assignee(assignee_id, payload)), 200


@assignees_bp.delete("/<assignee_id>")
@admin_required
def delete_assignee(assignee_id):
    db = firestore.client()
    AssigneeModel(db).delete_assignee(assignee_id)
    return jsonify({"message": "Assignee deleted successfully"}), 200

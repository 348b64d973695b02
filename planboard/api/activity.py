from flask import request, jsonify
from firebase_admin import firestore

from . import activity_bp
from planboard.config.settings import Settings
from planboard.models.activity_model import ActivityModel, activity_to_json
from planboard.services.menu_directory import current_directory
from planboard.services.pagination import paginate
from planboard.services.reference_recorder import ReferenceRecorder
from planboard.utils.errors import ValidationError


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


@activity_bp.get("")
def list_activity():
    """Paged activity log, newest first; each row carries a live link."""
    db = firestore.client()
    page = _int_arg("page", 1)
    per_page = _int_arg("per_page", Settings.ACTIVITY_PAGE_SIZE)
    if per_page < 1 or per_page > Settings.MAX_PAGE_SIZE:
        raise ValidationError(f"per_page must be between 1 and {Settings.MAX_PAGE_SIZE}")

    result = paginate(ActivityModel(db).list_records(), page, per_page)
    recorder = ReferenceRecorder(current_directory(db))
    rows = []
    for record in result["items"]:
        row = activity_to_json(record)
        row["target"] = recorder.resolve_navigation_target(record).to_dict()
        rows.append(row)
    result["items"] = rows
    return jsonify(result), 200


@activity_bp.get("/<record_id>/target")
def activity_target(record_id):
    db = firestore.client()
    record = ActivityModel(db).get_record(record_id)
    target = ReferenceRecorder(current_directory(db)).resolve_navigation_target(record)
    return jsonify(target.to_dict()), 200

from flask import request, jsonify
from firebase_admin import firestore

from . import notifications_bp
from planboard.config.settings import Settings
from planboard.middleware.auth_middleware import AuthMiddleware, admin_required, login_required
from planboard.models.notification_model import NotificationModel
from planboard.models.records import ActionKind
from planboard.services.menu_directory import current_directory
from planboard.services.reference_recorder import ReferenceRecorder
from planboard.utils.errors import ValidationError

NOTIFICATION_ACTIONS = {
    "comment": ActionKind.COMMENT_ADDED,
    "completed": ActionKind.TASK_COMPLETED,
}


def _current_user_id():
    return AuthMiddleware.get_current_user()["user_id"]


@notifications_bp.get("")
@login_required
def list_notifications():
    """Notifications addressed to the caller, newest first.
    Query: unread_only=true|false
    """
    db = firestore.client()
    unread_only = request.args.get("unread_only", "false").lower() == "true"
    items = NotificationModel(db).list_for_recipient(_current_user_id(), unread_only=unread_only)
    return jsonify({
        "notifications": items,
        "unread_count": sum(1 for n in items if not n.get("is_read")),
    }), 200


@notifications_bp.post("/<notification_id>/read")
@login_required
def mark_read(notification_id):
    db = firestore.client()
    notif = NotificationModel(db).mark_read(notification_id, _current_user_id())
    return jsonify(notif), 200


@notifications_bp.post("/read-all")
@login_required
def mark_all_read():
    db = firestore.client()
    count = NotificationModel(db).mark_all_read(_current_user_id())
    return jsonify({"message": f"{count} notifications marked as read", "count": count}), 200


@notifications_bp.get("/<notification_id>/target")
@login_required
def notification_target(notification_id):
    """Where clicking the notification should take the caller. The menu's
    current slug is looked up now, not when the notification was written."""
    db = firestore.client()
    notif = NotificationModel(db).get_notification(notification_id)
    record = ReferenceRecorder.record(
        NOTIFICATION_ACTIONS.get(notif.get("type"), ActionKind.TASK_UPDATED),
        notif.get("menu_id"),
        task_id=notif.get("task_id"),
        task_name=notif.get("task_name"),
        created_at=notif.get("created_at"),
        record_id=notification_id,
    )
    target = ReferenceRecorder(current_directory(db)).resolve_navigation_target(record)
    return jsonify(target.to_dict()), 200


@notifications_bp.post("/cleanup")
@admin_required
def cleanup_notifications():
    db = firestore.client()
    payload = request.get_json(silent=True) or {}
    days = payload.get("retention_days", Settings.NOTIFICATION_RETENTION_DAYS)
    if not isinstance(days, int) or isinstance(days, bool) or days < 0:
        raise ValidationError("retention_days must be a non-negative integer")
    deleted = NotificationModel(db).cleanup(days)
    return jsonify({"deleted": deleted, "retention_days": days}), 200

from flask import request, jsonify
from firebase_admin import firestore

from . import comments_bp
from planboard.middleware.auth_middleware import AuthMiddleware, login_required
from planboard.models.comment_model import CommentModel
from planboard.models.records import ActionKind
from planboard.models.task_model import TaskModel
from planboard.services.actions import ActionDispatcher
from planboard.utils.errors import ValidationError


@comments_bp.post("")
@login_required
def add_comment():
    """Comment on a task; the task's assignee gets a notification."""
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    task_id = (payload.get("task_id") or "").strip()
    if not task_id:
        raise ValidationError("task_id and body are required")

    task = TaskModel(db).get_task(task_id)
    user = AuthMiddleware.get_current_user()
    comment = CommentModel(db).add_comment(
        task, user["user_id"], user.get("name") or user.get("email"), payload.get("body")
    )
    ActionDispatcher(db).dispatch(
        ActionKind.COMMENT_ADDED, task["menu_id"], user, task=task, content=comment["body"],
    )
    return jsonify(comment), 201


@comments_bp.get("/by-task/<task_id>")
def list_comments(task_id):
    db = firestore.client()
    return jsonify(CommentModel(db).list_for_task(task_id)), 200

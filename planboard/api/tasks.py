from flask import request, jsonify
from firebase_admin import firestore

from . import tasks_bp
from planboard.middleware.auth_middleware import AuthMiddleware, admin_required, login_required
from planboard.models.menu_model import MenuModel
from planboard.models.records import ActionKind
from planboard.models.task_model import TaskModel
from planboard.services.actions import ActionDispatcher
from planboard.utils.errors import ValidationError


def _menu_id_arg():
    menu_id = (request.args.get("menu_id") or "").strip()
    if not menu_id:
        raise ValidationError("menu_id query parameter is required")
    return menu_id


@tasks_bp.get("")
def list_tasks():
    db = firestore.client()
    menu_id = _menu_id_arg()
    MenuModel(db).get_menu(menu_id)
    return jsonify(TaskModel(db).list_tasks(menu_id)), 200


@tasks_bp.get("/progress")
def task_progress():
    """Overall and per-phase completion for one menu."""
    db = firestore.client()
    menu_id = _menu_id_arg()
    MenuModel(db).get_menu(menu_id)
    return jsonify(TaskModel(db).get_progress(menu_id)), 200


@tasks_bp.get("/<task_id>")
def get_task(task_id):
    db = firestore.client()
    return jsonify(TaskModel(db).get_task(task_id)), 200


@tasks_bp.post("")
@admin_required
def create_task():
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    task = TaskModel(db).create_task(payload, MenuModel(db))
    ActionDispatcher(db).dispatch(
        ActionKind.TASK_CREATED, task["menu_id"], AuthMiddleware.get_current_user(),
        task=task, content=f"Created task {task['title']}",
    )
    return jsonify(task), 201


@tasks_bp.patch("/<task_id>")
@admin_required
def update_task(task_id):
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    task = TaskModel(db).update_task(task_id, payload)
    ActionDispatcher(db).dispatch(
        ActionKind.TASK_UPDATED, task["menu_id"], AuthMiddleware.get_current_user(),
        task=task, content=f"Updated task {task['title']}",
    )
    return jsonify(task), 200


@tasks_bp.delete("/<task_id>")
@admin_required
def delete_task(task_id):
    db = firestore.client()
    task = TaskModel(db).delete_task(task_id)
    ActionDispatcher(db).dispatch(
        ActionKind.TASK_DELETED, task["menu_id"], AuthMiddleware.get_current_user(),
        task=task, content=f"Deleted task {task['title']}",
    )
    return jsonify({"message": "Task deleted successfully", "task_id": task_id}), 200


@tasks_bp.post("/<task_id>/complete")
@login_required
def complete_task(task_id):
    """Mark a task completed. Body: {link: "https://..."}"""
    db = firestore.client()
    payload = request.get_json(force=True) or {}
    task = TaskModel(db).complete_task(task_id, payload.get("link"))
    record = ActionDispatcher(db).dispatch(
        ActionKind.TASK_COMPLETED, task["menu_id"], AuthMiddleware.get_current_user(),
        task=task, content=task["completion_link"],
    )
    return jsonify({"task": task, "record_id": record.record_id}), 200


@tasks_bp.post("/<task_id>/reopen")
@login_required
def reopen_task(task_id):
    db = firestore.client()
    task = TaskModel(db).reopen_task(task_id)
    ActionDispatcher(db).dispatch(
        ActionKind.TASK_REOPENED, task["menu_id"], AuthMiddleware.get_current_user(),
        task=task, content=f"Reopened task {task['title']}",
    )
    return jsonify({"task": task}), 200

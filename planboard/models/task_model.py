from planboard.models.base import FirestoreModel
from planboard.models.records import MenuKind
from planboard.services.status_service import (
    STATUS_COMPLETED, STATUS_PENDING, deadline_state, normalize_task,
)
from planboard.utils.errors import ValidationError
from planboard.utils.validators import Validators, Helpers
from google.cloud.firestore_v1.base_query import FieldFilter
from typing import Dict, Any, Optional, List
import logging

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "phase", "start_date", "end_date", "duration_days", "deadline")


class TaskModel(FirestoreModel):
    """Task data model for Firestore operations"""

    collection_name = "tasks"
    resource_name = "Task"

    def _assignee_name(self, assignee_id: Optional[str]) -> str:
        if not assignee_id:
            return "Unassigned"
        with self.transport("read assignee"):
            doc = self.db.collection("assignees").document(assignee_id).get()
        if not doc.exists:
            raise ValidationError(f"Assignee '{assignee_id}' does not exist")
        return (doc.to_dict() or {}).get("name") or "Unassigned"

    def _clean_fields(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        fields = {}
        for key in EDITABLE_FIELDS:
            if key in payload:
                fields[key] = payload.get(key) if key == "duration_days" else Helpers.sanitize_string(payload.get(key))
        if "title" in fields and not Validators.validate_name(fields["title"], max_length=200):
            raise ValidationError("title is required (max 200 characters)")
        if "duration_days" in fields:
            try:
                fields["duration_days"] = max(int(fields["duration_days"]), 1)
            except (TypeError, ValueError) as e:
                raise ValidationError("duration_days must be a positive integer") from e
        for key in ("start_date", "end_date", "deadline"):
            if fields.get(key) and Helpers.parse_timestamp(fields[key]) is None:
                raise ValidationError(f"{key} must be an ISO date")
        return fields

    def get_task(self, task_id: str) -> Dict[str, Any]:
        doc = self._get_snapshot(task_id)
        return normalize_task(doc.id, doc.to_dict())

    def list_tasks(self, menu_id: str) -> List[Dict[str, Any]]:
        with self.transport("list tasks"):
            docs = list(self.collection.where(filter=FieldFilter("menu_id", "==", menu_id)).stream())
        tasks = [normalize_task(d.id, d.to_dict()) for d in docs]
        for task in tasks:
            task["deadline_state"] = deadline_state(task["deadline"], task["completed"])
        return sorted(tasks, key=lambda t: (t["phase"], t["start_date"] or "", t["created_at"] or ""))

    def create_task(self, payload: Dict[str, Any], menu_model) -> Dict[str, Any]:
        """Create a task under a task-list menu"""
        menu_id = Helpers.sanitize_string(payload.get("menu_id"))
        if not menu_id:
            raise ValidationError("menu_id is required")
        menu = menu_model.get_menu(menu_id)
        if menu.kind is not MenuKind.TASK_LIST:
            raise ValidationError("Tasks can only be added to task-list menus")

        if not payload.get("title"):
            raise ValidationError("title is required")
        fields = self._clean_fields(payload)
        assignee_id = Helpers.sanitize_string(payload.get("assignee_id")) or None

        now = Helpers.now_iso()
        doc = {
            "menu_id": menu_id,
            "description": "",
            "phase": "",
            "duration_days": 1,
            **fields,
            "assignee_id": assignee_id,
            "assignee_name": self._assignee_name(assignee_id),
            "completed": False,
            "status": STATUS_PENDING,
            "completion_link": "",
            "completed_at": None,
            "created_at": now,
            "updated_at": now,
        }
        ref = self.collection.document()
        with self.transport("create task"):
            ref.set(doc)
        return normalize_task(ref.id, doc)

    def update_task(self, task_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        current = self.get_task(task_id)
        updates = self._clean_fields(payload)
        if "assignee_id" in payload:
            assignee_id = Helpers.sanitize_string(payload.get("assignee_id")) or None
            updates["assignee_id"] = assignee_id
            updates["assignee_name"] = self._assignee_name(assignee_id)
        if not updates:
            return current
        updates["updated_at"] = Helpers.now_iso()
        with self.transport("update task"):
            self.collection.document(task_id).update(updates)
        current.update(updates)
        return current

    def complete_task(self, task_id: str, link: Any) -> Dict[str, Any]:
        """Mark a task completed; a proof link is mandatory"""
        current = self.get_task(task_id)
        link = Helpers.sanitize_string(link)
        if not link:
            raise ValidationError("Please enter a completion link before marking complete")
        if not Validators.validate_url(link):
            raise ValidationError("Invalid URL format. Please enter a complete URL (http:// or https://)")

        now = Helpers.now_iso()
        updates = {
            "completed": True,
            "status": STATUS_COMPLETED,
            "completion_link": link,
            "completed_at": now,
            "updated_at": now,
        }
        with self.transport("complete task"):
            self.collection.document(task_id).update(updates)
        current.update(updates)
        return current

    def reopen_task(self, task_id: str) -> Dict[str, Any]:
        current = self.get_task(task_id)
        updates = {
            "completed": False,
            "status": STATUS_PENDING,
            "completion_link": "",
            "completed_at": None,
            "updated_at": Helpers.now_iso(),
        }
        with self.transport("reopen task"):
            self.collection.document(task_id).update(updates)
        current.update(updates)
        return current

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        current = self.get_task(task_id)
        with self.transport("delete task"):
            self.collection.document(task_id).delete()
        return current

    def get_progress(self, menu_id: str) -> Dict[str, Any]:
        """Completion counts for a menu, overall and per phase"""
        tasks = self.list_tasks(menu_id)
        phases: Dict[str, Dict[str, int]] = {}
        done = 0
        overdue = 0
        for task in tasks:
            bucket = phases.setdefault(task["phase"] or "unphased", {"total": 0, "completed": 0})
            bucket["total"] += 1
            if task["completed"]:
                done += 1
                bucket["completed"] += 1
            elif task["deadline_state"] == "overdue":
                overdue += 1

        for bucket in phases.values():
            bucket["percent"] = round(bucket["completed"] * 100 / bucket["total"]) if bucket["total"] else 0

        total = len(tasks)
        return {
            "menu_id": menu_id,
            "total": total,
            "completed": done,
            "pending": total - done,
            "overdue": overdue,
            "percent": round(done * 100 / total) if total else 0,
            "phases": phases,
        }


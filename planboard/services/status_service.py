"""
Task status normalization
Raw task documents come in several historical shapes (title/name,
owner/assignee, Vietnamese or English status strings). They are folded into
one record shape at the write/read boundary so nothing downstream needs
fallback checks.
"""
import unicodedata
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from planboard.utils.validators import Helpers

STATUS_COMPLETED = "completed"
STATUS_PENDING = "pending"

COMPLETED_VARIANTS = frozenset({
    "completed",
    "hoàn thành",
    "đã hoàn thành",
    "done",
    "xong",
})

DUE_SOON_WINDOW = timedelta(days=3)


def normalize_status(status: Any) -> str:
    if not status:
        return ""
    return unicodedata.normalize("NFC", str(status)).strip().lower()


def is_completed(raw: Dict[str, Any]) -> bool:
    if raw.get("completed") is True:
        return True
    return normalize_status(raw.get("status")) in COMPLETED_VARIANTS


def _duration(raw: Dict[str, Any]) -> int:
    value = raw.get("duration_days", raw.get("durationDays", raw.get("duration")))
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return 1


def normalize_task(task_id: str, raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fold a raw task document into the canonical task shape"""
    raw = raw or {}
    completed = is_completed(raw)
    end_date = raw.get("end_date") or raw.get("endDate")
    return {
        "task_id": task_id,
        "menu_id": raw.get("menu_id") or raw.get("menuId"),
        "title": Helpers.sanitize_string(raw.get("title") or raw.get("name")) or "Untitled Task",
        "description": Helpers.sanitize_string(raw.get("description")),
        "assignee_id": raw.get("assignee_id") or raw.get("assigneeId"),
        "assignee_name": raw.get("assignee_name") or raw.get("owner") or raw.get("assignee") or "Unassigned",
        "phase": raw.get("phase") or "",
        "start_date": raw.get("start_date") or raw.get("startDate"),
        "end_date": end_date,
        "duration_days": _duration(raw),
        "deadline": raw.get("deadline") or end_date,
        "completed": completed,
        "status": STATUS_COMPLETED if completed else STATUS_PENDING,
        "completion_link": (raw.get("completion_link") or raw.get("link") or "") if completed else "",
        "completed_at": (raw.get("completed_at") or raw.get("completedAt")) if completed else None,
        "created_at": raw.get("created_at"),
        "updated_at": raw.get("updated_at"),
    }


def deadline_state(deadline: Any, completed: bool, now: Optional[datetime] = None) -> str:
    if completed:
        return "completed"
    if not deadline:
        return "no_deadline"
    due = Helpers.parse_timestamp(deadline)
    if due is None:
        return "no_deadline"
    now = now or datetime.now(timezone.utc)
    if due < now:
        return "overdue"
    if due - now <= DUE_SOON_WINDOW:
        return "due_soon"
    return "on_track"

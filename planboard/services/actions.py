"""
Action dispatch
Every user action goes through one table keyed by ActionKind: the action is
appended to the activity log and its registered side effect (if any) runs.
"""
import dataclasses
import logging
from typing import Any, Callable, Dict, Optional

from planboard.models.activity_model import ActivityModel
from planboard.models.notification_model import NotificationModel
from planboard.models.records import ActionKind, ActionRecord
from planboard.services.reference_recorder import ReferenceRecorder
from planboard.utils.errors import PlanboardError

logger = logging.getLogger(__name__)

SideEffect = Callable[[ActionRecord, Optional[Dict[str, Any]]], None]


class ActionDispatcher:
    def __init__(self, db):
        self.activity = ActivityModel(db)
        self.notifications = NotificationModel(db)
        self._side_effects: Dict[ActionKind, SideEffect] = {
            ActionKind.COMMENT_ADDED: self._notify_comment,
            ActionKind.TASK_COMPLETED: self._notify_completed,
        }

    def dispatch(self, action: ActionKind, menu_id: Optional[str], actor: Dict[str, Any],
                 task: Optional[Dict[str, Any]] = None, content: str = "", **extra) -> ActionRecord:
        record = ReferenceRecorder.record(
            action,
            menu_id,
            actor_id=actor.get("user_id"),
            actor_name=actor.get("name") or actor.get("email"),
            task_id=(task or {}).get("task_id"),
            task_name=(task or {}).get("title"),
            content=content,
            extra=extra,
        )
        # the action itself is already committed; bookkeeping never fails it
        try:
            record = dataclasses.replace(record, record_id=self.activity.append(record))
        except PlanboardError as e:
            logger.error("Activity log write for %s failed: %s", record.action.value, e)

        side_effect = self._side_effects.get(record.action)
        if side_effect is not None:
            try:
                side_effect(record, task)
            except PlanboardError as e:
                # the action itself already succeeded
                logger.error("Side effect for %s failed: %s", record.action.value, e)
        return record

    def _notify_comment(self, record: ActionRecord, task: Optional[Dict[str, Any]]) -> None:
        if not task:
            return
        title = task.get("title") or "Untitled Task"
        self.notifications.create_notification(
            "comment",
            task,
            f'User {record.actor_name} commented on "{title}"',
            sender_id=record.actor_id,
            comment=record.content,
        )

    def _notify_completed(self, record: ActionRecord, task: Optional[Dict[str, Any]]) -> None:
        if not task:
            return
        title = task.get("title") or "Untitled Task"
        self.notifications.create_notification(
            "completed",
            task,
            f'User {record.actor_name} marked "{title}" as completed',
            sender_id=record.actor_id,
        )

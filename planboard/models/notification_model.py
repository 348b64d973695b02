import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from planboard.models.base import FirestoreModel
from planboard.utils.errors import PermissionDeniedError
from planboard.utils.validators import Helpers

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100
BATCH_LIMIT = 500


def notification_to_json(doc) -> Dict[str, Any]:
    return {"notification_id": doc.id, **(doc.to_dict() or {})}


class NotificationModel(FirestoreModel):
    collection_name = "notifications"
    resource_name = "Notification"

    def create_notification(self, notif_type: str, task: Dict[str, Any], message: str,
                            sender_id: Optional[str], comment: Optional[str] = None) -> Optional[str]:
        """Notify the task's assignee. Returns the new id, or None when the
        task has nobody to notify."""
        assignee_id = task.get("assignee_id")
        if not assignee_id:
            logger.warning("Task %s has no assignee. Notification not created.", task.get("task_id"))
            return None

        with self.transport("read assignee"):
            assignee_doc = self.db.collection("assignees").document(assignee_id).get()
        if not assignee_doc.exists:
            logger.warning("Assignee %s not found for task %s", assignee_id, task.get("task_id"))
            return None

        now = Helpers.now_iso()
        notif = {
            "type": notif_type,
            "task_id": task.get("task_id"),
            "task_name": task.get("title") or "Untitled Task",
            "menu_id": task.get("menu_id"),
            "message": message,
            "comment_preview": (comment or "")[:PREVIEW_LENGTH],
            "recipient_id": assignee_id,
            "recipient_name": (assignee_doc.to_dict() or {}).get("name"),
            "sender_id": sender_id,
            "is_read": False,
            "created_at": now,
            "updated_at": now,
        }
        ref = self.collection.document()
        with self.transport("create notification"):
            ref.set(notif)
        logger.info("Notification %s created for %s", ref.id, assignee_id)
        return ref.id

    def list_for_recipient(self, recipient_id: str, unread_only: bool = False, limit: int = 50) -> List[Dict[str, Any]]:
        query = self.collection.where(filter=FieldFilter("recipient_id", "==", recipient_id))
        if unread_only:
            query = query.where(filter=FieldFilter("is_read", "==", False))
        with self.transport("list notifications"):
            docs = list(query.stream())
        items = [notification_to_json(d) for d in docs]
        items.sort(key=lambda n: n.get("created_at") or "", reverse=True)
        return items[:limit]

    def get_notification(self, notification_id: str) -> Dict[str, Any]:
        return notification_to_json(self._get_snapshot(notification_id))

    def mark_read(self, notification_id: str, recipient_id: str) -> Dict[str, Any]:
        notif = self.get_notification(notification_id)
        if notif.get("recipient_id") != recipient_id:
            raise PermissionDeniedError("You can only update your own notifications")
        if not notif.get("is_read"):
            updates = {"is_read": True, "updated_at": Helpers.now_iso()}
            with self.transport("mark notification read"):
                self.collection.document(notification_id).update(updates)
            notif.update(updates)
        return notif

    def mark_all_read(self, recipient_id: str) -> int:
        unread = self.collection.where(filter=FieldFilter("recipient_id", "==", recipient_id)) \
            .where(filter=FieldFilter("is_read", "==", False))
        with self.transport("mark notifications read"):
            docs = list(unread.stream())
            now = Helpers.now_iso()
            for chunk_start in range(0, len(docs), BATCH_LIMIT):
                batch = self.db.batch()
                for doc in docs[chunk_start:chunk_start + BATCH_LIMIT]:
                    batch.update(doc.reference, {"is_read": True, "updated_at": now})
                batch.commit()
        return len(docs)

    def cleanup(self, retention_days: int, now: Optional[datetime] = None) -> int:
        """Delete read notifications older than the retention window.
        Unread notifications are kept forever."""
        now = now or datetime.now(timezone.utc)
        cutoff = (now - timedelta(days=retention_days)).isoformat()
        logger.info("Cleaning up read notifications older than %s", cutoff)

        query = self.collection.where(filter=FieldFilter("is_read", "==", True)) \
            .where(filter=FieldFilter("created_at", "<", cutoff))
        with self.transport("clean up notifications"):
            docs = list(query.stream())
            for chunk_start in range(0, len(docs), BATCH_LIMIT):
                batch = self.db.batch()
                for doc in docs[chunk_start:chunk_start + BATCH_LIMIT]:
                    batch.delete(doc.reference)
                batch.commit()

        logger.info("Deleted %d old notifications", len(docs))
        return len(docs)

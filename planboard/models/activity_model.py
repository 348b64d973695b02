import logging
from typing import Any, Dict, List

from planboard.models.base import FirestoreModel
from planboard.models.records import ActionKind, ActionRecord
from planboard.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

# Display status shown in the activity table for each action kind
ACTIVITY_STATUS = {
    ActionKind.TASK_CREATED: "created",
    ActionKind.TASK_UPDATED: "updated",
    ActionKind.TASK_COMPLETED: "completed",
    ActionKind.TASK_REOPENED: "pending",
    ActionKind.TASK_DELETED: "deleted",
    ActionKind.COMMENT_ADDED: "updated",
    ActionKind.MENU_CREATED: "created",
    ActionKind.MENU_UPDATED: "edited",
    ActionKind.MENU_DELETED: "deleted",
}


def activity_to_json(record: ActionRecord) -> Dict[str, Any]:
    return {
        "record_id": record.record_id,
        **record.to_dict(),
        "status": ACTIVITY_STATUS[record.action],
    }


class ActivityModel(FirestoreModel):
    """Append-only action history; rows carry menu_id, never a slug"""

    collection_name = "activity_logs"
    resource_name = "Activity record"

    def append(self, record: ActionRecord) -> str:
        doc = record.to_dict()
        doc["status"] = ACTIVITY_STATUS[record.action]
        ref = self.collection.document()
        with self.transport("write activity"):
            ref.set(doc)
        return ref.id

    def get_record(self, record_id: str) -> ActionRecord:
        doc = self._get_snapshot(record_id)
        try:
            return ActionRecord.from_document(doc)
        except ValueError as e:
            logger.warning("Activity record %s is unreadable: %s", record_id, e)
            raise NotFoundError(self.resource_name) from e

    def list_records(self) -> List[ActionRecord]:
        """Every record, newest first"""
        with self.transport("list activity"):
            docs = list(self.collection.stream())
        records = []
        for doc in docs:
            try:
                records.append(ActionRecord.from_document(doc))
            except ValueError as e:
                logger.warning("Skipping unreadable activity record %s: %s", doc.id, e)
        records.sort(key=lambda r: r.created_at or "", reverse=True)
        return records

from typing import Any, Dict, List

from google.cloud.firestore_v1.base_query import FieldFilter

from planboard.models.base import FirestoreModel
from planboard.utils.errors import ValidationError
from planboard.utils.validators import Helpers

MAX_COMMENT_LENGTH = 2000


class CommentModel(FirestoreModel):
    collection_name = "comments"
    resource_name = "Comment"

    def add_comment(self, task: Dict[str, Any], author_id: str, author_name: str, body: Any) -> Dict[str, Any]:
        body = Helpers.sanitize_string(body)
        if not body:
            raise ValidationError("body is required")
        if len(body) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"body must be at most {MAX_COMMENT_LENGTH} characters")

        doc = {
            "task_id": task["task_id"],
            "menu_id": task.get("menu_id"),
            "author_id": author_id,
            "author_name": author_name,
            "body": body,
            "created_at": Helpers.now_iso(),
        }
        ref = self.collection.document()
        with self.transport("add comment"):
            ref.set(doc)
        return {"comment_id": ref.id, **doc}

    def list_for_task(self, task_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        with self.transport("list comments"):
            docs = list(self.collection.where(filter=FieldFilter("task_id", "==", task_id)).stream())
        comments = [{"comment_id": d.id, **(d.to_dict() or {})} for d in docs]
        comments.sort(key=lambda c: c.get("created_at") or "")
        return comments[:limit]

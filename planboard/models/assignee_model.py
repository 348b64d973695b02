from typing import Any, Dict, List

from planboard.models.base import FirestoreModel
from planboard.utils.errors import ValidationError
from planboard.utils.validators import Helpers, Validators


def assignee_to_json(doc) -> Dict[str, Any]:
    data = doc.to_dict() or {}
    return {
        "assignee_id": doc.id,
        "name": data.get("name"),
        "email": data.get("email"),
        "created_at": data.get("created_at"),
    }


class AssigneeModel(FirestoreModel):
    collection_name = "assignees"
    resource_name = "Assignee"

    @staticmethod
    def _clean(payload: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        fields = {}
        if "name" in payload or not partial:
            name = Helpers.sanitize_string(payload.get("name"))
            if not Validators.validate_name(name):
                raise ValidationError("name is required (max 100 characters)")
            fields["name"] = name
        if "email" in payload:
            email = Helpers.sanitize_string(payload.get("email")).lower()
            if email and not Validators.validate_email(email):
                raise ValidationError("Invalid email format")
            fields["email"] = email or None
        return fields

    def list_assignees(self) -> List[Dict[str, Any]]:
        with self.transport("list assignees"):
            docs = list(self.collection.stream())
        return sorted((assignee_to_json(d) for d in docs), key=lambda a: (a["name"] or "").lower())

    def get_assignee(self, assignee_id: str) -> Dict[str, Any]:
        return assignee_to_json(self._get_snapshot(assignee_id))

    def create_assignee(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        doc = {"email": None, **self._clean(payload), "created_at": Helpers.now_iso()}
        ref = self.collection.document()
        with self.transport("create assignee"):
            ref.set(doc)
        return {"assignee_id": ref.id, **doc}

    def update_assignee(self, assignee_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        current = self.get_assignee(assignee_id)
        updates = self._clean(payload, partial=True)
        if updates:
            with self.transport("update assignee"):
                self.collection.document(assignee_id).update(updates)
            current.update(updates)
        return current

    def delete_assignee(self, assignee_id: str) -> None:
        self.get_assignee(assignee_id)
        with self.transport("delete assignee"):
            self.collection.document(assignee_id).delete()

import logging
from contextlib import contextmanager

from google.api_core import exceptions as google_exceptions

from planboard.utils.errors import NotFoundError, TransportError

logger = logging.getLogger(__name__)


class FirestoreModel:
    """Base for the collection wrappers; subclasses set `collection_name`"""

    collection_name = None
    resource_name = "Document"

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(self.collection_name)

    @contextmanager
    def transport(self, operation: str):
        """Turn Firestore RPC failures into TransportError"""
        try:
            yield
        except google_exceptions.GoogleAPIError as e:
            logger.error("Firestore %s on '%s' failed: %s", operation, self.collection_name, e)
            raise TransportError(f"Failed to {operation}") from e

    def _get_snapshot(self, doc_id: str):
        if not doc_id:
            raise NotFoundError(self.resource_name)
        with self.transport(f"read {self.resource_name.lower()}"):
            doc = self.collection.document(doc_id).get()
        if not doc.exists:
            raise NotFoundError(self.resource_name)
        return doc

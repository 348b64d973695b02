"""Shared pytest configuration for unit tests.

Firestore is replaced by an in-memory double injected through
`firebase_admin.firestore.client`; Firebase Auth token checks are patched on
`firebase_admin.auth.verify_id_token`.
"""
import copy
import itertools
import os
import sys

import pytest
from firebase_admin import auth as firebase_auth
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

# Ensure repo root is on sys.path
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from planboard.app import create_app  # noqa: E402
from planboard.config.settings import Settings  # noqa: E402


# In-memory Firestore

_OPS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        self._collection.db.check("get")
        return FakeSnapshot(self, self._collection.docs.get(self.id))

    def set(self, data):
        self._collection.db.check("set")
        self._collection.docs[self.id] = copy.deepcopy(data)
        self._collection.changed()

    def update(self, data):
        self._collection.db.check("update")
        if self.id not in self._collection.docs:
            raise google_exceptions.NotFound(f"No document to update: {self.id}")
        self._collection.docs[self.id].update(copy.deepcopy(data))
        self._collection.changed()

    def delete(self):
        self._collection.db.check("delete")
        self._collection.docs.pop(self.id, None)
        self._collection.changed()


class FakeQuery:
    def __init__(self, collection, filters=(), limit_to=None):
        self._collection = collection
        self._filters = tuple(filters)
        self._limit = limit_to

    def where(self, field_path=None, op_string=None, value=None, filter=None):
        if filter is not None:
            field_path = filter.field_path
            op_string = getattr(filter, "op_string", None) or getattr(filter, "op", None)
            value = filter.value
        return FakeQuery(self._collection, self._filters + ((field_path, op_string, value),), self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, count)

    def stream(self):
        self._collection.db.check("stream")
        results = []
        for doc_id, data in list(self._collection.docs.items()):
            if all(_OPS[op](data.get(field), value) for field, op, value in self._filters):
                results.append(FakeSnapshot(FakeDocumentRef(self._collection, doc_id), data))
        if self._limit is not None:
            results = results[:self._limit]
        return iter(results)

    def get(self):
        return list(self.stream())


class FakeWatch:
    def __init__(self, collection, callback):
        self._collection = collection
        self.callback = callback

    def unsubscribe(self):
        if self in self._collection.watches:
            self._collection.watches.remove(self)


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.docs = {}
        self.watches = []
        self._ids = itertools.count(1)
        super().__init__(self)

    def document(self, doc_id=None):
        if doc_id is None:
            doc_id = f"{self.name}-{next(self._ids)}"
        return FakeDocumentRef(self, doc_id)

    def on_snapshot(self, callback):
        watch = FakeWatch(self, callback)
        self.watches.append(watch)
        callback(list(self.stream()), [], None)
        return watch

    def changed(self):
        for watch in list(self.watches):
            watch.callback(list(self.stream()), [], None)


class FakeBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def delete(self, ref):
        self._ops.append(ref.delete)

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def commit(self):
        self._db.check("commit")
        self._db.batch_sizes.append(len(self._ops))
        for op in self._ops:
            op()


class FakeFirestore:
    """Enough of the Firestore client surface for the models"""

    def __init__(self):
        self.collections = {}
        self.batch_sizes = []
        self.failing = set()

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def batch(self):
        return FakeBatch(self)

    def check(self, operation):
        if operation in self.failing:
            raise google_exceptions.ServiceUnavailable(f"{operation} unavailable")

    def data(self, collection, doc_id):
        return copy.deepcopy(self.collection(collection).docs.get(doc_id))


# Fixtures

TOKENS = {
    "admin-token": {"uid": "admin-1", "email": "owner@example.com"},
    "member-token": {"uid": "member-1", "email": "lan@example.com", "name": "Lan"},
}


def _verify_id_token(token, *args, **kwargs):
    if token not in TOKENS:
        raise ValueError("Token could not be decoded")
    return dict(TOKENS[token])


@pytest.fixture
def db(monkeypatch):
    fake = FakeFirestore()
    monkeypatch.setattr(firestore, "client", lambda *args, **kwargs: fake)
    monkeypatch.setattr(firebase_auth, "verify_id_token", _verify_id_token)
    fake.collection("users").document("admin-1").set({
        "user_id": "admin-1", "email": "owner@example.com", "name": "Owner", "role": "admin",
    })
    return fake


@pytest.fixture
def app(db, monkeypatch):
    monkeypatch.setattr(Settings, "DEV_MODE", True)
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def member_headers():
    return {"Authorization": "Bearer member-token"}


@pytest.fixture
def make_menu(client, admin_headers):
    """Create a menu through the API and return its JSON"""
    def _make(slug, name=None, **extra):
        payload = {"slug": slug, "name": name or slug, **extra}
        resp = client.post("/api/menus", json=payload, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _make


@pytest.fixture
def assignee(db):
    db.collection("assignees").document("member-1").set({"name": "Lan", "email": "lan@example.com"})
    return "member-1"


@pytest.fixture
def make_task(client, admin_headers):
    def _make(menu_id, title="Survey site", **extra):
        resp = client.post("/api/tasks", json={"menu_id": menu_id, "title": title, **extra}, headers=admin_headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _make

import copy
import uuid

import pytest
from fastapi.testclient import TestClient

from app.api_service import app
from config.settings import settings
from live.workspace import registry
from storage.firestore_client import get_firestore_client


class FakeDocSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, col, doc_id):
        self._col = col
        self.id = doc_id

    def get(self, timeout=None, transaction=None):
        self._col._check("get")
        return FakeDocSnapshot(self.id, self._col.docs.get(self.id))

    def set(self, data, merge=False):
        self._col._check("set")
        if merge and self.id in self._col.docs:
            self._col.docs[self.id].update(copy.deepcopy(data))
        else:
            self._col.docs[self.id] = copy.deepcopy(data)
        self._col._changed()

    def delete(self):
        self._col._check("delete")
        self._col.docs.pop(self.id, None)
        self._col._changed()


class FakeWatch:
    def __init__(self, col, callback):
        self._col = col
        self.callback = callback
        self.unsubscribed = 0

    def unsubscribe(self):
        self.unsubscribed += 1
        if self in self._col.watches:
            self._col.watches.remove(self)


class FakeCollection:
    """Just enough of CollectionReference for the repos and live watches."""

    def __init__(self, name):
        self.name = name
        self.docs = {}
        self.watches = []
        self.fail_on = set()

    def _check(self, op):
        if op in self.fail_on:
            raise RuntimeError(f"{self.name}.{op} unavailable")

    def _snapshots(self):
        return [FakeDocSnapshot(k, v) for k, v in self.docs.items()]

    def _changed(self):
        for w in list(self.watches):
            w.callback(self._snapshots(), [], None)

    def document(self, doc_id=None):
        return FakeDocRef(self, doc_id or uuid.uuid4().hex[:20])

    def add(self, data):
        self._check("add")
        ref = self.document()
        ref.set(data)
        return None, ref

    def stream(self):
        self._check("stream")
        return iter(self._snapshots())

    def on_snapshot(self, callback):
        self._check("watch")
        w = FakeWatch(self, callback)
        self.watches.append(w)
        callback(self._snapshots(), [], None)
        return w


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


VALID_TOKENS = {
    "firebase-token-admin-0001": {"sub": "uid-admin", "email": "admin@example.com"},
    "firebase-token-staff-0001": {"sub": "uid-staff", "email": "staff@example.com"},
}


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture(autouse=True)
def _reset_registry():
    yield
    registry.close_all()


@pytest.fixture
def firebase_tokens(monkeypatch):
    def fake_verify(token, request, audience=None, clock_skew_in_seconds=0):
        assert audience == "test-project"
        if token not in VALID_TOKENS:
            raise ValueError("Token signature invalid")
        return dict(VALID_TOKENS[token])

    monkeypatch.setattr(settings, "FIREBASE_PROJECT_ID", "test-project")
    monkeypatch.setattr("security.admin_auth.id_token.verify_firebase_token", fake_verify)
    return VALID_TOKENS


@pytest.fixture
def client(db, firebase_tokens):
    app.dependency_overrides[get_firestore_client] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seed_admin(db):
    db.collection("admins").document("uid-admin").set({"isAdmin": True})


@pytest.fixture
def admin_headers(client, seed_admin):
    resp = client.post("/auth/signin", json={"id_token": "firebase-token-admin-0001"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def staff_headers(client):
    resp = client.post("/auth/signin", json={"id_token": "firebase-token-staff-0001"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}

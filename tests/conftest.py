import copy
import itertools

import pytest
from fastapi.testclient import TestClient

from tripsmith.core.security import get_current_user
from tripsmith.main import app
from tripsmith.services import trip_service

USER = {"uid": "user-1", "email": "ana@example.com", "name": "Ana"}

def _prune(value):
    # The Realtime Database does not keep empty lists or objects.
    if isinstance(value, dict):
        pruned = {k: _prune(v) for k, v in value.items()}
        return {k: v for k, v in pruned.items() if v not in ([], {}, None)}
    if isinstance(value, list):
        return [_prune(v) for v in value]
    return value

class FakeQuery:
    def __init__(self, ref, child):
        self.ref = ref
        self.child = child
        self.value = None

    def equal_to(self, value):
        self.value = value
        return self

    def get(self):
        children = self.ref.get() or {}
        return {k: v for k, v in children.items() if v.get(self.child) == self.value}

class FakeReference:
    _keys = itertools.count(1)

    def __init__(self, root, path):
        self.root = root
        self.parts = [p for p in path.split('/') if p]
        self.key = self.parts[-1] if self.parts else None

    def _parent(self, create=False):
        node = self.root
        for part in self.parts[:-1]:
            if part not in node:
                if not create:
                    return None
                node[part] = {}
            node = node[part]
        return node

    def get(self):
        parent = self._parent()
        if parent is None:
            return None
        return copy.deepcopy(parent.get(self.parts[-1]))

    def set(self, value):
        self._parent(create=True)[self.parts[-1]] = _prune(copy.deepcopy(value))

    def update(self, values):
        current = self.get() or {}
        current.update(values)
        self.set(current)

    def delete(self):
        parent = self._parent()
        if parent is not None:
            parent.pop(self.parts[-1], None)

    def push(self):
        return FakeReference(self.root, '/'.join(self.parts + [f"-trip{next(self._keys)}"]))

    def order_by_child(self, child):
        return FakeQuery(self, child)

class FakeDatabase:
    def __init__(self):
        self.data = {}

    def reference(self, path='/'):
        return FakeReference(self.data, path)

@pytest.fixture
def fake_db(monkeypatch):
    database = FakeDatabase()
    monkeypatch.setattr(trip_service, "db", database)
    return database

@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_current_user] = lambda: USER
    yield TestClient(app)
    app.dependency_overrides.clear()

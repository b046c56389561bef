"""
Shared fixtures for the unit tests.

``fake_client`` is a ``MagicMock`` whose ``collection()`` returns an
in-memory collection that understands ``where(filter=FieldFilter(...))``,
``stream()``, ``document()`` and ``batch()``, so searches run their real
filters without a Firestore backend.
"""

import copy
import operator
from unittest.mock import MagicMock

import pytest
from google.cloud.firestore_v1 import ArrayUnion

from postboard import FirestoreDB, Post, User, init_postboard

_OPS = {
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda a, b: a in b,
    "array-contains": lambda a, b: isinstance(a, list) and b in a,
}

_MISSING = object()


def _lookup(data, path):
    for part in path.split("."):
        if not isinstance(data, dict) or part not in data:
            return _MISSING
        data = data[part]
    return data


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, docs, doc_id):
        self._docs = docs
        self.id = doc_id

    async def get(self):
        return FakeSnapshot(self, self._docs.get(self.id))

    async def set(self, data):
        self._docs[self.id] = copy.deepcopy(data)

    async def update(self, data):
        self.apply_update(data)

    def apply_update(self, data):
        doc = self._docs[self.id]
        for key, value in data.items():
            if isinstance(value, ArrayUnion):
                current = doc.setdefault(key, [])
                for item in value.values:
                    if item not in current:
                        current.append(copy.deepcopy(item))
            else:
                doc[key] = copy.deepcopy(value)

    async def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, docs, filters=()):
        self._docs = docs
        self.filters = list(filters)

    def where(self, filter):
        return FakeQuery(self._docs, [*self.filters, filter])

    def limit(self, count):
        query = FakeQuery(self._docs, self.filters)
        query._limit = count
        return query

    def _matches(self, data):
        for f in self.filters:
            value = _lookup(data, f.field_path)
            # Firestore never matches a document missing the filtered field
            if value is _MISSING or not _OPS[f.op_string](value, f.value):
                return False
        return True

    async def stream(self):
        emitted = 0
        # Firestore default order is by document id
        for doc_id in sorted(self._docs):
            data = self._docs[doc_id]
            if self._matches(data):
                if getattr(self, "_limit", None) is not None and emitted >= self._limit:
                    return
                emitted += 1
                yield FakeSnapshot(FakeDocRef(self._docs, doc_id), data)


class FakeCollection(FakeQuery):
    _counter = 0

    def document(self, doc_id=None):
        if doc_id is None:
            FakeCollection._counter += 1
            doc_id = f"auto-{FakeCollection._counter:04d}"
        return FakeDocRef(self._docs, doc_id)


class FakeBatch:
    def __init__(self):
        self.operations = []

    def set(self, ref, data):
        self.operations.append(("set", ref, data))

    def update(self, ref, data):
        self.operations.append(("update", ref, data))

    def delete(self, ref):
        self.operations.append(("delete", ref, None))

    async def commit(self):
        for kind, ref, data in self.operations:
            if kind == "set":
                await ref.set(data)
            elif kind == "update":
                ref.apply_update(data)
            else:
                await ref.delete()


@pytest.fixture
def store():
    """Collection name -> {document id -> document dict}."""
    return {}


@pytest.fixture
def fake_client(store):
    client = MagicMock()
    client.collection.side_effect = lambda name: FakeCollection(store.setdefault(name, {}))
    client.batch.side_effect = FakeBatch
    return client


@pytest.fixture
def firestore_db(fake_client):
    db = FirestoreDB.__new__(FirestoreDB)
    db.project_id = "test-project"
    db.database = None
    db.credentials = None
    db._emulator_host = None
    db.client = fake_client
    return db


@pytest.fixture
def initialized_models(firestore_db):
    init_postboard(firestore_db, [User, Post])
    return {"User": User, "Post": Post}



"""Shared test fixtures for HydAuction backend tests."""

import copy
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from hydauction.app import create_app
from hydauction.auth.services.session_store import SessionStore, SessionUser
from hydauction.config import Settings
from hydauction.dependencies import build_services


# ─────────────────────────────────────────────────────────────────
# In-memory stand-in for a Motor database
# ─────────────────────────────────────────────────────────────────


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif isinstance(cond, dict) and "$in" in cond:
            if doc.get(key) not in cond["$in"]:
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Supports the subset of the Motor collection API the services use."""

    def __init__(self, name, unique_fields=()):
        self.name = name
        self.docs = []
        self.unique_fields = tuple(unique_fields)
        self.fail_with = None

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _prepare(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        for field in self.unique_fields:
            if any(existing.get(field) == doc.get(field) for existing in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
        return doc

    async def find_one(self, query, *args, **kwargs):
        self._check_failure()
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None, *args, **kwargs):
        self._check_failure()
        query = query or {}
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def insert_one(self, doc, **kwargs):
        self._check_failure()
        stored = self._prepare(doc)
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def insert_many(self, docs, ordered=True, **kwargs):
        self._check_failure()
        stored = [self._prepare(doc) for doc in docs]
        self.docs.extend(stored)
        return SimpleNamespace(inserted_ids=[d["_id"] for d in stored])

    async def delete_one(self, query, session=None, **kwargs):
        self._check_failure()
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query, session=None, **kwargs):
        self._check_failure()
        before = len(self.docs)
        self.docs = [d for d in self.docs if not _matches(d, query)]
        return SimpleNamespace(deleted_count=before - len(self.docs))


class FakeDatabase:
    def __init__(self):
        self.client = None
        self._collections = {
            "users": FakeCollection("users", unique_fields=("username", "email")),
            "items": FakeCollection("items"),
            "images": FakeCollection("images"),
        }

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]


# ─────────────────────────────────────────────────────────────────
# Unit-test fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def sample_user(sample_user_id):
    return SessionUser(user_id=sample_user_id, username="alice", email="alice@x.com")


@pytest.fixture
def session_store():
    return SessionStore()


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # delete_many etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def storage_error():
    return PyMongoError("connection reset")


# ─────────────────────────────────────────────────────────────────
# Application fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        PUBLIC_DIR=str(tmp_path / "public"),
        STATIC_DIR=str(tmp_path / "static"),
        BCRYPT_ROUNDS=4,
        ENVIRONMENT="test",
    )


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def services(fake_db, test_settings):
    return build_services(fake_db, test_settings)


@pytest.fixture
def app(test_settings, services):
    return create_app(test_settings, services=services)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client

"""
Shared test fixtures.

Provides in-memory stand-ins for the motor collection/database API used by
the DAOs and for the handful of Redis commands used by AuthCache.
"""

import copy
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from pymongo.errors import BulkWriteError, DuplicateKeyError, WriteError

from content_api.cache.auth_cache import AuthCache


def _matches(doc: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    return all(doc.get(key) == value for key, value in (query or {}).items())


def _apply_update(doc: Dict[str, Any], update: Dict[str, Any]) -> None:
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key, value in update.get("$inc", {}).items():
        doc[key] = doc.get(key, 0) + value


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    if all(not flag for flag in projection.values()):
        return {k: v for k, v in doc.items() if k not in projection}
    return {k: v for k, v in doc.items() if k == "_id" or projection.get(k)}


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    async def to_list(self, length=None):
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    """Dict-backed subset of AsyncIOMotorCollection."""

    def __init__(self, name: str):
        self.name = name
        self.docs: List[Dict[str, Any]] = []
        # Return False to reject a document the way a $jsonSchema validator would
        self.validator: Optional[Callable[[Dict[str, Any]], bool]] = None
        # method name -> exception raised on the next call of that method
        self.fail_next: Dict[str, BaseException] = {}
        self.created_indexes: List[Any] = []

    def _maybe_fail(self, method: str) -> None:
        exc = self.fail_next.pop(method, None)
        if exc is not None:
            raise exc

    def _check(self, doc: Dict[str, Any]) -> None:
        if any(existing["_id"] == doc["_id"] for existing in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error _id: {doc['_id']}", code=11000)
        if self.validator is not None and not self.validator(doc):
            raise WriteError("Document failed validation", code=121)

    async def find_one_and_update(self, query, update, upsert=False, return_document=None):
        self._maybe_fail("find_one_and_update")
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return copy.deepcopy(doc)
        if not upsert:
            return None
        doc = dict(query)
        _apply_update(doc, update)
        self.docs.append(doc)
        return copy.deepcopy(doc)

    async def update_one(self, query, update, upsert=False):
        self._maybe_fail("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                _apply_update(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=int(before != doc))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_many(self, query, update, upsert=False):
        self._maybe_fail("update_many")
        matched = modified = 0
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                _apply_update(doc, update)
                matched += 1
                modified += int(before != doc)
        return SimpleNamespace(matched_count=matched, modified_count=modified)

    async def insert_one(self, document):
        self._maybe_fail("insert_one")
        self._check(document)
        self.docs.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def insert_many(self, documents, ordered=True):
        self._maybe_fail("insert_many")
        inserted = []
        for document in documents:
            try:
                self._check(document)
            except WriteError as e:
                raise BulkWriteError({
                    "nInserted": len(inserted),
                    "writeErrors": [{"index": len(inserted), "code": e.code, "errmsg": str(e)}],
                })
            self.docs.append(copy.deepcopy(document))
            inserted.append(document["_id"])
        return SimpleNamespace(inserted_ids=inserted)

    def find(self, query=None, projection=None, sort=None, skip=0, limit=0):
        self._maybe_fail("find")
        docs = [_project(doc, projection) for doc in self.docs if _matches(doc, query)]
        for field, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(field), reverse=direction < 0)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return FakeCursor(docs)

    async def find_one(self, query=None, projection=None):
        self._maybe_fail("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def delete_one(self, query):
        self._maybe_fail("delete_one")
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        self._maybe_fail("delete_many")
        keep = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(keep)
        self.docs = keep
        return SimpleNamespace(deleted_count=deleted)

    async def count_documents(self, query):
        self._maybe_fail("count_documents")
        return sum(1 for doc in self.docs if _matches(doc, query))

    async def create_indexes(self, indexes):
        self.created_indexes.extend(indexes)
        return [index.document["name"] for index in indexes]


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeRedis:
    """The subset of redis.asyncio.Redis used by AuthCache (decode_responses=True)."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def aclose(self):
        return None


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def auth_cache(fake_redis: FakeRedis) -> AuthCache:
    return AuthCache(fake_redis, default_ttl=3600)

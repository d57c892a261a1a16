# content_api/dao/mongo.py
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from bson.errors import BSONError
from loguru import logger
from pymongo import IndexModel
from pymongo.errors import BulkWriteError, PyMongoError

from content_api.core.config import DEFAULT_CONNECTION, get_mongo_settings
from content_api.core.result import DaoResult, classify_error
from content_api.dao.sequence import SEQUENCE_COLLECTION, SequenceAllocator
from content_api.db.database import get_database

# Exceptions a DAO call converts into a failed DaoResult
DAO_ERRORS = (PyMongoError, BSONError, TypeError, ValueError)


class MongoDao:
    """
    Base class for collection DAOs.

    Documents get integer ``_id`` values from a per-collection sequence
    instead of ObjectIds. Every operation returns a :class:`DaoResult`;
    driver errors are logged and never raised to the caller.

    Subclasses pass their logical collection name and add domain methods::

        class ArticleDao(MongoDao):
            def __init__(self, database=None):
                super().__init__("article", database=database)
    """

    # IndexModel list created by ensure_indexes()
    indexes: List[IndexModel] = []

    def __init__(self, collection: str, db: str = DEFAULT_CONNECTION, database=None):
        settings = get_mongo_settings(db)
        if database is None:
            database = get_database(db)

        self.name = collection
        self.collection_name = f"{settings.get('prefix', '')}{collection}"
        self._collection = database[self.collection_name]
        self._sequence = SequenceAllocator(database[SEQUENCE_COLLECTION])

    @property
    def sequence(self) -> SequenceAllocator:
        return self._sequence

    async def ensure_indexes(self) -> DaoResult:
        if not self.indexes:
            return DaoResult.success([])
        try:
            names = await self._collection.create_indexes(self.indexes)
        except DAO_ERRORS as e:
            return self._fail("EnsureIndexes", e)
        logger.info(f"Indexes ready on '{self.collection_name}': {names}")
        return DaoResult.success(names)

    def _fail(self, op: str, exc: BaseException) -> DaoResult:
        kind = classify_error(exc)
        logger.error(f"[Mongo] {op} Error ({self.collection_name}, {kind.value}): {exc}")
        return DaoResult.failure(kind, str(exc))

    # --- Writes ---
    async def insert(self, data: Mapping) -> DaoResult:
        """Insert one document; the result value is the assigned id."""
        if not isinstance(data, Mapping):
            return self._fail("Insert", TypeError(f"document must be a mapping, got {type(data).__name__}"))
        try:
            block = await self._sequence.reserve(self.name)
        except DAO_ERRORS as e:
            return self._fail("Insert", e)

        document = dict(data)
        document["_id"] = block[0]
        try:
            result = await self._collection.insert_one(document)
        except DAO_ERRORS as e:
            await self._release(block)
            return self._fail("Insert", e)
        return DaoResult.success(result.inserted_id)

    async def batch_insert(self, data: List[Mapping]) -> DaoResult:
        """Insert many documents in order; the result value is the inserted count."""
        documents = list(data) if data is not None else []
        if not documents or not all(isinstance(doc, Mapping) for doc in documents):
            return self._fail("BatchInsert", ValueError("batch insert needs a non-empty list of mappings"))

        count = len(documents)
        try:
            block = await self._sequence.reserve(self.name, count)
        except DAO_ERRORS as e:
            return self._fail("BatchInsert", e)

        documents = [dict(doc, _id=_id) for doc, _id in zip(documents, block)]
        try:
            result = await self._collection.insert_many(documents, ordered=True)
        except BulkWriteError as e:
            # Ordered inserts stop at the first error, so the ids that made it are the lowest ones.
            # Those ids stay spent: the counter ends at its old value plus nInserted, not at its old value.
            inserted = e.details.get("nInserted", 0) if e.details else 0
            await self._release(block[inserted:])
            return self._fail("BatchInsert", e)
        except DAO_ERRORS as e:
            await self._release(block)
            return self._fail("BatchInsert", e)
        return DaoResult.success(len(result.inserted_ids))

    async def _release(self, block: range) -> None:
        try:
            await self._sequence.release(self.name, block)
        except PyMongoError as e:
            logger.error(f"[Mongo] Sequence release failed for '{self.name}' ({block.start}..{block.stop - 1}): {e}")

    async def update(self, query: Dict[str, Any], data: Mapping) -> DaoResult:
        """Merge `data` into the first matching document; value is the modified count."""
        return await self._update("Update", self._collection.update_one, query, data)

    async def batch_update(self, query: Dict[str, Any], data: Mapping) -> DaoResult:
        """Merge `data` into every matching document; value is the modified count."""
        return await self._update("BatchUpdate", self._collection.update_many, query, data)

    async def _update(self, op: str, method, query, data) -> DaoResult:
        if not isinstance(data, Mapping) or not data:
            return self._fail(op, ValueError("update needs a non-empty mapping of fields"))
        try:
            result = await method(query, {"$set": dict(data)})
        except DAO_ERRORS as e:
            return self._fail(op, e)
        return DaoResult.success(result.modified_count)

    async def delete(self, query: Dict[str, Any]) -> DaoResult:
        """Remove the first matching document; value is the deleted count."""
        try:
            result = await self._collection.delete_one(query)
        except DAO_ERRORS as e:
            return self._fail("Delete", e)
        return DaoResult.success(result.deleted_count)

    async def batch_delete(self, query: Dict[str, Any]) -> DaoResult:
        """Remove every matching document; value is the deleted count."""
        try:
            result = await self._collection.delete_many(query)
        except DAO_ERRORS as e:
            return self._fail("BatchDelete", e)
        return DaoResult.success(result.deleted_count)

    # --- Reads ---
    async def find_one(self, query: Dict[str, Any], **options) -> DaoResult:
        """Value is the matching document or None."""
        try:
            doc = await self._collection.find_one(query, **options)
        except DAO_ERRORS as e:
            return self._fail("FindOne", e)
        return DaoResult.success(doc)

    async def find(self, query: Dict[str, Any], **options) -> DaoResult:
        """
        Value is the list of matching documents.

        `options` go straight to the driver (projection, sort, skip, limit).
        """
        try:
            cursor = self._collection.find(query, **options)
            docs = await cursor.to_list(length=None)
        except DAO_ERRORS as e:
            return self._fail("Find", e)
        return DaoResult.success(docs)

    async def find_all(self) -> DaoResult:
        try:
            docs = await self._collection.find().to_list(length=None)
        except DAO_ERRORS as e:
            return self._fail("FindAll", e)
        return DaoResult.success(docs)

    async def count(self, query: Optional[Dict[str, Any]] = None) -> DaoResult:
        try:
            total = await self._collection.count_documents(query or {})
        except DAO_ERRORS as e:
            return self._fail("Count", e)
        return DaoResult.success(total)

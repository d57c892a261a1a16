# content_api/dao/sequence.py
from loguru import logger
from pymongo import ReturnDocument

SEQUENCE_COLLECTION = "sequence"
SEQUENCE_FIELD = "seq"


class SequenceAllocator:
    """
    Integer id source backed by one counter document per logical collection.

    Counter documents live in the ``sequence`` collection as
    ``{"_id": <collection name>, "seq": <last issued id>}``.
    """

    def __init__(self, collection):
        self._collection = collection

    async def next(self, key: str, delta: int = 1) -> int:
        """
        Atomically add `delta` to counter `key` and return the new value.
        The counter is created at zero if it does not exist yet.
        """
        updated_doc = await self._collection.find_one_and_update(
            {"_id": key},
            {"$inc": {SEQUENCE_FIELD: delta}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        value = updated_doc[SEQUENCE_FIELD]
        logger.debug(f"Sequence '{key}' moved by {delta} to {value}")
        return value

    async def reserve(self, key: str, count: int = 1) -> range:
        """Reserve a contiguous block of `count` ids with a single increment."""
        if count < 1:
            raise ValueError(f"Cannot reserve {count} ids from sequence '{key}'")
        end = await self.next(key, count)
        return range(end - count + 1, end + 1)

    async def release(self, key: str, block: range) -> bool:
        """
        Hand the ids in `block` back to the counter.

        Only applies while `block` is still the tail of the sequence. If
        someone allocated after it the ids are left unused as a gap.
        """
        if not block:
            return True
        result = await self._collection.update_one(
            {"_id": key, SEQUENCE_FIELD: block[-1]},
            {"$inc": {SEQUENCE_FIELD: -len(block)}}
        )
        if result.modified_count == 1:
            logger.debug(f"Sequence '{key}' released ids {block.start}..{block[-1]}")
            return True
        logger.warning(
            f"Sequence '{key}' advanced past {block[-1]}; ids {block.start}..{block[-1]} left unused"
        )
        return False

    async def current(self, key: str) -> int:
        doc = await self._collection.find_one({"_id": key})
        return doc[SEQUENCE_FIELD] if doc else 0

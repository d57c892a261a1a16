# content_api/dao/article.py
from datetime import datetime, timezone
from typing import Any, Dict

from pymongo import ASCENDING, DESCENDING, IndexModel

from content_api.core.config import DEFAULT_CONNECTION
from content_api.core.result import DaoResult
from content_api.dao.mongo import MongoDao


class ArticleDao(MongoDao):
    indexes = [
        IndexModel([("created_at", DESCENDING)], name="article_created_at_index"),
        IndexModel([("author", ASCENDING)], name="article_author_index", sparse=True),
    ]

    def __init__(self, db: str = DEFAULT_CONNECTION, database=None):
        super().__init__("article", db=db, database=database)

    async def list_page(self, page: int = 1, size: int = 20) -> DaoResult:
        """Newest first. `page` is 1-based."""
        skip = (max(page, 1) - 1) * size
        return await self.find({}, sort=[("_id", DESCENDING)], skip=skip, limit=size)

    async def get_by_id(self, article_id: int) -> DaoResult:
        return await self.find_one({"_id": article_id})

    async def add(self, data: Dict[str, Any]) -> DaoResult:
        now = datetime.now(timezone.utc)
        return await self.insert({**data, "created_at": now, "updated_at": now})

    async def update_by_id(self, article_id: int, data: Dict[str, Any]) -> DaoResult:
        changes = {**data, "updated_at": datetime.now(timezone.utc)}
        return await self.update({"_id": article_id}, changes)

    async def delete_by_id(self, article_id: int) -> DaoResult:
        return await self.delete({"_id": article_id})

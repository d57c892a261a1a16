# content_api/dao/user.py
from datetime import datetime, timezone
from typing import Any, Dict

from pymongo import ASCENDING, IndexModel

from content_api.core.config import DEFAULT_CONNECTION
from content_api.core.result import DaoResult
from content_api.dao.mongo import MongoDao


class UserDao(MongoDao):
    indexes = [
        IndexModel([("phone", ASCENDING)], name="user_phone_unique_index", unique=True),
    ]

    def __init__(self, db: str = DEFAULT_CONNECTION, database=None):
        super().__init__("user", db=db, database=database)

    async def get_by_phone(self, phone: str) -> DaoResult:
        return await self.find_one({"phone": phone})

    async def get_by_id(self, user_id: int) -> DaoResult:
        return await self.find_one({"_id": user_id}, projection={"password": False, "salt": False})

    async def add(self, data: Dict[str, Any]) -> DaoResult:
        now = datetime.now(timezone.utc)
        return await self.insert({**data, "created_at": now, "updated_at": now})

    async def record_login(self, user_id: int, ip: str, login_time: str) -> DaoResult:
        return await self.update(
            {"_id": user_id},
            {"last_login_ip": ip, "last_login_time": login_time, "updated_at": datetime.now(timezone.utc)}
        )

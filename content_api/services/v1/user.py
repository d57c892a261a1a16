# content_api/services/v1/user.py
from loguru import logger

from content_api.core.result import ErrorKind
from content_api.core.security import get_password_hash, make_salt
from content_api.dao.user import UserDao
from content_api.models.response import ApiResponse
from content_api.models.user import User


class UserService:
    def __init__(self, user_dao: UserDao):
        self.user_dao = user_dao

    async def register(self, user_in: User.Create) -> ApiResponse:
        existing = await self.user_dao.get_by_phone(user_in.phone)
        if not existing:
            return ApiResponse.fail("service unavailable, please retry")
        if existing.value:
            return ApiResponse.fail("phone already registered")

        salt = make_salt()
        inserted = await self.user_dao.add({
            "phone": user_in.phone,
            "password": get_password_hash(user_in.password, salt),
            "salt": salt,
            "nickname": user_in.nickname,
        })
        if not inserted:
            # Unique phone index: a concurrent registration won the race
            if inserted.error == ErrorKind.CONFLICT:
                return ApiResponse.fail("phone already registered")
            return ApiResponse.fail("failed to create user")

        logger.info(f"User {inserted.value} registered with phone {user_in.phone}")
        return ApiResponse.ok({"id": inserted.value})

    async def profile(self, user_id: int) -> ApiResponse:
        found = await self.user_dao.get_by_id(user_id)
        if not found:
            return ApiResponse.fail("service unavailable, please retry")
        if not found.value:
            return ApiResponse.fail("user not found")
        user = User.Response(id=found.value["_id"], **{k: v for k, v in found.value.items() if k != "_id"})
        return ApiResponse.ok(user.model_dump(mode="json"))

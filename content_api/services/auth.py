# content_api/services/auth.py
from datetime import datetime
from typing import Any, Callable, Dict

from loguru import logger

from content_api.cache.auth_cache import AuthCache
from content_api.core.security import (
    LOGIN_TIME_FORMAT,
    create_session_token,
    verify_password,
)
from content_api.dao.user import UserDao
from content_api.models.response import ApiResponse

MSG_UNKNOWN_UUID = "unknown uuid"
MSG_USER_NOT_FOUND = "user not found"
MSG_BAD_PASSWORD = "incorrect password"
MSG_SERVICE_ERROR = "service unavailable, please retry"


class AuthService:
    """
    Login / logout for one request.

    An account holds at most one live session: logging in from a new device
    drops the session of whichever device held it before.
    """

    def __init__(
        self,
        user_dao: UserDao,
        auth_cache: AuthCache,
        device_id: str = "",
        client_ip: str = "",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.user_dao = user_dao
        self.auth_cache = auth_cache
        self.device_id = device_id
        self.client_ip = client_ip
        self._clock = clock

    async def login(self, phone: str, password: str) -> ApiResponse:
        if not self.device_id:
            return ApiResponse.fail(MSG_UNKNOWN_UUID)

        found = await self.user_dao.get_by_phone(phone)
        if not found:
            return ApiResponse.fail(MSG_SERVICE_ERROR)
        user = found.value
        if not user:
            logger.info(f"Login rejected: no account for phone {phone}")
            return ApiResponse.fail(MSG_USER_NOT_FOUND)

        if not verify_password(password, user.get("salt", ""), user.get("password", "")):
            logger.info(f"Login rejected: wrong password for phone {phone}")
            return ApiResponse.fail(MSG_BAD_PASSWORD)

        token = await self.sign_in(user)
        return ApiResponse.ok({"token": token})

    async def logout(self) -> ApiResponse:
        if not self.device_id:
            return ApiResponse.fail(MSG_UNKNOWN_UUID)
        await self.auth_cache.logout_by_uuid(self.device_id)
        return ApiResponse.ok()

    async def sign_in(self, user: Dict[str, Any], duration: int = 0) -> str:
        """Start a session for `user` on this device and return its token."""
        # Previous device of this account loses its session
        await self.auth_cache.logout_by_phone(user["phone"])

        login_time = self._clock().strftime(LOGIN_TIME_FORMAT)
        token = create_session_token(user["_id"], user["phone"], self.client_ip, login_time)

        session = {
            "id": user["_id"],
            "phone": user["phone"],
            "nickname": user.get("nickname"),
            "last_login_ip": self.client_ip,
            "last_login_time": login_time,
            "duration": duration,
        }
        await self.auth_cache.set_login_data(user["phone"], self.device_id, token, session)

        recorded = await self.user_dao.record_login(user["_id"], self.client_ip, login_time)
        if not recorded:
            logger.warning(f"Could not record last login for user {user['_id']}: {recorded.message}")

        logger.info(f"User {user['_id']} signed in on device {self.device_id} from {self.client_ip}")
        return token

# content_api/cache/auth_cache.py
import json
from typing import Any, Dict, Optional

import redis.asyncio as redis
from loguru import logger

from content_api.core.config import REDIS_URL, SESSION_TTL_SECONDS

PHONE_KEY = "auth:phone:{}"
UUID_KEY = "auth:uuid:{}"


class AuthCache:
    """
    Login sessions in Redis.

    ``auth:phone:<phone>`` holds the device UUID currently logged in for an
    account, ``auth:uuid:<uuid>`` holds that device's session as JSON.
    """

    def __init__(self, client: redis.Redis, default_ttl: int = SESSION_TTL_SECONDS):
        self._redis = client
        self._default_ttl = default_ttl

    async def set_login_data(self, phone: str, uuid: str, token: str, data: Dict[str, Any]) -> None:
        session = {**data, "token": token, "phone": phone}
        ttl = int(data.get("duration") or 0) or self._default_ttl
        await self._redis.set(PHONE_KEY.format(phone), uuid, ex=ttl)
        await self._redis.set(UUID_KEY.format(uuid), json.dumps(session, default=str), ex=ttl)
        logger.debug(f"Session stored for phone {phone} on device {uuid} (ttl {ttl}s)")

    async def get_login_data(self, uuid: str) -> Optional[Dict[str, Any]]:
        raw = await self._redis.get(UUID_KEY.format(uuid))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Corrupt session payload for device {uuid}; dropping it")
            await self._redis.delete(UUID_KEY.format(uuid))
            return None

    async def get_device(self, phone: str) -> Optional[str]:
        device = await self._redis.get(PHONE_KEY.format(phone))
        if isinstance(device, bytes):
            device = device.decode()
        return device

    async def logout_by_phone(self, phone: str) -> bool:
        """
        Drop whatever session the account currently holds, on any device.

        The device may since have been taken over by another account, so its
        session is only deleted while it still belongs to `phone`.
        """
        device = await self.get_device(phone)
        if device is None:
            return False
        session = await self.get_login_data(device)
        if session is not None and session.get("phone") == phone:
            await self._redis.delete(UUID_KEY.format(device))
            logger.info(f"Previous session of {phone} on device {device} invalidated")
        await self._redis.delete(PHONE_KEY.format(phone))
        return True

    async def logout_by_uuid(self, uuid: str) -> bool:
        """Drop the session of one device. Another device's session is left alone."""
        session = await self.get_login_data(uuid)
        if session is None:
            return False
        await self._redis.delete(UUID_KEY.format(uuid))
        phone = session.get("phone")
        if phone and await self.get_device(phone) == uuid:
            await self._redis.delete(PHONE_KEY.format(phone))
        logger.info(f"Session on device {uuid} logged out")
        return True

    async def verify(self, uuid: str, token: str) -> Optional[Dict[str, Any]]:
        """Return the session if `token` is the live token for device `uuid`."""
        if not uuid or not token:
            return None
        session = await self.get_login_data(uuid)
        if session is None or session.get("token") != token:
            return None
        return session

    async def close(self) -> None:
        await self._redis.aclose()


_auth_cache: Optional[AuthCache] = None


def get_auth_cache() -> AuthCache:
    """Process-wide AuthCache; the Redis client connects on first command."""
    global _auth_cache
    if _auth_cache is None:
        _auth_cache = AuthCache(redis.from_url(REDIS_URL, decode_responses=True))
    return _auth_cache

# content_api/middleware/authentication.py
from typing import Awaitable, Callable, Set

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from content_api.cache.auth_cache import get_auth_cache
from content_api.core.security import DEVICE_HEADER, TOKEN_HEADER
from content_api.models.response import ApiResponse

# Paths that do not need a session
PUBLIC_PATHS: Set[str] = {
    "/",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/health/db",
    "/api/v1/auth/login",
    "/api/v1/auth/logout",  # only ever touches the caller's own device session
    "/api/v1/users/register",
}


def is_public_path(path: str) -> bool:
    if path in PUBLIC_PATHS:
        return True
    if path.startswith("/docs") or path.startswith("/redoc") or path.startswith("/health"):
        return True
    return False


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=ApiResponse.fail(detail).model_dump(),
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Accept a protected request only if its token is the live session of its device."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        request_id = getattr(request.state, 'request_id', 'N/A')

        if is_public_path(path):
            logger.debug(f"RID:{request_id} Public path accessed: {path}. Skipping auth.")
            return await call_next(request)

        device_id = (request.headers.get(DEVICE_HEADER) or "").strip()
        token = (request.headers.get(TOKEN_HEADER) or "").strip()
        if not device_id or not token:
            logger.warning(f"RID:{request_id} Auth failed: missing {DEVICE_HEADER}/{TOKEN_HEADER} for {path}.")
            return _unauthorized("Not authenticated")

        auth_cache = getattr(request.app.state, "auth_cache", None) or get_auth_cache()
        try:
            session = await auth_cache.verify(device_id, token)
        except RedisError as e:
            logger.error(f"RID:{request_id} Session cache error for path {path}: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=ApiResponse.fail("Session store unavailable").model_dump(),
            )

        if session is None:
            logger.warning(f"RID:{request_id} Auth failed: stale or invalid token for device {device_id} on {path}.")
            return _unauthorized("Invalid or expired session")

        request.state.session = session
        logger.debug(f"RID:{request_id} Auth successful for user {session.get('id')} on {path}.")
        return await call_next(request)

# content_api/core/rate_limiter.py
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request

from content_api.models.response import ApiResponse

# In-memory storage; pass storage_uri=REDIS_URL to share limits across workers
limiter = Limiter(key_func=get_remote_address)


def get_rate_limiter() -> Limiter:
    return limiter


def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded on {request.url.path} from {get_remote_address(request)}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content=ApiResponse.fail(f"Rate limit exceeded: {exc.detail}").model_dump(),
    )

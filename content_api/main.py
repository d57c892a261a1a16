# content_api/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status as fastapi_status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from redis.exceptions import RedisError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from content_api.core.config import setup_logging
from content_api.api.v1.api import api_router_v1
from content_api.cache.auth_cache import get_auth_cache
from content_api.core.rate_limiter import get_rate_limiter, rate_limit_exception_handler
from content_api.dao.article import ArticleDao
from content_api.dao.user import UserDao
from content_api.db.database import close_db, init_db, ping
from content_api.middleware.authentication import AuthMiddleware
from content_api.middleware.logging import RequestLoggingMiddleware
from content_api.models.response import ApiResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application startup...")
    await init_db()
    for dao in (UserDao(), ArticleDao()):
        await dao.ensure_indexes()
    logger.info("Database initialized.")
    yield
    logger.info("Application shutdown...")
    try:
        await app.state.auth_cache.close()
    except RedisError as e:
        logger.warning(f"Error closing session cache: {e}")
    close_db()


app = FastAPI(title="Content API", version="1.0.0", lifespan=lifespan)
app.state.auth_cache = get_auth_cache()

# --- Error Handling ---
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation Error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=fastapi_status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ApiResponse.fail("Validation Error", data=jsonable_errors(exc)).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP Exception: Status={exc.status_code}, Detail={exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.fail(str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled Exception: {exc}")
    return JSONResponse(
        status_code=fastapi_status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiResponse.fail("An internal server error occurred.").model_dump(),
    )


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(err.get("loc", [])), "msg": err.get("msg", "")} for err in exc.errors()]


# --- Middleware (last added runs first) ---
app.add_middleware(AuthMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.state.limiter = get_rate_limiter()
app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(api_router_v1)


@app.get("/")
async def read_root():
    return ApiResponse.ok(msg="Welcome!")


@app.get("/health/db")
async def ping_mongodb():
    if await ping():
        return ApiResponse.ok(msg="MongoDB connection is healthy.")
    return JSONResponse(
        status_code=fastapi_status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ApiResponse.fail("MongoDB connection failed.").model_dump(),
    )

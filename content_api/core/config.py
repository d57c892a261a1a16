# content_api/core/config.py
import os
import sys
import logging
from pathlib import Path
from typing import Dict, Any

from dotenv import load_dotenv
from loguru import logger

# --- Load .env from project root (if present) ---
project_root = Path(__file__).resolve().parent.parent.parent
dotenv_path = project_root / '.env'
if dotenv_path.is_file():
    logger.debug(f"Loading environment variables from: {dotenv_path}")
    load_dotenv(dotenv_path=dotenv_path, override=True)
else:
    logger.debug(f".env file not found at {dotenv_path}. Relying on system environment variables.")


# --- Intercept Handler (route stdlib logging into Loguru) ---
class InterceptHandler(logging.Handler):
    """Forwards standard library log records to Loguru."""
    def emit(self, record: logging.LogRecord) -> None:
        try: level = logger.level(record.levelname).name
        except ValueError: level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging():
    """Configure Loguru sinks and intercept stdlib logging."""
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    log_file_path = Path(os.getenv("LOG_FILE_PATH", "logs/content_api_{time:YYYY-MM-DD}.log"))
    log_rotation = os.getenv("LOG_ROTATION", "1 day")
    log_retention = os.getenv("LOG_RETENTION", "7 days")
    log_serialize = os.getenv("LOG_SERIALIZE", "False").lower() == 'true'

    logger.remove()
    logger.add(sys.stderr, level=log_level_name, format=log_format, colorize=True)

    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file_path,
            level=log_level_name,
            format=log_format,
            rotation=log_rotation,
            retention=log_retention,
            serialize=log_serialize,
            enqueue=True,
            backtrace=True,
            diagnose=False,
            encoding="utf-8"
        )
        logger.info(f"File logging enabled at: {log_file_path}")
    except OSError as e:
        logger.error(f"Failed to setup file logging at {log_file_path}: {e}")

    # Root logger at level 0 so every record reaches the intercept handler
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(("uvicorn", "fastapi", "starlette", "pymongo")):
            std_logger = logging.getLogger(name)
            std_logger.handlers = [InterceptHandler()]
            std_logger.propagate = False

    logger.info(f"Loguru logging setup complete. Level: {log_level_name}")


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid {name}. Using default: {default}.")
        return default


# --- Database Configuration ---
MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")

_default_db_name = "content_api"
path_part = MONGODB_URL.rsplit('/', 1)[-1].split('?')[0] if MONGODB_URL.count('/') > 2 else ""
if path_part:
    _default_db_name = path_part
DATABASE_NAME: str = os.getenv("DATABASE_NAME", _default_db_name)
COLLECTION_PREFIX: str = os.getenv("COLLECTION_PREFIX", "")

DEFAULT_CONNECTION = "mongo"

# Connection key -> settings. DAOs pick an entry by key ("mongo" by default).
MONGO_SETTINGS: Dict[str, Dict[str, Any]] = {
    DEFAULT_CONNECTION: {
        "url": MONGODB_URL,
        "database": DATABASE_NAME,
        "prefix": COLLECTION_PREFIX,
    }
}


def register_connection(name: str, url: str, database: str, prefix: str = "") -> None:
    """Add (or replace) a named MongoDB connection entry."""
    MONGO_SETTINGS[name] = {"url": url, "database": database, "prefix": prefix}
    logger.info(f"Registered MongoDB connection '{name}' (database: {database}, prefix: '{prefix}')")


def get_mongo_settings(name: str = DEFAULT_CONNECTION) -> Dict[str, Any]:
    try:
        return MONGO_SETTINGS[name]
    except KeyError:
        raise KeyError(f"No MongoDB connection configured under '{name}'") from None


# --- Session Cache Configuration ---
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
SESSION_TTL_SECONDS: int = _int_env("SESSION_TTL_SECONDS", 7 * 24 * 3600)

# --- Rate Limiting ---
LOGIN_RATE_LIMIT: str = os.getenv("LOGIN_RATE_LIMIT", "10/minute")

logger.info(f"Database Name: {DATABASE_NAME}")
logger.info(f"Collection Prefix: '{COLLECTION_PREFIX}'")
logger.info(f"Session TTL Seconds: {SESSION_TTL_SECONDS}")

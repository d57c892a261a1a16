# content_api/db/database.py
import logging
from typing import Dict

import motor.motor_asyncio
from pymongo.errors import ConnectionFailure

from content_api.core.config import DEFAULT_CONNECTION, MONGO_SETTINGS, get_mongo_settings

logger = logging.getLogger(__name__)

# Connection key -> client. Clients connect lazily, so creating one is cheap.
_clients: Dict[str, motor.motor_asyncio.AsyncIOMotorClient] = {}


def get_client(name: str = DEFAULT_CONNECTION) -> motor.motor_asyncio.AsyncIOMotorClient:
    """Return the client registered under `name`, creating it on first use."""
    client = _clients.get(name)
    if client is None:
        settings = get_mongo_settings(name)
        logger.info(f"Creating MongoDB client for connection '{name}'")
        client = motor.motor_asyncio.AsyncIOMotorClient(settings["url"])
        _clients[name] = client
    return client


def get_database(name: str = DEFAULT_CONNECTION) -> motor.motor_asyncio.AsyncIOMotorDatabase:
    settings = get_mongo_settings(name)
    return get_client(name)[settings["database"]]


async def ping(name: str = DEFAULT_CONNECTION) -> bool:
    try:
        await get_client(name).admin.command("ping")
        return True
    except ConnectionFailure as e:
        logger.error(f"MongoDB ping failed for connection '{name}': {e}")
        return False


async def init_db():
    """Create a client for every configured connection and check it answers."""
    for name in MONGO_SETTINGS:
        get_client(name)
        if await ping(name):
            logger.info(f"MongoDB connection '{name}' is healthy (database: {MONGO_SETTINGS[name]['database']})")
        else:
            logger.warning(f"MongoDB connection '{name}' is not reachable yet; operations will retry on demand")


def close_db():
    for name, client in list(_clients.items()):
        client.close()
        logger.info(f"MongoDB connection '{name}' closed.")
    _clients.clear()

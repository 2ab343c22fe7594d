import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import settings


logger = logging.getLogger("uvicorn.error")

_mongo_client: Optional[AsyncIOMotorClient] = None


def get_mongo_client() -> AsyncIOMotorClient:
    global _mongo_client
    if _mongo_client is None:
        client_kwargs = {"serverSelectionTimeoutMS": 30000}
        # Only Atlas-style TLS URIs need the certifi CA bundle
        if settings.MONGODB_URI.startswith("mongodb+srv://") or "tls=true" in settings.MONGODB_URI:
            import certifi

            client_kwargs["tlsCAFile"] = certifi.where()
        logger.info("Connecting to MongoDB database %s", settings.MONGODB_DB_NAME)
        _mongo_client = AsyncIOMotorClient(settings.MONGODB_URI, **client_kwargs)
    return _mongo_client


def get_mongo_db() -> AsyncIOMotorDatabase:
    client = get_mongo_client()
    return client[settings.MONGODB_DB_NAME]


def close_mongo_client() -> None:
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

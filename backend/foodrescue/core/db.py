# foodrescue/core/db.py
from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from foodrescue.core.config import settings

USERS = "users"
DONORS = "donors"
PICKUP_REQUESTS = "pickup_requests"


@lru_cache(maxsize=1)
def get_client() -> AsyncIOMotorClient:
    # Cached to play nicely with uvicorn --reload
    return AsyncIOMotorClient(settings.mongo_uri, tz_aware=True, uuidRepresentation="standard")


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[settings.mongo_db]

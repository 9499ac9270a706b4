# foodrescue/core/indexes.py
from pymongo import ASCENDING, DESCENDING

from foodrescue.core.db import PICKUP_REQUESTS, USERS


async def ensure_index(col, keys, name: str, **kwargs):
    existing = [ix["name"] async for ix in col.list_indexes()]
    if name in existing:
        return
    await col.create_index(keys, name=name, **kwargs)


async def ensure_indexes(db):
    await ensure_index(db[USERS], [("email", ASCENDING)], "email_1", unique=True)
    # listAll(status) and listByDonor are both newest-first
    await ensure_index(db[PICKUP_REQUESTS], [("status", ASCENDING), ("created_at", DESCENDING)], "status_1_created_at_-1")
    await ensure_index(db[PICKUP_REQUESTS], [("donor_id", ASCENDING), ("created_at", DESCENDING)], "donor_id_1_created_at_-1")

# foodrescue/repos/mongo.py
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from foodrescue.core.db import DONORS, PICKUP_REQUESTS, USERS
from foodrescue.core.errors import AlreadyExists, VersionConflict


def oid() -> str:
    return str(ObjectId())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _out(doc: Optional[dict]) -> Optional[dict]:
    """Mongo document -> repo dict ("_id" becomes "id")."""
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoRepo:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db[USERS]
        self.donors = db[DONORS]
        self.pickups = db[PICKUP_REQUESTS]

    # Users
    async def create_user(self, email: str, password_hash: str, role: str) -> dict:
        doc = {
            "_id": oid(),
            "email": email.strip().lower(),
            "password_hash": password_hash,
            "role": role,
            "created_at": _now(),
        }
        try:
            await self.users.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExists("Email already registered")
        return _out(doc)

    async def find_user_by_email(self, email: str) -> Optional[dict]:
        return _out(await self.users.find_one({"email": (email or "").strip().lower()}))

    async def get_user(self, user_id: str) -> Optional[dict]:
        return _out(await self.users.find_one({"_id": user_id}))

    async def update_user(self, user_id: str, fields: dict) -> Optional[dict]:
        doc = await self.users.find_one_and_update(
            {"_id": user_id}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
        return _out(doc)

    # Donors (keyed by principal id)
    async def create_donor(self, donor_id: str, data: dict) -> dict:
        now = _now()
        doc = {**data, "_id": donor_id, "created_at": now, "updated_at": now}
        try:
            await self.donors.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExists("Donor profile already exists")
        return _out(await self.donors.find_one({"_id": donor_id}))

    async def get_donor(self, donor_id: str) -> Optional[dict]:
        return _out(await self.donors.find_one({"_id": donor_id}))

    async def update_donor(self, donor_id: str, fields: dict) -> Optional[dict]:
        doc = await self.donors.find_one_and_update(
            {"_id": donor_id},
            {"$set": {**fields, "updated_at": _now()}},
            return_document=ReturnDocument.AFTER,
        )
        return _out(doc)

    async def list_donors(self) -> List[dict]:
        # case-insensitive, like the in-memory store
        cur = self.donors.find({}, collation={"locale": "en", "strength": 2}).sort("business_name", 1)
        return [_out(d) async for d in cur]

    async def count_donors(self) -> int:
        return await self.donors.count_documents({})

    # Pickup requests
    async def create_pickup(self, data: dict) -> dict:
        now = _now()
        doc = {
            **data,
            "_id": oid(),
            "status": "pending",
            "version": 1,
            "created_at": now,
            "updated_at": now,
        }
        await self.pickups.insert_one(doc)
        # read-after-write: return what the server stored
        return _out(await self.pickups.find_one({"_id": doc["_id"]}))

    async def get_pickup(self, pickup_id: str) -> Optional[dict]:
        return _out(await self.pickups.find_one({"_id": pickup_id}))

    async def list_pickups(self, status: Optional[str] = None, donor_id: Optional[str] = None) -> List[dict]:
        query: Dict[str, str] = {}
        if status is not None:
            query["status"] = status
        if donor_id is not None:
            query["donor_id"] = donor_id
        cur = self.pickups.find(query).sort([("created_at", -1), ("_id", -1)])
        return [_out(p) async for p in cur]

    async def update_pickup(self, pickup_id: str, fields: dict, expected_version: Optional[int] = None) -> Optional[dict]:
        query: Dict[str, object] = {"_id": pickup_id}
        if expected_version is not None:
            query["version"] = expected_version
        doc = await self.pickups.find_one_and_update(
            query,
            {"$set": {**fields, "updated_at": _now()}, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            if expected_version is not None and await self.pickups.count_documents({"_id": pickup_id}, limit=1):
                raise VersionConflict()
            return None
        return _out(doc)

    # Stats
    async def count_pickups_by_status(self) -> Dict[str, int]:
        agg = self.pickups.aggregate([{"$group": {"_id": "$status", "cnt": {"$sum": 1}}}])
        return {row["_id"]: row["cnt"] async for row in agg}

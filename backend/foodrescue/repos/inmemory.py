# foodrescue/repos/inmemory.py
import copy
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from foodrescue.core.errors import AlreadyExists, VersionConflict


def _id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _copy(doc: Optional[dict]) -> Optional[dict]:
    return copy.deepcopy(doc) if doc is not None else None


class InMemoryRepo:
    """Process-local store with the same async surface as MongoRepo.

    Returned documents are copies; mutating them never touches the store.
    """

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.users_by_email: Dict[str, str] = {}
        self.donors: Dict[str, dict] = {}
        self.pickups: Dict[str, dict] = {}

    # Users
    async def create_user(self, email: str, password_hash: str, role: str) -> dict:
        email = email.strip().lower()
        if email in self.users_by_email:
            raise AlreadyExists("Email already registered")
        uid = _id()
        doc = {"id": uid, "email": email, "password_hash": password_hash, "role": role, "created_at": _now()}
        self.users[uid] = doc
        self.users_by_email[email] = uid
        return _copy(doc)

    async def find_user_by_email(self, email: str) -> Optional[dict]:
        uid = self.users_by_email.get((email or "").strip().lower())
        return _copy(self.users.get(uid)) if uid else None

    async def get_user(self, user_id: str) -> Optional[dict]:
        return _copy(self.users.get(user_id))

    async def update_user(self, user_id: str, fields: dict) -> Optional[dict]:
        doc = self.users.get(user_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        return _copy(doc)

    # Donors
    async def create_donor(self, donor_id: str, data: dict) -> dict:
        if donor_id in self.donors:
            raise AlreadyExists("Donor profile already exists")
        now = _now()
        doc = {**copy.deepcopy(data), "id": donor_id, "created_at": now, "updated_at": now}
        self.donors[donor_id] = doc
        return _copy(doc)

    async def get_donor(self, donor_id: str) -> Optional[dict]:
        return _copy(self.donors.get(donor_id))

    async def update_donor(self, donor_id: str, fields: dict) -> Optional[dict]:
        doc = self.donors.get(donor_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        doc["updated_at"] = _now()
        return _copy(doc)

    async def list_donors(self) -> List[dict]:
        return [_copy(d) for d in sorted(self.donors.values(), key=lambda d: d["business_name"].lower())]

    async def count_donors(self) -> int:
        return len(self.donors)

    # Pickup requests
    async def create_pickup(self, data: dict) -> dict:
        pid = _id()
        now = _now()
        doc = {
            **copy.deepcopy(data),
            "id": pid,
            "status": "pending",
            "version": 1,
            "created_at": now,
            "updated_at": now,
        }
        self.pickups[pid] = doc
        return _copy(doc)

    async def get_pickup(self, pickup_id: str) -> Optional[dict]:
        return _copy(self.pickups.get(pickup_id))

    async def list_pickups(self, status: Optional[str] = None, donor_id: Optional[str] = None) -> List[dict]:
        # newest first; reversed insertion order breaks created_at ties
        vals = [
            p for p in reversed(list(self.pickups.values()))
            if (status is None or p["status"] == status)
            and (donor_id is None or p["donor_id"] == donor_id)
        ]
        vals.sort(key=lambda p: p["created_at"], reverse=True)
        return [_copy(p) for p in vals]

    async def update_pickup(self, pickup_id: str, fields: dict, expected_version: Optional[int] = None) -> Optional[dict]:
        doc = self.pickups.get(pickup_id)
        if doc is None:
            return None
        if expected_version is not None and doc["version"] != expected_version:
            raise VersionConflict()
        doc.update(copy.deepcopy(fields))
        doc["updated_at"] = _now()
        doc["version"] += 1
        return _copy(doc)

    # Stats
    async def count_pickups_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for p in self.pickups.values():
            counts[p["status"]] = counts.get(p["status"], 0) + 1
        return counts

# foodrescue/services/lifecycle.py
"""Pickup request lifecycle: submission and the admin transitions.

Every transition reads the record, asks core.states.transition() for the
next status, then writes conditionally on the version it read. A racing
writer makes the second write fail with VersionConflict instead of
silently overwriting the first.
"""
import math
from datetime import datetime, time, timezone
from typing import Optional, Tuple

from foodrescue.core.errors import InvalidInput, NotFound
from foodrescue.core.guards import ensure_admin, ensure_owner_or_admin
from foodrescue.core.logging import get_logger
from foodrescue.core.states import allowed_operations, transition
from foodrescue.models.pickup import PickupCreate
from foodrescue.services.identity import Session

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def submit(repo, session: Session, data: PickupCreate) -> Tuple[dict, dict]:
    """Validate ownership and donor, persist as pending. Returns (request, donor)."""
    ensure_owner_or_admin(data.donor_id, session)

    donor = await repo.get_donor(data.donor_id)
    if not donor:
        raise NotFound("Donor not found")

    doc = data.model_dump(exclude_none=True)
    if not doc.get("special_instructions"):
        doc.pop("special_instructions", None)
    doc["pickup_date"] = datetime.combine(data.pickup_date, time.min, tzinfo=timezone.utc)

    created = await repo.create_pickup(doc)
    logger.info("Pickup request %s created for donor %s (%s lbs)",
                created["id"], data.donor_id, data.estimated_weight)
    return created, donor


async def get_request(repo, session: Session, pickup_id: str) -> dict:
    doc = await repo.get_pickup(pickup_id)
    if doc is None:
        raise NotFound("Pickup request not found")
    ensure_owner_or_admin(doc["donor_id"], session)
    return doc


async def get_request_detail(repo, session: Session, pickup_id: str) -> dict:
    """Like get_request; admins also get the donor record and the operations open from the current status."""
    doc = await get_request(repo, session, pickup_id)
    if session.is_admin:
        doc["donor"] = await repo.get_donor(doc["donor_id"])
        doc["allowed_operations"] = allowed_operations(doc["status"], session.role)
    return doc


async def _apply(repo, session: Session, pickup_id: str, operation: str, effects: dict) -> dict:
    ensure_admin(session)

    doc = await repo.get_pickup(pickup_id)
    if doc is None:
        raise NotFound("Pickup request not found")

    src = doc["status"]
    dst = transition(src, operation, session.role)

    updated = await repo.update_pickup(pickup_id, {"status": dst, **effects}, expected_version=doc["version"])
    if updated is None:
        raise NotFound("Pickup request not found")

    logger.info("Pickup request %s: %s -> %s by %s", pickup_id, src, dst, session.email)
    return updated


async def confirm(repo, session: Session, pickup_id: str) -> dict:
    return await _apply(repo, session, pickup_id, "confirm", {"confirmed_at": _utcnow()})


async def complete(repo, session: Session, pickup_id: str, actual_weight: Optional[float]) -> dict:
    if actual_weight is None or not math.isfinite(actual_weight) or actual_weight <= 0:
        raise InvalidInput("Actual weight must be greater than 0")
    now = _utcnow()
    return await _apply(repo, session, pickup_id, "complete",
                        {"actual_weight": float(actual_weight), "completed_at": now})


async def cancel(repo, session: Session, pickup_id: str) -> dict:
    return await _apply(repo, session, pickup_id, "cancel", {})

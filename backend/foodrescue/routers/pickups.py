# foodrescue/routers/pickups.py
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from foodrescue.deps import get_notifier, get_repo, get_session, require_admin
from foodrescue.models.pickup import CompleteIn, PickupCreate, PickupOut, PickupSubmitted, Status
from foodrescue.schemas import PickupDetail
from foodrescue.services import lifecycle
from foodrescue.services.identity import Session
from foodrescue.services.notifier import Notifier

router = APIRouter(prefix="/api/pickup-requests", tags=["pickup-requests"])


@router.post("", response_model=PickupSubmitted, status_code=201)
async def submit_pickup_request(
    body: PickupCreate,
    background: BackgroundTasks,
    session: Session = Depends(get_session),
    repo=Depends(get_repo),
    notifier: Notifier = Depends(get_notifier),
):
    created, donor = await lifecycle.submit(repo, session, body)
    # runs after the response; notify() never raises
    background.add_task(notifier.notify, created, donor, body.pickup_date.isoformat())
    return {"id": created["id"], "message": "Pickup request created successfully"}


@router.get("", response_model=List[PickupOut], response_model_exclude_none=True,
            dependencies=[Depends(require_admin)])
async def list_pickup_requests(status: Optional[Status] = Query(None), repo=Depends(get_repo)):
    return await repo.list_pickups(status=status)


@router.get("/mine", response_model=List[PickupOut], response_model_exclude_none=True)
async def my_pickup_requests(session: Session = Depends(get_session), repo=Depends(get_repo)):
    return await repo.list_pickups(donor_id=session.principal_id)


@router.get("/{pickup_id}", response_model=PickupDetail, response_model_exclude_none=True)
async def get_pickup_request(pickup_id: str, session: Session = Depends(get_session), repo=Depends(get_repo)):
    return await lifecycle.get_request_detail(repo, session, pickup_id)

# ---------- Admin transitions ----------
@router.post("/{pickup_id}/confirm", response_model=PickupOut, response_model_exclude_none=True)
async def confirm_pickup(pickup_id: str, session: Session = Depends(require_admin), repo=Depends(get_repo)):
    return await lifecycle.confirm(repo, session, pickup_id)


@router.post("/{pickup_id}/complete", response_model=PickupOut, response_model_exclude_none=True)
async def complete_pickup(
    pickup_id: str,
    body: CompleteIn,
    session: Session = Depends(require_admin),
    repo=Depends(get_repo),
):
    return await lifecycle.complete(repo, session, pickup_id, body.actual_weight)


@router.post("/{pickup_id}/cancel", response_model=PickupOut, response_model_exclude_none=True)
async def cancel_pickup(pickup_id: str, session: Session = Depends(require_admin), repo=Depends(get_repo)):
    return await lifecycle.cancel(repo, session, pickup_id)

# foodrescue/routers/donors.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from foodrescue.core.errors import NotFound
from foodrescue.deps import get_repo, get_session, require_admin
from foodrescue.models.donor import DonorOut, DonorProfileIn, DonorUpdate
from foodrescue.schemas import DonorDetail, DonorSort, DonorWithStats
from foodrescue.services import stats as stats_service
from foodrescue.services.identity import Session

router = APIRouter(prefix="/api/donors", tags=["donors"])


@router.post("/me", response_model=DonorOut, status_code=201)
async def complete_profile(body: DonorProfileIn, session: Session = Depends(get_session), repo=Depends(get_repo)):
    return await repo.create_donor(session.principal_id, {**body.model_dump(), "email": session.email})


@router.get("/me", response_model=DonorOut)
async def my_profile(session: Session = Depends(get_session)):
    if not session.donor:
        raise NotFound("Donor profile not found")
    return session.donor


@router.patch("/me", response_model=DonorOut)
async def update_profile(body: DonorUpdate, session: Session = Depends(get_session), repo=Depends(get_repo)):
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        if not session.donor:
            raise NotFound("Donor profile not found")
        return session.donor
    doc = await repo.update_donor(session.principal_id, fields)
    if doc is None:
        raise NotFound("Donor profile not found")
    return doc

# ---------- Admin ----------
@router.get("", response_model=List[DonorWithStats], dependencies=[Depends(require_admin)])
async def list_donors(
    q: Optional[str] = Query(None, description="Substring of business name, contact name or email"),
    sort: DonorSort = Query("recent"),
    email: Optional[str] = Query(None, description="Exact email match"),
    repo=Depends(get_repo),
):
    rows = await stats_service.donors_with_stats(repo, q=q, sort=sort)
    if email:
        wanted = email.strip().lower()
        rows = [d for d in rows if (d.get("email") or "").lower() == wanted]
    return rows


@router.get("/{donor_id}", response_model=DonorDetail, response_model_exclude_none=True,
            dependencies=[Depends(require_admin)])
async def donor_detail(donor_id: str, repo=Depends(get_repo)):
    donor = await repo.get_donor(donor_id)
    if not donor:
        raise NotFound("Donor not found")
    return {
        "donor": donor,
        "stats": await stats_service.donor_stats(repo, donor_id),
        "requests": await repo.list_pickups(donor_id=donor_id),
    }

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from foodrescue.deps import get_repo, get_session, require_admin
from foodrescue.schemas import AdminStats, DonorStats, StatsOverview
from foodrescue.services.identity import Session
from foodrescue.services.stats import compute_admin_overview, compute_overview, donor_stats, plot_pounds_rescued_png

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/overview", response_model=StatsOverview)
async def overview(repo=Depends(get_repo)):
    return await compute_overview(repo)


@router.get("/admin", response_model=AdminStats, dependencies=[Depends(require_admin)])
async def admin_overview(repo=Depends(get_repo)):
    return await compute_admin_overview(repo)


@router.get("/mine", response_model=DonorStats)
async def my_stats(session: Session = Depends(get_session), repo=Depends(get_repo)):
    return await donor_stats(repo, session.principal_id)


@router.get("/plots/pounds_rescued.png", dependencies=[Depends(require_admin)])
async def pounds_rescued_png(repo=Depends(get_repo)):
    buf = await plot_pounds_rescued_png(repo)
    return StreamingResponse(buf, media_type="image/png")

# foodrescue/services/stats.py
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from collections import defaultdict
from io import BytesIO
from typing import Iterable, Optional

from foodrescue.core.states import PICKUP_STATES


def rescued_weight(pickup: dict) -> float:
    actual = pickup.get("actual_weight")
    return float(actual if actual is not None else pickup["estimated_weight"])


def _summarize(completed: Iterable[dict]) -> tuple[float, int]:
    pounds, count = 0.0, 0
    for p in completed:
        pounds += rescued_weight(p)
        count += 1
    return pounds, count


async def total_pounds_rescued(repo) -> float:
    pounds, _ = _summarize(await repo.list_pickups(status="completed"))
    return pounds


async def total_rescue_count(repo) -> int:
    return len(await repo.list_pickups(status="completed"))


async def active_donor_count(repo) -> int:
    # every donor record counts, regardless of request activity
    return await repo.count_donors()


async def donor_stats(repo, donor_id: str) -> dict:
    pounds, count = _summarize(await repo.list_pickups(status="completed", donor_id=donor_id))
    return {"total_pounds": pounds, "total_rescues": count}


async def compute_overview(repo) -> dict:
    """
    Returns a dict that matches the StatsOverview schema. Recomputed from the
    store on every call; nothing is cached.
    """
    pounds, count = _summarize(await repo.list_pickups(status="completed"))
    return {
        "total_pounds_rescued": pounds,
        "total_rescue_count": count,
        "active_donor_count": await active_donor_count(repo),
    }


async def compute_admin_overview(repo) -> dict:
    overview = await compute_overview(repo)
    counts = await repo.count_pickups_by_status()
    overview["status_counts"] = {s: counts.get(s, 0) for s in PICKUP_STATES}
    return overview


async def pounds_by_donor(repo, limit: Optional[int] = None) -> list[dict]:
    by = defaultdict(float)
    for p in await repo.list_pickups(status="completed"):
        by[p["donor_id"]] += rescued_weight(p)
    top = sorted(by.items(), key=lambda kv: kv[1], reverse=True)
    if limit is not None:
        top = top[:limit]
    return [{"donor_id": k, "pounds": v} for k, v in top]


async def donation_totals(repo) -> dict:
    """donor_id -> {"total_donated", "last_donation_date"} from one scan of completed requests."""
    totals = {}
    for p in await repo.list_pickups(status="completed"):
        t = totals.setdefault(p["donor_id"], {"total_donated": 0.0, "last_donation_date": None})
        t["total_donated"] += rescued_weight(p)
        done = p.get("completed_at")
        if done is not None and (t["last_donation_date"] is None or done > t["last_donation_date"]):
            t["last_donation_date"] = done
    return totals


DONOR_SORTS = ("recent", "name", "donated")


def _matches(donor: dict, needle: str) -> bool:
    return any(needle in (donor.get(f) or "").lower() for f in ("business_name", "contact_name", "email"))


async def donors_with_stats(repo, q: Optional[str] = None, sort: str = "recent") -> list[dict]:
    """
    Admin donor list: every donor with its total donated weight and latest
    completion date, filtered by a case-insensitive substring over business
    name, contact name and email, then sorted by `sort`:

    - recent: latest donation first; donors that never donated come last
    - name: business name, case-insensitive
    - donated: total donated weight, largest first

    Ties keep business-name order.
    """
    if sort not in DONOR_SORTS:
        raise ValueError(f"unknown sort {sort!r}")
    totals = await donation_totals(repo)
    needle = (q or "").strip().lower()

    rows = []
    for d in await repo.list_donors():
        if needle and not _matches(d, needle):
            continue
        rows.append({**d, **totals.get(d["id"], {"total_donated": 0.0, "last_donation_date": None})})

    rows.sort(key=lambda r: (r.get("business_name") or "").lower())
    if sort == "donated":
        rows.sort(key=lambda r: r["total_donated"], reverse=True)
    elif sort == "recent":
        rows.sort(key=lambda r: (r["last_donation_date"] is not None,
                                 r["last_donation_date"].timestamp() if r["last_donation_date"] else 0.0),
                  reverse=True)
    return rows




async def plot_pounds_rescued_png(repo, limit: int = 10):
    """
    Bar chart of pounds rescued per donor (top `limit`), labelled with the
    business name when the donor record exists. Returns a BytesIO PNG buffer.
    """
    top = await pounds_by_donor(repo, limit)
    labels = []
    for t in top:
        donor = await repo.get_donor(t["donor_id"])
        labels.append(donor["business_name"] if donor else t["donor_id"][-6:])
    values = [t["pounds"] for t in top]
    if not labels:
        labels, values = ["No data"], [0]

    fig = plt.figure()
    plt.bar(labels, values)
    plt.xticks(rotation=30, ha="right")
    plt.ylabel("lbs")
    plt.title("Pounds Rescued by Donor")
    plt.tight_layout()

    buf = BytesIO()
    fig.savefig(buf, format="png")
    plt.close(fig)
    buf.seek(0)
    return buf

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from foodrescue.models.donor import CamelModel, DonorOut, DonorProfileIn
from foodrescue.models.pickup import PickupOut

Role = Literal["donor", "admin"]

# --------------------------
# Auth
# --------------------------
class RegisterIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    profile: Optional[DonorProfileIn] = None   # sign-up with business details


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    email: str


class PasswordChangeIn(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class SessionOut(CamelModel):
    principal_id: str
    email: str
    is_admin: bool
    donor: Optional[DonorOut] = None

# --------------------------
# Stats
# --------------------------
class StatsOverview(CamelModel):
    total_pounds_rescued: float
    total_rescue_count: int
    active_donor_count: int


class AdminStats(StatsOverview):
    status_counts: Dict[str, int]


class DonorStats(CamelModel):
    total_pounds: float
    total_rescues: int

# --------------------------
# Admin views
# --------------------------
DonorSort = Literal["recent", "name", "donated"]


class DonorWithStats(DonorOut):
    total_donated: float = 0.0
    last_donation_date: Optional[datetime] = None


class DonorDetail(CamelModel):
    donor: DonorOut
    stats: DonorStats
    requests: List[PickupOut]


class PickupDetail(PickupOut):
    # admin only: the donor record and the transitions open from the current status
    donor: Optional[DonorOut] = None
    allowed_operations: Optional[List[str]] = None

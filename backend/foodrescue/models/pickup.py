from datetime import date, datetime
from typing import Literal, Optional

from pydantic import Field

from foodrescue.models.donor import Address, CamelModel

Status = Literal["pending", "confirmed", "completed", "cancelled"]
TimeWindow = Literal["morning", "afternoon", "evening"]

TIME_WINDOW_LABELS = {
    "morning": "Morning (8am-12pm)",
    "afternoon": "Afternoon (12pm-5pm)",
    "evening": "Evening (5pm-8pm)",
}


class PickupCreate(CamelModel):
    donor_id: str = Field(..., min_length=1)
    food_description: str = Field(..., min_length=1)
    estimated_weight: float = Field(..., ge=1)
    pickup_address: Address
    pickup_date: date
    pickup_time_window: TimeWindow
    contact_on_arrival: str = Field(..., min_length=1)
    special_instructions: Optional[str] = None


class PickupSubmitted(CamelModel):
    id: str
    message: str


class CompleteIn(CamelModel):
    actual_weight: float = Field(..., gt=0)


class PickupOut(CamelModel):
    id: str
    donor_id: str
    status: Status
    food_description: str
    estimated_weight: float
    pickup_address: Address
    pickup_date: datetime
    pickup_time_window: TimeWindow
    contact_on_arrival: str
    special_instructions: Optional[str] = None
    actual_weight: Optional[float] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    version: int = 1

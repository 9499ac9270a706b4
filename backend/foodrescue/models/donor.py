from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

BusinessType = Literal["restaurant", "grocery", "caterer", "bakery", "corporate", "other"]


class CamelModel(BaseModel):
    # allow_inf_nan: json.loads accepts Infinity and NaN literals
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Address(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2)
    zip: str = Field(..., pattern=r"^\d{5}$")


class DonorProfileIn(CamelModel):
    business_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=r"^\d{10}$")
    address: Address
    business_type: BusinessType


class DonorUpdate(CamelModel):
    business_name: Optional[str] = Field(None, min_length=1)
    contact_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$")
    address: Optional[Address] = None
    business_type: Optional[BusinessType] = None


class DonorOut(CamelModel):
    id: str
    email: str
    business_name: str
    contact_name: str
    phone: str
    address: Address
    business_type: BusinessType
    created_at: datetime
    updated_at: datetime

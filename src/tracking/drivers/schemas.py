from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DriverCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    vehicle_id: Optional[int] = Field(None, ge=1)


class DriverUpdate(DriverCreate):
    pass


class DriverResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    customer_id: int
    vehicle_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

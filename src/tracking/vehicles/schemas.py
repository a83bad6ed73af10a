from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VehicleCreate(BaseModel):
    license_plate: str = Field(..., min_length=1, max_length=20)


class VehicleUpdate(VehicleCreate):
    pass


class VehicleResponse(BaseModel):
    id: int
    license_plate: str
    customer_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

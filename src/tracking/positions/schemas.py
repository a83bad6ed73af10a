from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.tracking.utils import to_utc_or_none


class PositionCreate(BaseModel):
    """Schema used when recording a position"""

    vehicle_id: int = Field(..., ge=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    speed: Optional[float] = Field(None, ge=0, le=300)
    ignition: Optional[bool] = None
    timestamp: Optional[datetime] = Field(
        None, description="Capture time, defaults to the time of insert"
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc_or_none(value)


class PositionResponse(BaseModel):
    """Schema used when returning a position"""

    id: int
    vehicle_id: int
    latitude: float
    longitude: float
    speed: Optional[float] = None
    ignition: Optional[bool] = None
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VehiclePositionResponse(PositionResponse):
    license_plate: str


class PositionListResponse(BaseModel):
    data: List[PositionResponse]


class PositionEnvelope(BaseModel):
    data: PositionResponse

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.tracking.utils import to_utc_or_none


class TripBase(BaseModel):
    vehicle_id: int = Field(..., ge=1)
    driver_id: int = Field(..., ge=1)
    start_time: Optional[datetime] = Field(
        None, description="Defaults to the time the trip is created"
    )
    end_time: Optional[datetime] = None
    distance: float = Field(0.0, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc_or_none(value)

    @model_validator(mode="after")
    def validate_time_range(self):
        if self.end_time is not None:
            if self.start_time is None:
                raise ValueError("start_time is required when end_time is given")
            if self.end_time < self.start_time:
                raise ValueError("end_time must be after or equal to start_time")
        return self


class TripCreate(TripBase):
    """Schema used when starting (or back-filling) a trip"""


class TripUpdate(TripBase):
    """Schema used for a full update of a trip"""

    start_time: datetime


class TripEndRequest(BaseModel):
    end_time: Optional[datetime] = Field(None, description="Defaults to now")

    @field_validator("end_time")
    @classmethod
    def normalize_end_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc_or_none(value)


class TripResponse(BaseModel):
    id: int
    vehicle_id: int
    driver_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    distance: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TripDetailsResponse(TripResponse):
    license_plate: Optional[str] = None
    driver_first_name: Optional[str] = None
    driver_last_name: Optional[str] = None


class TripDetailsEnvelope(BaseModel):
    data: TripDetailsResponse

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None


class CustomerUpdate(CustomerCreate):
    pass


class CustomerResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    """Either a customer id or an email identifies the customer"""

    customer_id: Optional[int] = Field(None, ge=1)
    email: Optional[str] = Field(None, max_length=255)


class LoginResponse(BaseModel):
    customer_id: int
    message: str = "Authentication successful"

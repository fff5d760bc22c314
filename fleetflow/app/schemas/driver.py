"""
Driver Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from fleetflow.app.models.fleet_enums import VehicleType, DriverStatus
from fleetflow.app.schemas.common import CamelModel, UTCDateTime


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class DriverCreate(CamelModel):
    """Schema for registering a driver."""
    name: str = Field(..., max_length=120)
    email: EmailStr
    phone: str = Field(..., max_length=50)
    license_number: str = Field(..., max_length=100)
    license_expiry: UTCDateTime
    license_category: VehicleType
    status: DriverStatus = DriverStatus.OFF_DUTY
    safety_score: int = Field(100, ge=0, le=100)
    trip_completion_rate: float = Field(100, ge=0, le=100)
    total_trips: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _required_text(value, "Name")

    @field_validator("phone")
    @classmethod
    def phone_required(cls, value: str) -> str:
        return _required_text(value, "Phone")

    @field_validator("license_number")
    @classmethod
    def license_required(cls, value: str) -> str:
        return _required_text(value, "License number")


class DriverUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    license_expiry: Optional[UTCDateTime] = None
    license_category: Optional[VehicleType] = None
    status: Optional[DriverStatus] = None
    safety_score: Optional[int] = Field(None, ge=0, le=100)
    trip_completion_rate: Optional[float] = Field(None, ge=0, le=100)
    total_trips: Optional[int] = Field(None, ge=0)

    @field_validator("name", "phone", "license_number")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Field cannot be blank")
        return value.strip() if value is not None else None


class DriverResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    license_number: str
    license_expiry: datetime
    license_category: VehicleType
    status: DriverStatus
    safety_score: int
    trip_completion_rate: float
    total_trips: int
    created_at: datetime
    updated_at: datetime


class DriverSummary(CamelModel):
    """Driver fields embedded in trip responses."""
    id: int
    name: str
    email: str
    phone: str
    license_number: str
    status: DriverStatus

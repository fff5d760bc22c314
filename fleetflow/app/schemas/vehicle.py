"""
Vehicle Pydantic schemas.

Defines request and response models for the vehicle registry.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus
from fleetflow.app.schemas.common import CamelModel, UTCDateTime


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class VehicleCreate(CamelModel):
    """Schema for registering a new vehicle."""
    name: str = Field(..., max_length=120, description="Display name")
    license_plate: str = Field(..., max_length=50, description="Unique license plate")
    type: VehicleType = Field(..., description="Motorcycle, Van, Truck or Trailer")
    max_capacity: float = Field(..., gt=0, description="Maximum cargo weight in kg")
    odometer: float = Field(0, ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    health_score: int = Field(100, ge=0, le=100)
    acquisition_date: Optional[UTCDateTime] = None
    acquisition_cost: float = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _required_text(value, "Name")

    @field_validator("license_plate")
    @classmethod
    def plate_required(cls, value: str) -> str:
        return _required_text(value, "License plate")


class VehicleUpdate(CamelModel):
    """Schema for updating an existing vehicle (all fields optional)."""
    name: Optional[str] = Field(None, max_length=120)
    license_plate: Optional[str] = Field(None, max_length=50)
    type: Optional[VehicleType] = None
    max_capacity: Optional[float] = Field(None, gt=0)
    odometer: Optional[float] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None
    health_score: Optional[int] = Field(None, ge=0, le=100)
    acquisition_date: Optional[UTCDateTime] = None
    acquisition_cost: Optional[float] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _required_text(value, "Name")

    @field_validator("license_plate")
    @classmethod
    def plate_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _required_text(value, "License plate")


class VehicleResponse(CamelModel):
    """Schema for vehicle response."""
    id: int
    name: str
    license_plate: str
    type: VehicleType
    max_capacity: float
    odometer: float
    status: VehicleStatus
    health_score: int
    acquisition_date: datetime
    acquisition_cost: float
    created_at: datetime
    updated_at: datetime


class VehicleSummary(CamelModel):
    """Vehicle fields embedded in trip responses."""
    id: int
    name: str
    license_plate: str
    type: VehicleType
    max_capacity: float
    status: VehicleStatus

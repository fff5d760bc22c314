"""
Trip Pydantic schemas.

Defines request and response models for trip dispatching. Incoming
references use the same keys as the stored document did (`vehicle`,
`driver`) and carry the integer ids.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from fleetflow.app.models.trip_enums import TripStatus, TripPriority
from fleetflow.app.schemas.common import CamelModel, UTCDateTime
from fleetflow.app.schemas.driver import DriverSummary
from fleetflow.app.schemas.vehicle import VehicleSummary


class TripCreate(CamelModel):
    """
    Schema for creating a Draft trip.

    Capacity, vehicle availability and driver eligibility are checked by the
    handler against the stored rows.
    """
    vehicle: int = Field(..., description="Vehicle id")
    driver: int = Field(..., description="Driver id")
    origin: str = Field(..., max_length=255)
    destination: str = Field(..., max_length=255)
    cargo_weight: float = Field(..., ge=0, description="Cargo weight in kg")
    cargo_description: Optional[str] = None
    priority: TripPriority = TripPriority.MEDIUM
    start_odometer: Optional[float] = Field(None, ge=0)
    scheduled_date: Optional[UTCDateTime] = None
    estimated_duration: Optional[int] = Field(None, ge=0, description="Minutes")

    @field_validator("origin", "destination")
    @classmethod
    def place_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value


class TripUpdate(CamelModel):
    """
    Schema for editing a trip.

    Status and progress are absent on purpose: they only change through
    the dedicated PATCH endpoints.
    """
    vehicle: Optional[int] = None
    driver: Optional[int] = None
    origin: Optional[str] = Field(None, max_length=255)
    destination: Optional[str] = Field(None, max_length=255)
    cargo_weight: Optional[float] = Field(None, ge=0)
    cargo_description: Optional[str] = None
    priority: Optional[TripPriority] = None
    start_odometer: Optional[float] = Field(None, ge=0)
    end_odometer: Optional[float] = Field(None, ge=0)
    scheduled_date: Optional[UTCDateTime] = None
    estimated_duration: Optional[int] = Field(None, ge=0)

    @field_validator("origin", "destination")
    @classmethod
    def place_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Field cannot be blank")
        return value.strip() if value is not None else None


class ProgressUpdate(CamelModel):
    # Range checked by the handler so the message matches the other rules
    progress: int


class TripResponse(CamelModel):
    """Schema for trip response with vehicle and driver populated."""
    id: int
    trip_id: str = Field(
        ..., validation_alias=AliasChoices("trip_code", "tripId"), serialization_alias="tripId"
    )
    vehicle: VehicleSummary
    driver: DriverSummary
    origin: str
    destination: str
    cargo_weight: float
    cargo_description: Optional[str] = None
    status: TripStatus
    priority: TripPriority
    progress: int
    start_odometer: Optional[float] = None
    end_odometer: Optional[float] = None
    scheduled_date: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    created_at: datetime
    updated_at: datetime

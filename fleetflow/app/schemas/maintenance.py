"""
Maintenance Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from fleetflow.app.models.cost_enums import MaintenanceType, MaintenanceStatus
from fleetflow.app.schemas.common import CamelModel, UTCDateTime
from fleetflow.app.schemas.vehicle import VehicleSummary


class MaintenanceCreate(CamelModel):
    """Schema for scheduling maintenance on a vehicle."""
    vehicle: int = Field(..., description="Vehicle id")
    type: MaintenanceType
    description: str
    cost: float = Field(0, ge=0)
    scheduled_date: Optional[UTCDateTime] = None
    status: MaintenanceStatus = MaintenanceStatus.PENDING

    @field_validator("description")
    @classmethod
    def description_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Description is required")
        return value


class MaintenanceComplete(CamelModel):
    """Final cost of the job; defaults to the estimate on the record."""
    cost: Optional[float] = Field(None, ge=0)


class MaintenanceResponse(CamelModel):
    id: int
    vehicle: VehicleSummary
    type: MaintenanceType
    description: str
    cost: float
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    status: MaintenanceStatus
    created_at: datetime
    updated_at: datetime

"""
Expense Pydantic schemas.

Expenses are append-only, so there is no update schema.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from fleetflow.app.models.cost_enums import ExpenseType
from fleetflow.app.schemas.common import CamelModel, UTCDateTime
from fleetflow.app.schemas.vehicle import VehicleSummary


class ExpenseCreate(CamelModel):
    vehicle: int = Field(..., description="Vehicle id")
    trip: Optional[int] = Field(None, description="Trip id")
    type: ExpenseType
    amount: float = Field(..., gt=0)
    quantity: Optional[float] = Field(None, gt=0, description="Liters, fuel only")
    description: Optional[str] = None
    date: Optional[UTCDateTime] = None
    receipt_number: Optional[str] = Field(None, max_length=100)


class ExpenseResponse(CamelModel):
    id: int
    vehicle: VehicleSummary
    trip: Optional[int] = Field(
        None, validation_alias=AliasChoices("trip_id", "trip"), serialization_alias="trip"
    )
    type: ExpenseType
    amount: float
    quantity: Optional[float] = None
    description: Optional[str] = None
    date: datetime
    receipt_number: Optional[str] = None
    created_at: datetime

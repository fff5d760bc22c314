"""
Expense API endpoints.

Expenses are logged once and then only read.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.cost_enums import ExpenseType
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse, ListResponse
from fleetflow.app.schemas.expense import ExpenseCreate, ExpenseResponse
from fleetflow.app.services.trip_lifecycle import load_vehicle

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=ListResponse[ExpenseResponse])
async def list_expenses(
    type_filter: Optional[ExpenseType] = Query(None, alias="type"),
    vehicle: Optional[int] = Query(None, description="Vehicle ID"),
    current_user: User = Depends(require_permission("expenses", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List expenses, most recent date first."""
    query = select(Expense)
    if type_filter:
        query = query.where(Expense.type == type_filter)
    if vehicle is not None:
        query = query.where(Expense.vehicle_id == vehicle)

    result = await db.execute(query.order_by(Expense.date.desc(), Expense.id.desc()))
    expenses = result.scalars().all()

    return ListResponse[ExpenseResponse](
        count=len(expenses),
        data=[ExpenseResponse.model_validate(e) for e in expenses],
    )


@router.get("/{expense_id}", response_model=DataResponse[ExpenseResponse])
async def get_expense(
    expense_id: int = Path(..., description="Expense ID"),
    current_user: User = Depends(require_permission("expenses", "read")),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = result.scalar_one_or_none()
    if expense is None:
        raise ResourceNotFoundError("Expense")
    return DataResponse[ExpenseResponse](data=ExpenseResponse.model_validate(expense))


@router.post("", response_model=DataResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    data: ExpenseCreate,
    current_user: User = Depends(require_permission("expenses", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Log a cost against a vehicle and, optionally, a trip."""
    vehicle = await load_vehicle(db, data.vehicle)
    if data.trip is not None and await db.get(Trip, data.trip) is None:
        raise ResourceNotFoundError("Trip")

    fields = data.model_dump(exclude={"vehicle", "trip"}, exclude_none=True)
    expense = Expense(vehicle_id=vehicle.id, trip_id=data.trip, **fields)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)

    return DataResponse[ExpenseResponse](data=ExpenseResponse.model_validate(expense))

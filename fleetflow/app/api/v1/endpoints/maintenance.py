"""
Maintenance API endpoints.

Used by managers and safety officers to take vehicles into the shop and
bring them back.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.cost_enums import MaintenanceType, MaintenanceStatus
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse, ListResponse
from fleetflow.app.schemas.maintenance import MaintenanceCreate, MaintenanceComplete, MaintenanceResponse
from fleetflow.app.services.audit import log_user_action, AuditAction
from fleetflow.app.services.maintenance import MaintenanceService

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


async def get_record_or_404(db: AsyncSession, record_id: int) -> MaintenanceRecord:
    result = await db.execute(select(MaintenanceRecord).where(MaintenanceRecord.id == record_id))
    record = result.scalar_one_or_none()
    if record is None:
        raise ResourceNotFoundError("Maintenance record")
    return record


@router.get("", response_model=ListResponse[MaintenanceResponse])
async def list_maintenance(
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    type_filter: Optional[MaintenanceType] = Query(None, alias="type"),
    vehicle: Optional[int] = Query(None, description="Vehicle ID"),
    current_user: User = Depends(require_permission("maintenance", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List maintenance records, newest first."""
    query = select(MaintenanceRecord)
    if status_filter:
        query = query.where(MaintenanceRecord.status == status_filter)
    if type_filter:
        query = query.where(MaintenanceRecord.type == type_filter)
    if vehicle is not None:
        query = query.where(MaintenanceRecord.vehicle_id == vehicle)

    result = await db.execute(
        query.order_by(MaintenanceRecord.created_at.desc(), MaintenanceRecord.id.desc())
    )
    records = result.scalars().all()

    return ListResponse[MaintenanceResponse](
        count=len(records),
        data=[MaintenanceResponse.model_validate(r) for r in records],
    )


@router.get("/{record_id}", response_model=DataResponse[MaintenanceResponse])
async def get_maintenance(
    record_id: int = Path(..., description="Maintenance record ID"),
    current_user: User = Depends(require_permission("maintenance", "read")),
    db: AsyncSession = Depends(get_db)
):
    record = await get_record_or_404(db, record_id)
    return DataResponse[MaintenanceResponse](data=MaintenanceResponse.model_validate(record))


@router.post("", response_model=DataResponse[MaintenanceResponse], status_code=status.HTTP_201_CREATED)
async def schedule_maintenance(
    data: MaintenanceCreate,
    current_user: User = Depends(require_permission("maintenance", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Schedule maintenance; an open record puts the vehicle In Shop."""
    record = await MaintenanceService.schedule(db, data)
    return DataResponse[MaintenanceResponse](data=MaintenanceResponse.model_validate(record))


@router.patch("/{record_id}/complete", response_model=DataResponse[MaintenanceResponse])
async def complete_maintenance(
    request: Request,
    record_id: int = Path(..., description="Maintenance record ID"),
    payload: Optional[MaintenanceComplete] = None,
    current_user: User = Depends(require_permission("maintenance", "complete")),
    db: AsyncSession = Depends(get_db)
):
    """Close a record, release the vehicle and book the cost."""
    record = await get_record_or_404(db, record_id)
    cost = payload.cost if payload is not None else None
    record, expense = await MaintenanceService.complete(db, record, cost)

    await log_user_action(
        db, current_user, AuditAction.MAINTENANCE_COMPLETED,
        metadata={
            "maintenance_id": record.id,
            "vehicle_id": record.vehicle_id,
            "cost": record.cost,
            "expense_id": expense.id if expense is not None else None,
        },
        request=request,
    )
    return DataResponse[MaintenanceResponse](data=MaintenanceResponse.model_validate(record))

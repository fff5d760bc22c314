"""
Vehicle registry API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy import select, func, or_, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.user import User
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.common import DataResponse, ListResponse, MessageResponse, StatusUpdate
from fleetflow.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


async def get_vehicle_or_404(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise ResourceNotFoundError("Vehicle")
    return vehicle


async def ensure_plate_free(db: AsyncSession, license_plate: str) -> None:
    result = await db.execute(select(Vehicle.id).where(Vehicle.license_plate == license_plate))
    if result.scalar_one_or_none() is not None:
        raise BusinessRuleError("Vehicle with this license plate already exists")


@router.get("", response_model=ListResponse[VehicleResponse])
async def list_vehicles(
    search: Optional[str] = Query(None, description="Matches name, license plate or type"),
    status_filter: Optional[VehicleStatus] = Query(None, alias="status"),
    type_filter: Optional[VehicleType] = Query(None, alias="type"),
    current_user: User = Depends(require_permission("vehicles", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List vehicles, newest first."""
    query = select(Vehicle)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Vehicle.name.ilike(pattern),
            Vehicle.license_plate.ilike(pattern),
            cast(Vehicle.type, String).ilike(pattern),
        ))
    if status_filter:
        query = query.where(Vehicle.status == status_filter)
    if type_filter:
        query = query.where(Vehicle.type == type_filter)

    result = await db.execute(query.order_by(Vehicle.created_at.desc(), Vehicle.id.desc()))
    vehicles = result.scalars().all()

    return ListResponse[VehicleResponse](
        count=len(vehicles),
        data=[VehicleResponse.model_validate(v) for v in vehicles],
    )


@router.get("/{vehicle_id}", response_model=DataResponse[VehicleResponse])
async def get_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: User = Depends(require_permission("vehicles", "read")),
    db: AsyncSession = Depends(get_db)
):
    vehicle = await get_vehicle_or_404(db, vehicle_id)
    return DataResponse[VehicleResponse](data=VehicleResponse.model_validate(vehicle))


@router.post("", response_model=DataResponse[VehicleResponse], status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: User = Depends(require_permission("vehicles", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Register a vehicle (Manager / Dispatcher)."""
    await ensure_plate_free(db, vehicle_data.license_plate)

    fields = vehicle_data.model_dump(exclude_none=True)
    vehicle = Vehicle(**fields)
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    return DataResponse[VehicleResponse](data=VehicleResponse.model_validate(vehicle))


@router.put("/{vehicle_id}", response_model=DataResponse[VehicleResponse])
async def update_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    vehicle_data: VehicleUpdate = ...,
    current_user: User = Depends(require_permission("vehicles", "update")),
    db: AsyncSession = Depends(get_db)
):
    """
    Update vehicle details (Manager / Dispatcher).

    The plate is only re-checked for uniqueness when it actually changes.
    """
    vehicle = await get_vehicle_or_404(db, vehicle_id)

    update_data = vehicle_data.model_dump(exclude_unset=True, exclude_none=True)
    new_plate = update_data.get("license_plate")
    if new_plate and new_plate != vehicle.license_plate:
        await ensure_plate_free(db, new_plate)

    for field, value in update_data.items():
        setattr(vehicle, field, value)

    await db.commit()
    await db.refresh(vehicle)

    return DataResponse[VehicleResponse](data=VehicleResponse.model_validate(vehicle))


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(
    request: Request,
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: User = Depends(require_permission("vehicles", "delete")),
    db: AsyncSession = Depends(get_db)
):
    """Delete a vehicle (Manager). Vehicles with trip or cost history are kept."""
    vehicle = await get_vehicle_or_404(db, vehicle_id)

    for model, label in ((Trip, "trips"), (MaintenanceRecord, "maintenance records"), (Expense, "expenses")):
        linked = await db.execute(select(func.count(model.id)).where(model.vehicle_id == vehicle.id))
        if linked.scalar():
            raise BusinessRuleError(f"Cannot delete vehicle with existing {label}")

    plate = vehicle.license_plate
    await db.delete(vehicle)
    await db.commit()

    await log_user_action(
        db, current_user, AuditAction.VEHICLE_DELETED,
        metadata={"vehicle_id": vehicle_id, "license_plate": plate},
        request=request,
    )
    return MessageResponse(message="Vehicle deleted successfully")


@router.patch("/{vehicle_id}/status", response_model=DataResponse[VehicleResponse])
async def update_vehicle_status(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    payload: StatusUpdate = ...,
    current_user: User = Depends(require_permission("vehicles", "update_status")),
    db: AsyncSession = Depends(get_db)
):
    try:
        new_status = VehicleStatus(payload.status)
    except ValueError:
        raise BusinessRuleError("Invalid status")

    vehicle = await get_vehicle_or_404(db, vehicle_id)
    vehicle.status = new_status
    await db.commit()
    await db.refresh(vehicle)

    return DataResponse[VehicleResponse](data=VehicleResponse.model_validate(vehicle))

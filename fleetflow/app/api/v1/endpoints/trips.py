"""
Trip dispatching API endpoints.

Creation validates the vehicle/driver assignment; status and progress
changes go through the trip lifecycle service.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus, TripPriority
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse, ListResponse, MessageResponse, StatusUpdate
from fleetflow.app.schemas.trip import TripCreate, TripUpdate, TripResponse, ProgressUpdate
from fleetflow.app.services.audit import log_user_action, AuditAction
from fleetflow.app.services.trip_lifecycle import (
    create_trip as create_draft_trip,
    transition_trip,
    ensure_capacity,
    load_vehicle,
    load_driver,
)

router = APIRouter(prefix="/trips", tags=["Trips"])


async def get_trip_or_404(db: AsyncSession, trip_id: int) -> Trip:
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if trip is None:
        raise ResourceNotFoundError("Trip")
    return trip


@router.get("", response_model=ListResponse[TripResponse])
async def list_trips(
    search: Optional[str] = Query(None, description="Matches trip id, origin or destination"),
    status_filter: Optional[TripStatus] = Query(None, alias="status"),
    priority: Optional[TripPriority] = Query(None),
    current_user: User = Depends(require_permission("trips", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List trips with vehicle and driver populated, newest first."""
    query = select(Trip)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Trip.trip_code.ilike(pattern),
            Trip.origin.ilike(pattern),
            Trip.destination.ilike(pattern),
        ))
    if status_filter:
        query = query.where(Trip.status == status_filter)
    if priority:
        query = query.where(Trip.priority == priority)

    result = await db.execute(query.order_by(Trip.created_at.desc(), Trip.id.desc()))
    trips = result.scalars().all()

    return ListResponse[TripResponse](
        count=len(trips),
        data=[TripResponse.model_validate(t) for t in trips],
    )


@router.get("/{trip_id}", response_model=DataResponse[TripResponse])
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: User = Depends(require_permission("trips", "read")),
    db: AsyncSession = Depends(get_db)
):
    trip = await get_trip_or_404(db, trip_id)
    return DataResponse[TripResponse](data=TripResponse.model_validate(trip))


@router.post("", response_model=DataResponse[TripResponse], status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    request: Request,
    current_user: User = Depends(require_permission("trips", "create")),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a Draft trip (Manager / Dispatcher).

    The vehicle must be Available with enough capacity and the driver
    On Duty with a valid license. The vehicle is not reserved until the
    trip is dispatched.
    """
    trip = await create_draft_trip(db, trip_data)

    await log_user_action(
        db, current_user, AuditAction.TRIP_CREATED,
        metadata={"trip_id": trip.id, "trip_code": trip.trip_code, "cargo_weight": trip.cargo_weight},
        request=request,
    )
    return DataResponse[TripResponse](data=TripResponse.model_validate(trip))


@router.put("/{trip_id}", response_model=DataResponse[TripResponse])
async def update_trip(
    trip_id: int = Path(..., description="Trip ID"),
    trip_data: TripUpdate = ...,
    current_user: User = Depends(require_permission("trips", "update")),
    db: AsyncSession = Depends(get_db)
):
    """
    Update trip details (Manager / Dispatcher).

    A new vehicle or cargo weight is re-checked against capacity; a new
    driver must exist.
    """
    trip = await get_trip_or_404(db, trip_id)
    update_data = trip_data.model_dump(exclude_unset=True, exclude_none=True)

    vehicle_id = update_data.pop("vehicle", trip.vehicle_id)
    driver_id = update_data.pop("driver", trip.driver_id)

    if vehicle_id != trip.vehicle_id or "cargo_weight" in update_data:
        vehicle = await load_vehicle(db, vehicle_id)
        ensure_capacity(vehicle, update_data.get("cargo_weight", trip.cargo_weight))
        trip.vehicle = vehicle

    if driver_id != trip.driver_id:
        trip.driver = await load_driver(db, driver_id)

    for field, value in update_data.items():
        setattr(trip, field, value)

    await db.commit()
    await db.refresh(trip)

    return DataResponse[TripResponse](data=TripResponse.model_validate(trip))


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    request: Request,
    trip_id: int = Path(..., description="Trip ID"),
    current_user: User = Depends(require_permission("trips", "delete")),
    db: AsyncSession = Depends(get_db)
):
    """Delete a trip (Manager). Trips in progress cannot be deleted."""
    trip = await get_trip_or_404(db, trip_id)

    if trip.status == TripStatus.IN_PROGRESS:
        raise BusinessRuleError("Cannot delete trip in progress")

    trip_code = trip.trip_code
    await db.delete(trip)
    await db.commit()

    await log_user_action(
        db, current_user, AuditAction.TRIP_DELETED,
        metadata={"trip_id": trip_id, "trip_code": trip_code},
        request=request,
    )
    return MessageResponse(message="Trip deleted successfully")


@router.patch("/{trip_id}/status", response_model=DataResponse[TripResponse])
async def update_trip_status(
    request: Request,
    trip_id: int = Path(..., description="Trip ID"),
    payload: StatusUpdate = ...,
    current_user: User = Depends(require_permission("trips", "update_status")),
    db: AsyncSession = Depends(get_db)
):
    """Move a trip through its lifecycle; the vehicle follows."""
    try:
        new_status = TripStatus(payload.status)
    except ValueError:
        raise BusinessRuleError("Invalid status")

    trip = await get_trip_or_404(db, trip_id)
    previous = trip.status
    trip = await transition_trip(db, trip, status=new_status)

    if previous != trip.status:
        await log_user_action(
            db, current_user, AuditAction.TRIP_STATUS_CHANGED,
            metadata={"trip_code": trip.trip_code, "from": previous.value, "to": trip.status.value},
            request=request,
        )
    return DataResponse[TripResponse](data=TripResponse.model_validate(trip))


@router.patch("/{trip_id}/progress", response_model=DataResponse[TripResponse])
async def update_trip_progress(
    request: Request,
    trip_id: int = Path(..., description="Trip ID"),
    payload: ProgressUpdate = ...,
    current_user: User = Depends(require_permission("trips", "update_progress")),
    db: AsyncSession = Depends(get_db)
):
    """Report progress (0-100). Reaching 100 completes the trip."""
    trip = await get_trip_or_404(db, trip_id)
    previous = trip.status
    trip = await transition_trip(db, trip, progress=payload.progress)

    if previous != trip.status:
        await log_user_action(
            db, current_user, AuditAction.TRIP_STATUS_CHANGED,
            metadata={"trip_code": trip.trip_code, "from": previous.value, "to": trip.status.value},
            request=request,
        )
    return DataResponse[TripResponse](data=TripResponse.model_validate(trip))

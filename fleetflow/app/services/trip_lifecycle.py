"""
Trip lifecycle service.

Owns trip numbering and every trip state change. The status and progress
endpoints both go through `transition_trip`, and the trip, its vehicle,
its driver and the resulting notifications are committed together.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.fleet_enums import VehicleStatus, DriverStatus
from fleetflow.app.models.notification import NotificationType
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus, ACTIVE_TRIP_STATUSES
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.trip import TripCreate
from fleetflow.app.services.notification_service import NotificationService, TRIP_WATCHERS

logger = logging.getLogger(__name__)

TRIP_CODE_PREFIX = "TRP-"
MAX_CODE_ATTEMPTS = 3

FINISHED_STATUSES = (TripStatus.COMPLETED, TripStatus.CANCELLED)


def format_trip_code(sequence_number: int) -> str:
    return f"{TRIP_CODE_PREFIX}{sequence_number:04d}"


async def next_sequence_number(db: AsyncSession) -> int:
    result = await db.execute(select(func.max(Trip.sequence_number)))
    return (result.scalar() or 0) + 1


def _kg(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def ensure_capacity(vehicle: Vehicle, cargo_weight: float) -> None:
    if cargo_weight > vehicle.max_capacity:
        raise BusinessRuleError(
            f"Cargo weight ({_kg(cargo_weight)} kg) exceeds vehicle capacity ({_kg(vehicle.max_capacity)} kg)"
        )


def ensure_driver_eligible(driver: Driver, now: Optional[datetime] = None) -> None:
    if driver.status != DriverStatus.ON_DUTY:
        raise BusinessRuleError("Driver is not on duty")
    if driver.license_expiry < (now or datetime.utcnow()):
        raise BusinessRuleError("Driver license has expired")


async def load_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise ResourceNotFoundError("Vehicle")
    return vehicle


async def load_driver(db: AsyncSession, driver_id: int) -> Driver:
    driver = await db.get(Driver, driver_id)
    if driver is None:
        raise ResourceNotFoundError("Driver")
    return driver


async def create_trip(db: AsyncSession, trip_data: TripCreate) -> Trip:
    """
    Validate the assignment and store a new Draft trip.

    Checks run in a fixed order: vehicle exists, vehicle is Available,
    cargo fits, driver exists, driver is On Duty, license is valid. The
    vehicle keeps its status until the trip is dispatched.

    The next trip number is max + 1; a concurrent insert that grabs the
    same number is retried up to MAX_CODE_ATTEMPTS times.
    """
    vehicle = await load_vehicle(db, trip_data.vehicle)
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise BusinessRuleError("Vehicle is not available")
    ensure_capacity(vehicle, trip_data.cargo_weight)

    driver = await load_driver(db, trip_data.driver)
    ensure_driver_eligible(driver)

    fields = trip_data.model_dump(exclude={"vehicle", "driver"})

    attempt = 0
    while True:
        attempt += 1
        sequence_number = await next_sequence_number(db)
        trip = Trip(
            sequence_number=sequence_number,
            trip_code=format_trip_code(sequence_number),
            vehicle_id=trip_data.vehicle,
            driver_id=trip_data.driver,
            status=TripStatus.DRAFT,
            progress=0,
            **fields,
        )
        db.add(trip)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if attempt == MAX_CODE_ATTEMPTS:
                raise
            logger.warning("Trip number %s taken, retrying (attempt %d)", trip.trip_code, attempt)
            continue

        await db.refresh(trip)
        logger.info("Trip %s created (vehicle=%s, driver=%s)", trip.trip_code, trip.vehicle_id, trip.driver_id)
        return trip


def _apply_status(trip: Trip, new_status: TripStatus, now: datetime) -> None:
    previous = trip.status
    if new_status == previous:
        return
    trip.status = new_status
    vehicle = trip.vehicle

    if new_status in ACTIVE_TRIP_STATUSES:
        if vehicle is not None:
            vehicle.status = VehicleStatus.ON_TRIP
        if new_status == TripStatus.IN_PROGRESS and trip.started_at is None:
            trip.started_at = now

    elif new_status in FINISHED_STATUSES:
        # Only a trip that held the vehicle hands it back
        if vehicle is not None and previous in ACTIVE_TRIP_STATUSES:
            vehicle.status = VehicleStatus.AVAILABLE
        # First completion only; repeats are no-ops
        if new_status == TripStatus.COMPLETED and trip.completed_at is None:
            trip.completed_at = now
            trip.progress = 100
            if trip.driver is not None:
                trip.driver.total_trips = (trip.driver.total_trips or 0) + 1


async def transition_trip(
    db: AsyncSession,
    trip: Trip,
    status: Optional[TripStatus] = None,
    progress: Optional[int] = None,
) -> Trip:
    """
    Apply a status change, a progress update, or both, then commit.

    Progress 100 is the same as moving to Completed. Side effects:
    - Dispatched / In Progress: vehicle goes On Trip; first In Progress stamps started_at
    - Completed / Cancelled: vehicle goes back to Available if this trip had it out
    - re-sending the current status changes nothing
    - first Completed: stamps completed_at, forces progress 100, counts the trip for the driver
    """
    if progress is not None:
        if progress < 0 or progress > 100:
            raise BusinessRuleError("Progress must be between 0 and 100")
        trip.progress = progress
        if progress == 100:
            status = TripStatus.COMPLETED

    previous = trip.status
    if status is not None:
        _apply_status(trip, status, datetime.utcnow())

    if status is not None and status != previous:
        await NotificationService.notify_roles(
            db,
            TRIP_WATCHERS,
            title=f"Trip {trip.trip_code} {status.value.lower()}",
            message=f"{trip.origin} to {trip.destination} moved from {previous.value} to {status.value}",
            type=NotificationType.TRIP_UPDATE,
            metadata={"trip_id": trip.id, "trip_code": trip.trip_code, "status": status.value},
        )
        logger.info("Trip %s: %s -> %s", trip.trip_code, previous.value, status.value)

    await db.commit()
    await db.refresh(trip)
    return trip

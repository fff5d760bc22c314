"""
Driver API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.fleet_enums import DriverStatus
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse, ListResponse, MessageResponse, StatusUpdate
from fleetflow.app.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/drivers", tags=["Drivers"])


async def get_driver_or_404(db: AsyncSession, driver_id: int) -> Driver:
    driver = await db.get(Driver, driver_id)
    if driver is None:
        raise ResourceNotFoundError("Driver")
    return driver


async def ensure_email_free(db: AsyncSession, email: str) -> None:
    result = await db.execute(select(Driver.id).where(Driver.email == email))
    if result.scalar_one_or_none() is not None:
        raise BusinessRuleError("Driver with this email already exists")


async def ensure_license_free(db: AsyncSession, license_number: str) -> None:
    result = await db.execute(select(Driver.id).where(Driver.license_number == license_number))
    if result.scalar_one_or_none() is not None:
        raise BusinessRuleError("Driver with this license number already exists")


@router.get("", response_model=ListResponse[DriverResponse])
async def list_drivers(
    search: Optional[str] = Query(None, description="Matches name, email or license number"),
    status_filter: Optional[DriverStatus] = Query(None, alias="status"),
    current_user: User = Depends(require_permission("drivers", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List drivers, newest first."""
    query = select(Driver)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Driver.name.ilike(pattern),
            Driver.email.ilike(pattern),
            Driver.license_number.ilike(pattern),
        ))
    if status_filter:
        query = query.where(Driver.status == status_filter)

    result = await db.execute(query.order_by(Driver.created_at.desc(), Driver.id.desc()))
    drivers = result.scalars().all()

    return ListResponse[DriverResponse](
        count=len(drivers),
        data=[DriverResponse.model_validate(d) for d in drivers],
    )


@router.get("/{driver_id}", response_model=DataResponse[DriverResponse])
async def get_driver(
    driver_id: int = Path(..., description="Driver ID"),
    current_user: User = Depends(require_permission("drivers", "read")),
    db: AsyncSession = Depends(get_db)
):
    driver = await get_driver_or_404(db, driver_id)
    return DataResponse[DriverResponse](data=DriverResponse.model_validate(driver))


@router.post("", response_model=DataResponse[DriverResponse], status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: User = Depends(require_permission("drivers", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Register a driver (Manager / Dispatcher)."""
    await ensure_email_free(db, driver_data.email)
    await ensure_license_free(db, driver_data.license_number)

    driver = Driver(**driver_data.model_dump())
    db.add(driver)
    await db.commit()
    await db.refresh(driver)

    return DataResponse[DriverResponse](data=DriverResponse.model_validate(driver))


@router.put("/{driver_id}", response_model=DataResponse[DriverResponse])
async def update_driver(
    driver_id: int = Path(..., description="Driver ID"),
    driver_data: DriverUpdate = ...,
    current_user: User = Depends(require_permission("drivers", "update")),
    db: AsyncSession = Depends(get_db)
):
    """
    Update driver details (Manager / Dispatcher).

    Email and license number are only re-checked when they change.
    """
    driver = await get_driver_or_404(db, driver_id)

    update_data = driver_data.model_dump(exclude_unset=True, exclude_none=True)
    new_email = update_data.get("email")
    if new_email and new_email != driver.email:
        await ensure_email_free(db, new_email)
    new_license = update_data.get("license_number")
    if new_license and new_license != driver.license_number:
        await ensure_license_free(db, new_license)

    for field, value in update_data.items():
        setattr(driver, field, value)

    await db.commit()
    await db.refresh(driver)

    return DataResponse[DriverResponse](data=DriverResponse.model_validate(driver))


@router.delete("/{driver_id}", response_model=MessageResponse)
async def delete_driver(
    request: Request,
    driver_id: int = Path(..., description="Driver ID"),
    current_user: User = Depends(require_permission("drivers", "delete")),
    db: AsyncSession = Depends(get_db)
):
    """Delete a driver (Manager). Drivers with trip history are kept."""
    driver = await get_driver_or_404(db, driver_id)

    trips = await db.execute(select(func.count(Trip.id)).where(Trip.driver_id == driver.id))
    if trips.scalar():
        raise BusinessRuleError("Cannot delete driver with existing trips")

    license_number = driver.license_number
    await db.delete(driver)
    await db.commit()

    await log_user_action(
        db, current_user, AuditAction.DRIVER_DELETED,
        metadata={"driver_id": driver_id, "license_number": license_number},
        request=request,
    )
    return MessageResponse(message="Driver deleted successfully")


@router.patch("/{driver_id}/status", response_model=DataResponse[DriverResponse])
async def update_driver_status(
    driver_id: int = Path(..., description="Driver ID"),
    payload: StatusUpdate = ...,
    current_user: User = Depends(require_permission("drivers", "update_status")),
    db: AsyncSession = Depends(get_db)
):
    try:
        new_status = DriverStatus(payload.status)
    except ValueError:
        raise BusinessRuleError("Invalid status")

    driver = await get_driver_or_404(db, driver_id)
    driver.status = new_status
    await db.commit()
    await db.refresh(driver)

    return DataResponse[DriverResponse](data=DriverResponse.model_validate(driver))

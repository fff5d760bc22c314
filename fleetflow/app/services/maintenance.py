"""
Maintenance workflow service.

Scheduling puts a vehicle In Shop; completion returns it to service and
books the cost as an expense. Each step commits as one transaction.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import BusinessRuleError
from fleetflow.app.models.cost_enums import (
    MaintenanceStatus, ExpenseType, OPEN_MAINTENANCE_STATUSES,
)
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.fleet_enums import VehicleStatus
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.notification import NotificationType
from fleetflow.app.schemas.maintenance import MaintenanceCreate
from fleetflow.app.services.notification_service import NotificationService, MAINTENANCE_WATCHERS
from fleetflow.app.services.trip_lifecycle import load_vehicle

logger = logging.getLogger(__name__)


def _book_expense(db: AsyncSession, record: MaintenanceRecord, when: datetime) -> Optional[Expense]:
    if not record.cost or record.cost <= 0:
        return None
    expense = Expense(
        vehicle_id=record.vehicle_id,
        type=ExpenseType.MAINTENANCE,
        amount=record.cost,
        description=f"Maintenance: {record.description}",
        date=when,
    )
    db.add(expense)
    return expense


class MaintenanceService:

    @staticmethod
    async def schedule(db: AsyncSession, data: MaintenanceCreate) -> MaintenanceRecord:
        """
        Create a maintenance record and take the vehicle off the road.

        A record created as Completed books its cost right away.
        """
        vehicle = await load_vehicle(db, data.vehicle)
        is_open = data.status in OPEN_MAINTENANCE_STATUSES

        if is_open and vehicle.status == VehicleStatus.ON_TRIP:
            raise BusinessRuleError("Cannot schedule maintenance while the vehicle is on a trip")

        now = datetime.utcnow()
        record = MaintenanceRecord(
            vehicle_id=vehicle.id,
            type=data.type,
            description=data.description,
            cost=data.cost,
            scheduled_date=data.scheduled_date or now,
            status=data.status,
            completed_date=None if is_open else now,
        )
        db.add(record)

        if not is_open:
            _book_expense(db, record, now)
        elif vehicle.status != VehicleStatus.RETIRED:
            vehicle.status = VehicleStatus.IN_SHOP

        await NotificationService.notify_roles(
            db,
            MAINTENANCE_WATCHERS,
            title=f"{data.type.value} maintenance for {vehicle.name}",
            message=f"{vehicle.license_plate}: {data.description}",
            type=NotificationType.MAINTENANCE_UPDATE,
            metadata={"vehicle_id": vehicle.id, "status": data.status.value},
        )

        await db.commit()
        await db.refresh(record)
        logger.info("Maintenance %s scheduled for vehicle %s", record.id, vehicle.license_plate)
        return record

    @staticmethod
    async def complete(
        db: AsyncSession,
        record: MaintenanceRecord,
        cost: Optional[float] = None,
    ) -> Tuple[MaintenanceRecord, Optional[Expense]]:
        """
        Close a maintenance record.

        The vehicle goes back to Available only if it was In Shop and has
        no other open record. A positive cost is logged as a Maintenance
        expense.
        """
        if record.status == MaintenanceStatus.COMPLETED:
            raise BusinessRuleError("Maintenance record is already completed")

        now = datetime.utcnow()
        if cost is not None:
            record.cost = cost
        record.status = MaintenanceStatus.COMPLETED
        record.completed_date = now

        vehicle = record.vehicle
        if vehicle is not None and vehicle.status == VehicleStatus.IN_SHOP:
            other_open = await db.execute(
                select(func.count(MaintenanceRecord.id)).where(
                    MaintenanceRecord.vehicle_id == vehicle.id,
                    MaintenanceRecord.id != record.id,
                    MaintenanceRecord.status.in_(OPEN_MAINTENANCE_STATUSES),
                )
            )
            if not other_open.scalar():
                vehicle.status = VehicleStatus.AVAILABLE

        expense = _book_expense(db, record, now)

        await NotificationService.notify_roles(
            db,
            MAINTENANCE_WATCHERS,
            title="Maintenance completed",
            message=f"{vehicle.license_plate if vehicle else record.vehicle_id}: {record.description}",
            type=NotificationType.MAINTENANCE_UPDATE,
            metadata={"maintenance_id": record.id, "cost": record.cost},
        )

        await db.commit()
        await db.refresh(record)
        if expense is not None:
            await db.refresh(expense)
        logger.info("Maintenance %s completed (cost=%s)", record.id, record.cost)
        return record, expense

"""
Dashboard Service.

Handles data aggregation for the four role dashboards.
Focused on READ-ONLY operations.
"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.models.cost_enums import (
    MaintenanceType, MaintenanceStatus, ExpenseType, OPEN_MAINTENANCE_STATUSES,
)
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus, DriverStatus
from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import (
    TripStatus, TripPriority, OPEN_TRIP_STATUSES, ACTIVE_TRIP_STATUSES,
)
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.dashboard import (
    ChartSlice, ManagerKpis, HealthTrendPoint, MaintenanceHeatmapRow, ManagerDashboard,
    DispatcherKpis, CargoQueueItem, ActiveTripItem, TripStatsDay, DispatcherDashboard,
    SafetyKpis, SafetyBucket, DriverPerformanceRow, SafetyDashboard,
    FinancialKpis, ExpenseSlice, MonthlySpend, VehicleSpend, FinancialDashboard,
)
from fleetflow.app.services.fleet_health import CRITICAL_HEALTH_THRESHOLD
from fleetflow.app.services.reporting import (
    MONTH_NAMES, DAY_NAMES, round_half_up, period_key, month_windows, day_windows,
)

GREEN = "#10B981"
AMBER = "#F59E0B"
RED = "#EF4444"
BLUE = "#3B82F6"

QUEUE_LIMIT = 10
TOP_DRIVERS_LIMIT = 10
TOP_VEHICLES_LIMIT = 5
LOOKBACK = timedelta(days=30)

# high > medium > low
PRIORITY_RANK = case(
    (Trip.priority == TripPriority.HIGH, 0),
    (Trip.priority == TripPriority.MEDIUM, 1),
    else_=2,
)


def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


class DashboardService:

    # --- Manager ---

    @staticmethod
    async def get_manager_dashboard(db: AsyncSession, now: Optional[datetime] = None) -> ManagerDashboard:
        """Fleet utilization, maintenance load and health."""
        now = now or datetime.utcnow()
        vehicles = (await db.execute(select(Vehicle))).scalars().all()

        by_status = Counter(v.status for v in vehicles)
        total = len(vehicles)
        active = by_status[VehicleStatus.ON_TRIP]
        utilization_rate = round_half_up(active / total * 100, 1) if total else 0.0

        open_rows = (await db.execute(
            select(Vehicle.type, MaintenanceRecord.type, func.count(MaintenanceRecord.id))
            .join(Vehicle, MaintenanceRecord.vehicle_id == Vehicle.id)
            .where(MaintenanceRecord.status.in_(OPEN_MAINTENANCE_STATUSES))
            .group_by(Vehicle.type, MaintenanceRecord.type)
        )).all()
        open_by_type: Dict[VehicleType, Counter] = defaultdict(Counter)
        for vehicle_type, maintenance_type, count in open_rows:
            open_by_type[vehicle_type][maintenance_type] += count

        maintenance_queue = sum(sum(c.values()) for c in open_by_type.values())
        urgent_maintenance = sum(c[MaintenanceType.URGENT] for c in open_by_type.values())

        avg_health = _mean([v.health_score for v in vehicles])
        avg_fleet_health = round_half_up(avg_health) if avg_health is not None else 0
        critical_alerts = sum(1 for v in vehicles if v.health_score < CRITICAL_HEALTH_THRESHOLD)

        completed_rows = (await db.execute(
            select(Vehicle.type, func.count(MaintenanceRecord.id))
            .join(Vehicle, MaintenanceRecord.vehicle_id == Vehicle.id)
            .where(
                MaintenanceRecord.status == MaintenanceStatus.COMPLETED,
                MaintenanceRecord.completed_date >= now - LOOKBACK,
            )
            .group_by(Vehicle.type)
        )).all()
        completed_by_type = {vehicle_type: count for vehicle_type, count in completed_rows}

        heatmap = []
        for vehicle_type in VehicleType:
            typed = [v.health_score for v in vehicles if v.type == vehicle_type]
            if not typed:
                continue
            heatmap.append(MaintenanceHeatmapRow(
                type=f"{vehicle_type.value}s",
                scheduled=open_by_type[vehicle_type][MaintenanceType.SCHEDULED],
                urgent=open_by_type[vehicle_type][MaintenanceType.URGENT],
                completed=completed_by_type.get(vehicle_type, 0),
                health=round_half_up(_mean(typed)),
            ))

        return ManagerDashboard(
            kpis=ManagerKpis(
                utilization_rate=utilization_rate,
                maintenance_queue=maintenance_queue,
                urgent_maintenance=urgent_maintenance,
                avg_fleet_health=avg_fleet_health,
                critical_alerts=critical_alerts,
                total_vehicles=total,
            ),
            utilization_data=[
                ChartSlice(name="Active", value=active, color=GREEN),
                ChartSlice(name="Idle", value=by_status[VehicleStatus.AVAILABLE], color=AMBER),
                ChartSlice(name="Maintenance", value=by_status[VehicleStatus.IN_SHOP], color=RED),
            ],
            health_trend_data=await DashboardService._health_trend(
                db, now, avg_fleet_health if total else None
            ),
            maintenance_heatmap=heatmap,
        )

    @staticmethod
    async def _health_trend(
        db: AsyncSession, now: datetime, live_health: Optional[int]
    ) -> List[HealthTrendPoint]:
        """Six months of stored snapshots; the current month is live."""
        windows = month_windows(now, 6)
        keys = [period_key(start) for start, _ in windows]
        result = await db.execute(
            select(FleetHealthSnapshot).where(FleetHealthSnapshot.period.in_(keys))
        )
        snapshots = {s.period: s for s in result.scalars().all()}

        points = []
        for (start, _), key in zip(windows, keys):
            if key == period_key(now):
                health = live_health
            else:
                snapshot = snapshots.get(key)
                health = (
                    round_half_up(snapshot.average_health)
                    if snapshot is not None and snapshot.vehicle_count
                    else None
                )
            points.append(HealthTrendPoint(month=MONTH_NAMES[start.month - 1], health=health))
        return points

    # --- Dispatcher ---

    @staticmethod
    async def get_dispatcher_dashboard(db: AsyncSession, now: Optional[datetime] = None) -> DispatcherDashboard:
        """Cargo queue, live trips and the last week of throughput."""
        now = now or datetime.utcnow()

        cargo = (await db.execute(
            select(Trip)
            .where(Trip.status == TripStatus.DRAFT)
            .order_by(PRIORITY_RANK, Trip.created_at.asc(), Trip.id.asc())
            .limit(QUEUE_LIMIT)
        )).scalars().all()

        active = (await db.execute(
            select(Trip)
            .where(Trip.status.in_(ACTIVE_TRIP_STATUSES))
            .order_by(Trip.started_at.is_(None), Trip.started_at.desc(), Trip.id.desc())
            .limit(QUEUE_LIMIT)
        )).scalars().all()

        trip_stats = []
        for start, end in day_windows(now, 7):
            completed = (await db.execute(
                select(func.count(Trip.id)).where(
                    Trip.status == TripStatus.COMPLETED,
                    Trip.completed_at >= start,
                    Trip.completed_at < end,
                )
            )).scalar() or 0
            pending = (await db.execute(
                select(func.count(Trip.id)).where(
                    Trip.status.in_(OPEN_TRIP_STATUSES),
                    Trip.created_at >= start,
                    Trip.created_at < end,
                )
            )).scalar() or 0
            trip_stats.append(TripStatsDay(day=DAY_NAMES[start.weekday()], completed=completed, pending=pending))

        active_count = (await db.execute(
            select(func.count(Trip.id)).where(Trip.status.in_(ACTIVE_TRIP_STATUSES))
        )).scalar() or 0
        pending_count = (await db.execute(
            select(func.count(Trip.id)).where(Trip.status == TripStatus.DRAFT)
        )).scalar() or 0
        available_vehicles = (await db.execute(
            select(func.count(Vehicle.id)).where(Vehicle.status == VehicleStatus.AVAILABLE)
        )).scalar() or 0
        available_drivers = (await db.execute(
            select(func.count(Driver.id)).where(Driver.status == DriverStatus.ON_DUTY)
        )).scalar() or 0

        return DispatcherDashboard(
            kpis=DispatcherKpis(
                active_trips=active_count,
                pending_cargo=pending_count,
                available_vehicles=available_vehicles,
                available_drivers=available_drivers,
            ),
            cargo_queue=[
                CargoQueueItem(
                    id=trip.trip_code,
                    origin=trip.origin,
                    destination=trip.destination,
                    weight=trip.cargo_weight,
                    priority=trip.priority.value,
                    eta=f"{round_half_up(trip.estimated_duration / 60)} hours" if trip.estimated_duration else "TBD",
                )
                for trip in cargo
            ],
            active_trips=[
                ActiveTripItem(
                    id=trip.trip_code,
                    vehicle=trip.vehicle.license_plate if trip.vehicle else "N/A",
                    driver=trip.driver.name if trip.driver else "N/A",
                    progress=trip.progress,
                    eta=(
                        f"{round_half_up(trip.estimated_duration * (100 - trip.progress) / 100)} min"
                        if trip.estimated_duration else "TBD"
                    ),
                )
                for trip in active
            ],
            trip_stats=trip_stats,
        )

    # --- Safety Officer ---

    @staticmethod
    async def get_safety_dashboard(db: AsyncSession, now: Optional[datetime] = None) -> SafetyDashboard:
        """Driver compliance and safety scores."""
        now = now or datetime.utcnow()
        drivers = (await db.execute(select(Driver).order_by(Driver.id))).scalars().all()

        horizon = now + LOOKBACK
        scores = [d.safety_score for d in drivers]
        avg_score = _mean(scores)

        # Stable sort keeps insertion order among equal scores
        ranked = sorted(drivers, key=lambda d: d.safety_score, reverse=True)[:TOP_DRIVERS_LIMIT]

        return SafetyDashboard(
            kpis=SafetyKpis(
                total_drivers=len(drivers),
                active_drivers=sum(1 for d in drivers if d.status == DriverStatus.ON_DUTY),
                avg_safety_score=round_half_up(avg_score) if avg_score is not None else 0,
                expiring_licenses=sum(1 for d in drivers if now <= d.license_expiry <= horizon),
                expired_licenses=sum(1 for d in drivers if d.license_expiry < now),
                suspended_drivers=sum(1 for d in drivers if d.status == DriverStatus.SUSPENDED),
            ),
            safety_distribution=[
                SafetyBucket(range="90-100", count=sum(1 for s in scores if s >= 90), color=GREEN),
                SafetyBucket(range="70-89", count=sum(1 for s in scores if 70 <= s < 90), color=AMBER),
                SafetyBucket(range="<70", count=sum(1 for s in scores if s < 70), color=RED),
            ],
            driver_performance=[
                DriverPerformanceRow(
                    name=d.name,
                    safety_score=d.safety_score,
                    completion_rate=d.trip_completion_rate,
                    total_trips=d.total_trips,
                    status=d.status.value,
                    license_expiry=d.license_expiry,
                )
                for d in ranked
            ],
        )

    # --- Financial Analyst ---

    @staticmethod
    async def get_financial_dashboard(db: AsyncSession, now: Optional[datetime] = None) -> FinancialDashboard:
        """Spend over the last 30 days plus a six-month trend."""
        now = now or datetime.utcnow()
        expenses = (await db.execute(
            select(Expense).where(Expense.date >= now - LOOKBACK).order_by(Expense.id)
        )).scalars().all()

        fuel = sum(e.amount for e in expenses if e.type == ExpenseType.FUEL)
        maintenance = sum(e.amount for e in expenses if e.type == ExpenseType.MAINTENANCE)
        other = sum(e.amount for e in expenses if e.type not in (ExpenseType.FUEL, ExpenseType.MAINTENANCE))
        total = fuel + maintenance + other

        def share(amount: float) -> int:
            return round_half_up(amount / total * 100) if total > 0 else 0

        monthly_trend = []
        for start, end in month_windows(now, 6):
            rows = (await db.execute(
                select(Expense.type, func.sum(Expense.amount))
                .where(Expense.date >= start, Expense.date < end)
                .group_by(Expense.type)
            )).all()
            sums = {expense_type: float(amount or 0) for expense_type, amount in rows}
            month_fuel = sums.pop(ExpenseType.FUEL, 0.0)
            month_maintenance = sums.pop(ExpenseType.MAINTENANCE, 0.0)
            monthly_trend.append(MonthlySpend(
                month=MONTH_NAMES[start.month - 1],
                fuel=round_half_up(month_fuel),
                maintenance=round_half_up(month_maintenance),
                other=round_half_up(sum(sums.values())),
            ))

        per_vehicle: Dict[int, Dict[str, object]] = {}
        for expense in expenses:
            if expense.vehicle is None:
                continue
            entry = per_vehicle.setdefault(expense.vehicle_id, {
                "name": expense.vehicle.name,
                "type": expense.vehicle.type.value,
                "total": 0.0,
            })
            entry["total"] += expense.amount
        top_vehicles = sorted(per_vehicle.values(), key=lambda v: v["total"], reverse=True)[:TOP_VEHICLES_LIMIT]

        fuel_with_quantity = [e for e in expenses if e.type == ExpenseType.FUEL and e.quantity]
        liters = sum(e.quantity for e in fuel_with_quantity)
        fuel_cost = sum(e.amount for e in fuel_with_quantity)
        avg_fuel_price = round_half_up(fuel_cost / liters, 2) if liters > 0 else 0.0

        return FinancialDashboard(
            kpis=FinancialKpis(
                total_expenses=round_half_up(total),
                fuel_expenses=round_half_up(fuel),
                maintenance_expenses=round_half_up(maintenance),
                avg_fuel_price=avg_fuel_price,
            ),
            expense_breakdown=[
                ExpenseSlice(category="Fuel", amount=round_half_up(fuel, 2), color=BLUE, percentage=share(fuel)),
                ExpenseSlice(
                    category="Maintenance", amount=round_half_up(maintenance, 2),
                    color=AMBER, percentage=share(maintenance),
                ),
                ExpenseSlice(category="Other", amount=round_half_up(other, 2), color=GREEN, percentage=share(other)),
            ],
            monthly_trend=monthly_trend,
            top_spending_vehicles=[
                VehicleSpend(name=v["name"], type=v["type"], total=round_half_up(v["total"], 2))
                for v in top_vehicles
            ],
        )

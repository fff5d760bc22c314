"""
Dashboard aggregation tests.

Service-level tests pin `now` and check each KPI against a hand-built
fleet; endpoint tests check the wire shape.
"""

from datetime import datetime, timedelta

import pytest

from fleetflow.app.models.cost_enums import MaintenanceType, MaintenanceStatus, ExpenseType
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus, DriverStatus
from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus, TripPriority
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.services.dashboard import DashboardService
from fleetflow.app.services.reporting import round_half_up, month_windows, day_windows

# A Sunday
NOW = datetime(2026, 3, 15, 12, 0)


def _vehicle(plate, vehicle_type, status, health, capacity=2000):
    return Vehicle(
        name=plate, license_plate=plate, type=vehicle_type,
        max_capacity=capacity, status=status, health_score=health,
    )


def _driver(name, status=DriverStatus.ON_DUTY, score=100, expiry=None):
    slug = name.lower().replace(" ", ".")
    return Driver(
        name=name, email=f"{slug}@fleet.com", phone="555", license_number=f"DL-{slug}",
        license_expiry=expiry or NOW + timedelta(days=365), license_category=VehicleType.TRUCK,
        status=status, safety_score=score,
    )


def _trip(number, vehicle, driver, status, **fields):
    return Trip(
        sequence_number=number, trip_code=f"TRP-{number:04d}",
        vehicle_id=vehicle.id, driver_id=driver.id,
        origin="Depot", destination=f"Site {number}", cargo_weight=100,
        status=status, **fields,
    )


# --- Manager ---

@pytest.mark.asyncio
async def test_manager_dashboard(db_session):
    trucks = [
        _vehicle("TK-1", VehicleType.TRUCK, VehicleStatus.ON_TRIP, 95),
        _vehicle("TK-2", VehicleType.TRUCK, VehicleStatus.IN_SHOP, 60),
    ]
    vans = [
        _vehicle("VN-1", VehicleType.VAN, VehicleStatus.ON_TRIP, 80, 500),
        _vehicle("VN-2", VehicleType.VAN, VehicleStatus.AVAILABLE, 65, 500),
    ]
    db_session.add_all(trucks + vans)
    await db_session.flush()

    db_session.add_all([
        MaintenanceRecord(vehicle_id=trucks[1].id, type=MaintenanceType.SCHEDULED, description="Oil",
                          status=MaintenanceStatus.PENDING),
        MaintenanceRecord(vehicle_id=vans[0].id, type=MaintenanceType.URGENT, description="Brakes",
                          status=MaintenanceStatus.IN_PROGRESS),
        MaintenanceRecord(vehicle_id=trucks[0].id, type=MaintenanceType.SCHEDULED, description="Tyres",
                          status=MaintenanceStatus.COMPLETED, completed_date=NOW - timedelta(days=5)),
        # Outside the 30 day window
        MaintenanceRecord(vehicle_id=vans[1].id, type=MaintenanceType.SCHEDULED, description="Old",
                          status=MaintenanceStatus.COMPLETED, completed_date=NOW - timedelta(days=40)),
        FleetHealthSnapshot(period="2026-01", average_health=82.4, vehicle_count=10, critical_count=1,
                            recorded_at=datetime(2026, 1, 31)),
        FleetHealthSnapshot(period="2025-11", average_health=0, vehicle_count=0, critical_count=0,
                            recorded_at=datetime(2025, 11, 30)),
    ])
    await db_session.commit()

    dashboard = await DashboardService.get_manager_dashboard(db_session, now=NOW)

    kpis = dashboard.kpis
    assert kpis.utilization_rate == 50.0
    assert kpis.maintenance_queue == 2
    assert kpis.urgent_maintenance == 1
    assert kpis.avg_fleet_health == 75
    assert kpis.critical_alerts == 2
    assert kpis.total_vehicles == 4

    assert [(s.name, s.value) for s in dashboard.utilization_data] == [
        ("Active", 2), ("Idle", 1), ("Maintenance", 1),
    ]

    assert [(p.month, p.health) for p in dashboard.health_trend_data] == [
        ("Oct", None), ("Nov", None), ("Dec", None), ("Jan", 82), ("Feb", None), ("Mar", 75),
    ]

    rows = {row.type: row for row in dashboard.maintenance_heatmap}
    assert list(rows) == ["Vans", "Trucks"]
    assert (rows["Trucks"].scheduled, rows["Trucks"].urgent, rows["Trucks"].completed) == (1, 0, 1)
    assert (rows["Vans"].scheduled, rows["Vans"].urgent, rows["Vans"].completed) == (0, 1, 0)
    # 77.5 and 72.5 round half up
    assert rows["Trucks"].health == 78
    assert rows["Vans"].health == 73


@pytest.mark.asyncio
async def test_manager_utilization_rounds_to_one_decimal(db_session):
    db_session.add_all([
        _vehicle("A", VehicleType.VAN, VehicleStatus.ON_TRIP, 90),
        _vehicle("B", VehicleType.VAN, VehicleStatus.AVAILABLE, 90),
        _vehicle("C", VehicleType.VAN, VehicleStatus.AVAILABLE, 90),
    ])
    await db_session.commit()

    dashboard = await DashboardService.get_manager_dashboard(db_session, now=NOW)
    assert dashboard.kpis.utilization_rate == round_half_up(1 / 3 * 100, 1) == 33.3


@pytest.mark.asyncio
async def test_manager_dashboard_empty_fleet(client, manager_headers):
    response = await client.get("/api/dashboard/manager", headers=manager_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["kpis"]["utilizationRate"] == 0
    assert data["kpis"]["avgFleetHealth"] == 0
    assert data["kpis"]["totalVehicles"] == 0
    assert len(data["healthTrendData"]) == 6
    assert data["healthTrendData"][-1]["health"] is None
    assert data["maintenanceHeatmap"] == []


# --- Dispatcher ---

@pytest.mark.asyncio
async def test_dispatcher_dashboard(db_session):
    vehicle = _vehicle("TK-1", VehicleType.TRUCK, VehicleStatus.AVAILABLE, 90)
    busy = _vehicle("TK-2", VehicleType.TRUCK, VehicleStatus.ON_TRIP, 90)
    driver = _driver("John Doe")
    off = _driver("Jane Roe", status=DriverStatus.OFF_DUTY)
    db_session.add_all([vehicle, busy, driver, off])
    await db_session.flush()

    today = datetime(2026, 3, 15)
    db_session.add_all([
        _trip(1, vehicle, driver, TripStatus.DRAFT, priority=TripPriority.LOW,
              created_at=today - timedelta(hours=14)),
        _trip(2, vehicle, driver, TripStatus.DRAFT, priority=TripPriority.HIGH,
              created_at=today + timedelta(hours=9)),
        _trip(3, vehicle, driver, TripStatus.DRAFT, priority=TripPriority.MEDIUM,
              created_at=today - timedelta(days=2)),
        _trip(4, vehicle, driver, TripStatus.DRAFT, priority=TripPriority.HIGH, estimated_duration=150,
              created_at=today - timedelta(days=3)),
        _trip(5, busy, driver, TripStatus.IN_PROGRESS, progress=25, estimated_duration=120,
              started_at=today + timedelta(hours=10), created_at=today + timedelta(hours=7)),
        _trip(6, busy, driver, TripStatus.DISPATCHED, created_at=today + timedelta(hours=7)),
        _trip(7, busy, driver, TripStatus.IN_PROGRESS, progress=50, estimated_duration=45,
              started_at=today + timedelta(hours=8), created_at=today + timedelta(hours=7)),
        _trip(8, vehicle, driver, TripStatus.COMPLETED, progress=100,
              completed_at=datetime(2026, 3, 10, 14), created_at=datetime(2026, 3, 1)),
        _trip(9, vehicle, driver, TripStatus.COMPLETED, progress=100,
              completed_at=datetime(2026, 3, 15, 1), created_at=datetime(2026, 3, 1)),
        _trip(10, vehicle, driver, TripStatus.COMPLETED, progress=100,
              completed_at=datetime(2026, 3, 1), created_at=datetime(2026, 3, 1)),
    ])
    await db_session.commit()
    db_session.expire_all()

    dashboard = await DashboardService.get_dispatcher_dashboard(db_session, now=NOW)

    assert dashboard.kpis.active_trips == 3
    assert dashboard.kpis.pending_cargo == 4
    assert dashboard.kpis.available_vehicles == 1
    assert dashboard.kpis.available_drivers == 1

    # High first, oldest first within a priority
    assert [(c.id, c.priority) for c in dashboard.cargo_queue] == [
        ("TRP-0004", "high"), ("TRP-0002", "high"), ("TRP-0003", "medium"), ("TRP-0001", "low"),
    ]
    assert dashboard.cargo_queue[0].eta == "3 hours"
    assert dashboard.cargo_queue[1].eta == "TBD"

    # Most recently started first, not yet started last
    assert [(t.id, t.eta) for t in dashboard.active_trips] == [
        ("TRP-0005", "90 min"), ("TRP-0007", "23 min"), ("TRP-0006", "TBD"),
    ]
    assert dashboard.active_trips[0].vehicle == "TK-2"
    assert dashboard.active_trips[0].driver == "John Doe"

    assert [s.day for s in dashboard.trip_stats] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [s.completed for s in dashboard.trip_stats] == [0, 1, 0, 0, 0, 0, 1]
    assert [s.pending for s in dashboard.trip_stats] == [0, 0, 0, 1, 1, 1, 4]


# --- Safety ---

@pytest.mark.asyncio
async def test_safety_dashboard(db_session):
    db_session.add_all([
        _driver("Alice", score=95, expiry=datetime(2027, 6, 1)),
        _driver("Bob", score=72, expiry=NOW + timedelta(days=10)),
        _driver("Carl", status=DriverStatus.SUSPENDED, score=60, expiry=NOW - timedelta(days=1)),
        _driver("Dora", status=DriverStatus.OFF_DUTY, score=95, expiry=NOW + timedelta(days=30)),
        _driver("Eve", score=89, expiry=datetime(2028, 1, 1)),
    ])
    await db_session.commit()

    dashboard = await DashboardService.get_safety_dashboard(db_session, now=NOW)

    kpis = dashboard.kpis
    assert kpis.total_drivers == 5
    assert kpis.active_drivers == 3
    assert kpis.avg_safety_score == 82
    assert kpis.expiring_licenses == 2
    assert kpis.expired_licenses == 1
    assert kpis.suspended_drivers == 1

    assert [(b.range, b.count) for b in dashboard.safety_distribution] == [
        ("90-100", 2), ("70-89", 2), ("<70", 1),
    ]
    assert [row.name for row in dashboard.driver_performance] == ["Alice", "Dora", "Eve", "Bob", "Carl"]
    assert dashboard.driver_performance[-1].status == "Suspended"


# --- Financial ---

@pytest.mark.asyncio
async def test_financial_dashboard(db_session):
    truck = _vehicle("TK-1", VehicleType.TRUCK, VehicleStatus.AVAILABLE, 90)
    van = _vehicle("VN-1", VehicleType.VAN, VehicleStatus.AVAILABLE, 90, 500)
    db_session.add_all([truck, van])
    await db_session.flush()

    db_session.add_all([
        Expense(vehicle_id=truck.id, type=ExpenseType.FUEL, amount=100, quantity=50, date=datetime(2026, 3, 1)),
        Expense(vehicle_id=truck.id, type=ExpenseType.FUEL, amount=50.5, quantity=25, date=datetime(2026, 3, 10)),
        Expense(vehicle_id=truck.id, type=ExpenseType.FUEL, amount=20, date=datetime(2026, 3, 12)),
        Expense(vehicle_id=van.id, type=ExpenseType.MAINTENANCE, amount=200, date=datetime(2026, 2, 20)),
        Expense(vehicle_id=van.id, type=ExpenseType.TOLL, amount=29.5, date=datetime(2026, 3, 14)),
        # Older than 30 days: only in the monthly trend
        Expense(vehicle_id=truck.id, type=ExpenseType.FUEL, amount=1000, quantity=500, date=datetime(2026, 1, 5)),
    ])
    await db_session.commit()
    db_session.expire_all()

    dashboard = await DashboardService.get_financial_dashboard(db_session, now=NOW)

    kpis = dashboard.kpis
    assert kpis.total_expenses == 400
    assert kpis.fuel_expenses == 171
    assert kpis.maintenance_expenses == 200
    assert kpis.avg_fuel_price == 2.01

    breakdown = {s.category: s for s in dashboard.expense_breakdown}
    assert breakdown["Fuel"].amount == 170.5
    assert [s.percentage for s in dashboard.expense_breakdown] == [43, 50, 7]
    assert sum(s.percentage for s in dashboard.expense_breakdown) == 100

    assert [(m.month, m.fuel, m.maintenance, m.other) for m in dashboard.monthly_trend] == [
        ("Oct", 0, 0, 0),
        ("Nov", 0, 0, 0),
        ("Dec", 0, 0, 0),
        ("Jan", 1000, 0, 0),
        ("Feb", 0, 200, 0),
        ("Mar", 171, 0, 30),
    ]

    assert [(v.name, v.type, v.total) for v in dashboard.top_spending_vehicles] == [
        ("VN-1", "Van", 229.5),
        ("TK-1", "Truck", 170.5),
    ]


@pytest.mark.asyncio
async def test_financial_dashboard_without_expenses(client, finance_headers):
    response = await client.get("/api/dashboard/financial", headers=finance_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["kpis"]["totalExpenses"] == 0
    assert data["kpis"]["avgFuelPrice"] == 0
    assert [s["percentage"] for s in data["expenseBreakdown"]] == [0, 0, 0]
    assert len(data["monthlyTrend"]) == 6
    assert data["topSpendingVehicles"] == []


@pytest.mark.asyncio
async def test_dispatcher_and_safety_endpoints(client, dispatcher_headers, safety_headers):
    response = await client.get("/api/dashboard/dispatcher", headers=dispatcher_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"kpis", "cargoQueue", "activeTrips", "tripStats"}
    assert len(data["tripStats"]) == 7

    response = await client.get("/api/dashboard/safety", headers=safety_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"kpis", "safetyDistribution", "driverPerformance"}


# --- Calendar helpers ---

def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(33.35, 1) == 33.4
    assert round_half_up(2.005, 2) == 2.01


def test_month_windows_cross_year():
    windows = month_windows(datetime(2026, 2, 10), 3)
    assert windows == [
        (datetime(2025, 12, 1), datetime(2026, 1, 1)),
        (datetime(2026, 1, 1), datetime(2026, 2, 1)),
        (datetime(2026, 2, 1), datetime(2026, 3, 1)),
    ]


def test_day_windows_end_today():
    windows = day_windows(NOW, 2)
    assert windows == [
        (datetime(2026, 3, 14), datetime(2026, 3, 15)),
        (datetime(2026, 3, 15), datetime(2026, 3, 16)),
    ]

"""
Database seeding script for development data.

Creates one user per role plus a demo fleet (vehicles, drivers, trips,
maintenance records and expenses) so every dashboard has something to show.
Run this script after the database is reachable:

    python -m fleetflow.seed_data
"""

import asyncio
import random
from datetime import datetime, timedelta

from sqlalchemy import select, func

from fleetflow.app.db.session import AsyncSessionLocal, engine, Base
from fleetflow.app.core.security import get_password_hash
from fleetflow.app.models.enums import UserRole
from fleetflow.app.models.user import User
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.maintenance import MaintenanceRecord
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot  # noqa: F401
from fleetflow.app.models.notification import Notification  # noqa: F401
from fleetflow.app.models.audit_log import AuditLog  # noqa: F401
from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus, DriverStatus
from fleetflow.app.models.trip_enums import TripStatus, TripPriority
from fleetflow.app.models.cost_enums import MaintenanceType, MaintenanceStatus, ExpenseType
from fleetflow.app.services.trip_lifecycle import format_trip_code

SEED_USERS = [
    ("Morgan Manager", "manager@fleetflow.io", "manager123", UserRole.MANAGER),
    ("Dana Dispatcher", "dispatcher@fleetflow.io", "dispatcher123", UserRole.DISPATCHER),
    ("Sam Safety", "safety@fleetflow.io", "safety123", UserRole.SAFETY_OFFICER),
    ("Fran Finance", "finance@fleetflow.io", "finance123", UserRole.FINANCIAL_ANALYST),
]

# name, plate, type, capacity, odometer, status, health
SEED_VEHICLES = [
    ("Bike-01", "MC-001", VehicleType.MOTORCYCLE, 50, 15000, VehicleStatus.ON_TRIP, 95),
    ("Bike-02", "MC-002", VehicleType.MOTORCYCLE, 50, 12000, VehicleStatus.AVAILABLE, 98),
    ("Bike-03", "MC-003", VehicleType.MOTORCYCLE, 50, 18000, VehicleStatus.AVAILABLE, 92),
    ("Van-01", "VN-001", VehicleType.VAN, 500, 45000, VehicleStatus.ON_TRIP, 88),
    ("Van-02", "VN-002", VehicleType.VAN, 500, 38000, VehicleStatus.ON_TRIP, 91),
    ("Van-03", "VN-003", VehicleType.VAN, 500, 52000, VehicleStatus.AVAILABLE, 85),
    ("Van-04", "VN-004", VehicleType.VAN, 500, 41000, VehicleStatus.AVAILABLE, 89),
    ("Van-05", "VN-005", VehicleType.VAN, 500, 55000, VehicleStatus.IN_SHOP, 78),
    ("Truck-01", "TK-001", VehicleType.TRUCK, 2000, 85000, VehicleStatus.ON_TRIP, 82),
    ("Truck-02", "TK-002", VehicleType.TRUCK, 2000, 72000, VehicleStatus.ON_TRIP, 86),
    ("Truck-03", "TK-003", VehicleType.TRUCK, 2000, 95000, VehicleStatus.AVAILABLE, 75),
    ("Truck-04", "TK-004", VehicleType.TRUCK, 2000, 68000, VehicleStatus.AVAILABLE, 88),
    ("Truck-05", "TK-005", VehicleType.TRUCK, 2000, 102000, VehicleStatus.IN_SHOP, 68),
    ("Trailer-01", "TR-001", VehicleType.TRAILER, 5000, 125000, VehicleStatus.ON_TRIP, 90),
    ("Trailer-02", "TR-002", VehicleType.TRAILER, 5000, 118000, VehicleStatus.AVAILABLE, 93),
    ("Trailer-03", "TR-003", VehicleType.TRAILER, 5000, 135000, VehicleStatus.AVAILABLE, 87),
]

# name, email, phone, license, expires in days, category, status, safety, completion, trips
SEED_DRIVERS = [
    ("John Doe", "john@fleet.com", "555-0101", "DL-001", 420, VehicleType.TRUCK, DriverStatus.ON_DUTY, 95, 98, 145),
    ("Jane Smith", "jane@fleet.com", "555-0102", "DL-002", 600, VehicleType.VAN, DriverStatus.ON_DUTY, 92, 96, 132),
    ("Bob Wilson", "bob@fleet.com", "555-0103", "DL-003", 20, VehicleType.VAN, DriverStatus.ON_DUTY, 88, 94, 118),
    ("Alice Chen", "alice@fleet.com", "555-0104", "DL-004", 700, VehicleType.MOTORCYCLE, DriverStatus.ON_DUTY, 97, 99, 203),
    ("Mike Jones", "mike@fleet.com", "555-0105", "DL-005", 380, VehicleType.TRUCK, DriverStatus.OFF_DUTY, 85, 91, 98),
    ("Sarah Brown", "sarah@fleet.com", "555-0106", "DL-006", -15, VehicleType.VAN, DriverStatus.SUSPENDED, 65, 78, 87),
    ("Tom Davis", "tom@fleet.com", "555-0107", "DL-007", 540, VehicleType.TRAILER, DriverStatus.ON_DUTY, 93, 97, 156),
    ("Lisa Garcia", "lisa@fleet.com", "555-0108", "DL-008", 300, VehicleType.MOTORCYCLE, DriverStatus.OFF_DUTY, 90, 95, 178),
]

# vehicle index, driver index, origin, destination, cargo, priority, progress, minutes, started minutes ago
ACTIVE_TRIPS = [
    (3, 0, "Warehouse A", "Client Site 1", 450, TripPriority.HIGH, 75, 120, 90),
    (8, 1, "Warehouse B", "Client Site 2", 1800, TripPriority.MEDIUM, 20, 240, 48),
    (4, 2, "Warehouse A", "Client Site 3", 480, TripPriority.HIGH, 90, 90, 81),
    (0, 3, "Warehouse C", "Client Site 4", 45, TripPriority.LOW, 50, 60, 30),
    (9, 6, "Warehouse B", "Client Site 5", 1950, TripPriority.MEDIUM, 35, 180, 63),
]

# vehicle index, driver index, origin, destination, cargo, priority, minutes
DRAFT_TRIPS = [
    (5, 4, "Warehouse A", "Client Site 6", 400, TripPriority.HIGH, 120),
    (6, 1, "Warehouse B", "Client Site 7", 300, TripPriority.MEDIUM, 240),
    (10, 0, "Warehouse A", "Client Site 8", 1500, TripPriority.HIGH, 60),
    (11, 0, "Warehouse C", "Client Site 9", 1200, TripPriority.LOW, 360),
    (2, 7, "Warehouse B", "Client Site 10", 40, TripPriority.MEDIUM, 180),
]

# Completed trips per day, oldest first
COMPLETED_PER_DAY = [12, 15, 18, 14, 20, 10, 8]


async def seed_users(db) -> None:
    for name, email, password, role in SEED_USERS:
        result = await db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            print(f"ℹ️  {role.value} user {email} already exists, skipping")
            continue
        db.add(User(name=name, email=email, hashed_password=get_password_hash(password), role=role))
        print(f"✅ Created {role.value} user ({email} / {password})")
    await db.commit()


async def seed_fleet(db, rng: random.Random) -> None:
    existing = (await db.execute(select(func.count(Vehicle.id)))).scalar()
    if existing:
        print("ℹ️  Fleet data already present, skipping fleet seeding")
        return

    now = datetime.utcnow()

    vehicles = [
        Vehicle(
            name=name, license_plate=plate, type=vtype, max_capacity=capacity,
            odometer=odometer, status=status, health_score=health,
            acquisition_cost=capacity * 20,
        )
        for name, plate, vtype, capacity, odometer, status, health in SEED_VEHICLES
    ]
    db.add_all(vehicles)

    drivers = [
        Driver(
            name=name, email=email, phone=phone, license_number=license_number,
            license_expiry=now + timedelta(days=expires_in), license_category=category,
            status=status, safety_score=safety, trip_completion_rate=completion, total_trips=total,
        )
        for name, email, phone, license_number, expires_in, category, status, safety, completion, total
        in SEED_DRIVERS
    ]
    db.add_all(drivers)
    await db.flush()
    print(f"   ✓ {len(vehicles)} vehicles, {len(drivers)} drivers")

    sequence = 0
    trips = []

    def next_code():
        nonlocal sequence
        sequence += 1
        return sequence, format_trip_code(sequence)

    for v, d, origin, destination, cargo, priority, progress, minutes, started_ago in ACTIVE_TRIPS:
        number, code = next_code()
        trips.append(Trip(
            sequence_number=number, trip_code=code,
            vehicle_id=vehicles[v].id, driver_id=drivers[d].id,
            origin=origin, destination=destination, cargo_weight=cargo,
            status=TripStatus.IN_PROGRESS, priority=priority, progress=progress,
            start_odometer=vehicles[v].odometer, estimated_duration=minutes,
            started_at=now - timedelta(minutes=started_ago),
        ))

    for v, d, origin, destination, cargo, priority, minutes in DRAFT_TRIPS:
        number, code = next_code()
        trips.append(Trip(
            sequence_number=number, trip_code=code,
            vehicle_id=vehicles[v].id, driver_id=drivers[d].id,
            origin=origin, destination=destination, cargo_weight=cargo,
            status=TripStatus.DRAFT, priority=priority, estimated_duration=minutes,
        ))

    today = datetime(now.year, now.month, now.day)
    for offset, count in zip(range(6, -1, -1), COMPLETED_PER_DAY):
        day = today - timedelta(days=offset)
        for _ in range(count):
            vehicle = rng.choice(vehicles)
            completed_at = min(day + timedelta(seconds=rng.randint(0, 86399)), now)
            number, code = next_code()
            trips.append(Trip(
                sequence_number=number, trip_code=code,
                vehicle_id=vehicle.id, driver_id=rng.choice(drivers).id,
                origin=f"Warehouse {rng.choice('ABC')}",
                destination=f"Client Site {rng.randint(1, 20)}",
                cargo_weight=min(rng.randint(10, 2000), vehicle.max_capacity),
                status=TripStatus.COMPLETED, priority=rng.choice(list(TripPriority)),
                progress=100,
                start_odometer=vehicle.odometer - rng.randint(50, 500), end_odometer=vehicle.odometer,
                estimated_duration=rng.randint(60, 360),
                started_at=completed_at - timedelta(minutes=rng.randint(30, 360)),
                completed_at=completed_at,
                created_at=completed_at - timedelta(hours=8),
            ))
    db.add_all(trips)
    print(f"   ✓ {len(trips)} trips")

    records = []
    for _ in range(11):
        records.append(MaintenanceRecord(
            vehicle_id=rng.choice(vehicles).id, type=MaintenanceType.SCHEDULED,
            description="Regular oil change and inspection", cost=150 + rng.randint(0, 200),
            scheduled_date=now + timedelta(days=rng.randint(0, 30)), status=MaintenanceStatus.PENDING,
        ))
    for vehicle in [v for v in vehicles if v.status == VehicleStatus.IN_SHOP]:
        records.append(MaintenanceRecord(
            vehicle_id=vehicle.id, type=MaintenanceType.URGENT, description="Critical repair needed",
            cost=500 + rng.randint(0, 1000), scheduled_date=now, status=MaintenanceStatus.IN_PROGRESS,
        ))
    for _ in range(40):
        completed = now - timedelta(days=rng.randint(0, 29))
        records.append(MaintenanceRecord(
            vehicle_id=rng.choice(vehicles).id,
            type=rng.choice([MaintenanceType.SCHEDULED, MaintenanceType.URGENT]),
            description="Maintenance completed", cost=100 + rng.randint(0, 500),
            scheduled_date=completed - timedelta(days=2), completed_date=completed,
            status=MaintenanceStatus.COMPLETED,
        ))
    db.add_all(records)
    print(f"   ✓ {len(records)} maintenance records")

    expenses = []
    for i in range(150):
        liters = 20 + rng.randint(0, 80)
        price = 1.2 + rng.random() * 0.5
        expenses.append(Expense(
            vehicle_id=rng.choice(vehicles).id, type=ExpenseType.FUEL,
            amount=round(liters * price, 2), quantity=liters, description="Fuel refill",
            date=now - timedelta(days=rng.randint(0, 179)), receipt_number=f"FUEL-{i:04d}",
        ))
    for i in range(40):
        expenses.append(Expense(
            vehicle_id=rng.choice(vehicles).id,
            type=rng.choice([ExpenseType.MAINTENANCE, ExpenseType.TOLL, ExpenseType.PARKING, ExpenseType.OTHER]),
            amount=float(20 + rng.randint(0, 480)), description="Operating cost",
            date=now - timedelta(days=rng.randint(0, 179)), receipt_number=f"OPS-{i:04d}",
        ))
    db.add_all(expenses)
    print(f"   ✓ {len(expenses)} expenses")

    await db.commit()


async def seed_data(seed: int = 42):
    """Create tables if needed, then seed users and demo fleet data."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting seeding...")
        await seed_users(db)
        await seed_fleet(db, random.Random(seed))
        print("\n🎉 Seeding completed successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_data())

"""
Dashboard Schemas.

Chart-ready payloads for the four role dashboards. Field names are what
the dashboard charts bind to, so they serialize in camelCase.
"""

from datetime import datetime
from typing import List, Optional

from fleetflow.app.schemas.common import CamelModel


class ChartSlice(CamelModel):
    """One slice of a pie/donut chart."""
    name: str
    value: int
    color: str


# --- Manager ---

class ManagerKpis(CamelModel):
    utilization_rate: float
    maintenance_queue: int
    urgent_maintenance: int
    avg_fleet_health: int
    critical_alerts: int
    total_vehicles: int


class HealthTrendPoint(CamelModel):
    month: str
    health: Optional[int] = None


class MaintenanceHeatmapRow(CamelModel):
    type: str
    scheduled: int
    urgent: int
    completed: int
    health: int


class ManagerDashboard(CamelModel):
    kpis: ManagerKpis
    utilization_data: List[ChartSlice]
    health_trend_data: List[HealthTrendPoint]
    maintenance_heatmap: List[MaintenanceHeatmapRow]


# --- Dispatcher ---

class DispatcherKpis(CamelModel):
    active_trips: int
    pending_cargo: int
    available_vehicles: int
    available_drivers: int


class CargoQueueItem(CamelModel):
    id: str
    origin: str
    destination: str
    weight: float
    priority: str
    eta: str


class ActiveTripItem(CamelModel):
    id: str
    vehicle: str
    driver: str
    progress: int
    eta: str


class TripStatsDay(CamelModel):
    day: str
    completed: int
    pending: int


class DispatcherDashboard(CamelModel):
    kpis: DispatcherKpis
    cargo_queue: List[CargoQueueItem]
    active_trips: List[ActiveTripItem]
    trip_stats: List[TripStatsDay]


# --- Safety Officer ---

class SafetyKpis(CamelModel):
    total_drivers: int
    active_drivers: int
    avg_safety_score: int
    expiring_licenses: int
    expired_licenses: int
    suspended_drivers: int


class SafetyBucket(CamelModel):
    range: str
    count: int
    color: str


class DriverPerformanceRow(CamelModel):
    name: str
    safety_score: int
    completion_rate: float
    total_trips: int
    status: str
    license_expiry: datetime


class SafetyDashboard(CamelModel):
    kpis: SafetyKpis
    safety_distribution: List[SafetyBucket]
    driver_performance: List[DriverPerformanceRow]


# --- Financial Analyst ---

class FinancialKpis(CamelModel):
    total_expenses: int
    fuel_expenses: int
    maintenance_expenses: int
    avg_fuel_price: float


class ExpenseSlice(CamelModel):
    category: str
    amount: float
    color: str
    percentage: int


class MonthlySpend(CamelModel):
    month: str
    fuel: int
    maintenance: int
    other: int


class VehicleSpend(CamelModel):
    name: str
    type: str
    total: float


class FinancialDashboard(CamelModel):
    kpis: FinancialKpis
    expense_breakdown: List[ExpenseSlice]
    monthly_trend: List[MonthlySpend]
    top_spending_vehicles: List[VehicleSpend]

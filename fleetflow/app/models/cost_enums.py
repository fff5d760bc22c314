"""
Maintenance and expense enumerations.
"""

import enum


class MaintenanceType(str, enum.Enum):
    SCHEDULED = "Scheduled"
    URGENT = "Urgent"
    COMPLETED = "Completed"


class MaintenanceStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ExpenseType(str, enum.Enum):
    FUEL = "Fuel"
    MAINTENANCE = "Maintenance"
    TOLL = "Toll"
    PARKING = "Parking"
    OTHER = "Other"


OPEN_MAINTENANCE_STATUSES = (MaintenanceStatus.PENDING, MaintenanceStatus.IN_PROGRESS)

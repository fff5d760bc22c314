"""
Trip-related enumerations.
"""

import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    DRAFT = "Draft"  # Created, waiting in the cargo queue
    DISPATCHED = "Dispatched"  # Vehicle committed, not started yet
    IN_PROGRESS = "In Progress"  # Driver has started
    COMPLETED = "Completed"  # Delivered
    CANCELLED = "Cancelled"  # Trip cancelled


class TripPriority(str, enum.Enum):
    """Trip priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Trips that still hold a vehicle or wait for one
OPEN_TRIP_STATUSES = (TripStatus.DRAFT, TripStatus.DISPATCHED, TripStatus.IN_PROGRESS)
ACTIVE_TRIP_STATUSES = (TripStatus.DISPATCHED, TripStatus.IN_PROGRESS)

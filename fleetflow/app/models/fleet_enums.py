"""
Vehicle and driver enumerations.
"""

import enum


class VehicleType(str, enum.Enum):
    """Vehicle type, also used as the driver license category."""
    MOTORCYCLE = "Motorcycle"
    VAN = "Van"
    TRUCK = "Truck"
    TRAILER = "Trailer"


class VehicleStatus(str, enum.Enum):
    """Vehicle status enumeration."""
    AVAILABLE = "Available"  # Ready to be assigned
    ON_TRIP = "On Trip"  # Assigned to a dispatched or running trip
    IN_SHOP = "In Shop"  # Under maintenance
    RETIRED = "Retired"  # Out of service for good


class DriverStatus(str, enum.Enum):
    """Driver duty status enumeration."""
    ON_DUTY = "On Duty"
    OFF_DUTY = "Off Duty"
    SUSPENDED = "Suspended"

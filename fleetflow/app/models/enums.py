"""
User roles enumeration.

Defines the role types for the fleet management system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        MANAGER: Fleet manager, allowed into every dashboard
        DISPATCHER: Creates and dispatches trips (default role)
        SAFETY_OFFICER: Tracks driver compliance and maintenance
        FINANCIAL_ANALYST: Reviews fleet spend
    """
    MANAGER = "manager"
    DISPATCHER = "dispatcher"
    SAFETY_OFFICER = "safety_officer"
    FINANCIAL_ANALYST = "financial_analyst"

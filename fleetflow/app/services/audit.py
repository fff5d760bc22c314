"""
Audit logging service for tracking security events and fleet lifecycle actions.

Provides centralized logging for compliance and incident review.
"""

from typing import Optional, Dict, Any

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.models.audit_log import AuditLog
from fleetflow.app.models.user import User


class AuditAction:
    """Standardized audit action constants."""
    USER_CREATED = "USER_CREATED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    TOKEN_REVOKED = "TOKEN_REVOKED"

    VEHICLE_DELETED = "VEHICLE_DELETED"
    DRIVER_DELETED = "DRIVER_DELETED"

    TRIP_CREATED = "TRIP_CREATED"
    TRIP_STATUS_CHANGED = "TRIP_STATUS_CHANGED"
    TRIP_DELETED = "TRIP_DELETED"

    MAINTENANCE_COMPLETED = "MAINTENANCE_COMPLETED"
    FLEET_HEALTH_RECORDED = "FLEET_HEALTH_RECORDED"


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Log a security or lifecycle event to the audit log.

    Called after the business write has been committed, so a failure here
    never undoes it.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_email: Email of actor
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_email=actor_email,
        action=action,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def log_user_action(
    db: AsyncSession,
    user: User,
    action: str,
    metadata: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None
) -> AuditLog:
    """Log an action performed by an authenticated user."""
    return await log_event(
        db=db,
        action=action,
        actor_id=user.id,
        actor_email=user.email,
        metadata=metadata,
        ip_address=client_ip(request)
    )

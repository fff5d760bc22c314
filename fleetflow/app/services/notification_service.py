"""
Notification Service.

Handles creation and state management of notifications. Producers add
rows to the caller's session; the caller commits them together with the
change they describe.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.models.enums import UserRole
from fleetflow.app.models.notification import Notification, NotificationType
from fleetflow.app.models.user import User

logger = logging.getLogger(__name__)

# Roles that follow each feed
TRIP_WATCHERS = (UserRole.MANAGER, UserRole.DISPATCHER)
MAINTENANCE_WATCHERS = (UserRole.MANAGER, UserRole.SAFETY_OFFICER)


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()
        return notif

    @staticmethod
    async def notify_roles(
        db: AsyncSession,
        roles: Iterable[UserRole],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> int:
        """Queue one notification per user holding any of `roles`."""
        result = await db.execute(select(User.id).where(User.role.in_(list(roles))))
        user_ids = result.scalars().all()

        notifications = [
            Notification(
                user_id=uid,
                title=title,
                message=message,
                type=type,
                metadata_payload=metadata
            )
            for uid in user_ids
        ]

        if notifications:
            db.add_all(notifications)
        logger.debug("Queued %d notifications: %s", len(notifications), title)
        return len(notifications)

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user_id: int) -> bool:
        """Mark a notification as read. False when it is not the user's."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).values(
            is_read=True,
            read_at=datetime.utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: int) -> int:
        """Mark all notifications for user as read."""
        stmt = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).values(
            is_read=True,
            read_at=datetime.utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount

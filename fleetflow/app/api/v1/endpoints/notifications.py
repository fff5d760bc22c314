"""
Notification API Endpoints.

Clients poll this feed; there is no push channel.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ResourceNotFoundError
from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.notification import Notification
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import ListResponse, MessageResponse, CountResponse
from fleetflow.app.schemas.notification import NotificationResponse
from fleetflow.app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=ListResponse[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(require_permission("notifications", "read")),
    db: AsyncSession = Depends(get_db)
):
    """List current user's notifications."""
    query = select(Notification).where(Notification.user_id == current_user.id)

    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712

    query = query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)

    result = await db.execute(query)
    notifications = result.scalars().all()
    return ListResponse[NotificationResponse](
        count=len(notifications),
        data=[NotificationResponse.model_validate(n) for n in notifications],
    )


@router.patch("/read-all", response_model=CountResponse)
async def mark_all_notifications_read(
    current_user: User = Depends(require_permission("notifications", "read")),
    db: AsyncSession = Depends(get_db)
):
    """Mark all notifications as read."""
    count = await NotificationService.mark_all_read(db, current_user.id)
    await db.commit()
    return CountResponse(count=count, message="Notifications marked as read")


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_notification_read(
    notification_id: int = Path(...),
    current_user: User = Depends(require_permission("notifications", "read")),
    db: AsyncSession = Depends(get_db)
):
    """Mark a specific notification as read."""
    success = await NotificationService.mark_read(db, notification_id, current_user.id)
    if not success:
        raise ResourceNotFoundError("Notification")

    await db.commit()
    return MessageResponse(message="Notification marked as read")

"""
Notification schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field

from fleetflow.app.models.notification import NotificationType
from fleetflow.app.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: int
    type: NotificationType
    title: str
    message: str
    metadata: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("metadata_payload", "metadata"), serialization_alias="metadata"
    )
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None

"""
Notification schemas for response validation
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID
from ..enums.log import NotificationType


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    is_read: bool
    related_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True

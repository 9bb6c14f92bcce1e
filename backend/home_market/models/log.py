"""
Log store models: status history and user notifications.

These live on their own declarative base so the log store can be a separate
database from the primary store. Rows are append-only.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from .base import value_enum
from ..enums.log import NotificationType, RelatedType

LogBase = declarative_base()


class HistoryStatus(LogBase):
    __tablename__ = "history_status"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    related_id = Column(Uuid, nullable=False, index=True)
    related_type = Column(value_enum(RelatedType), nullable=False)
    old_status = Column(String(32), nullable=False)
    new_status = Column(String(32), nullable=False)
    changed_by = Column(Uuid, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    note = Column(Text, nullable=True)


class Notification(LogBase):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(value_enum(NotificationType), nullable=False)
    related_id = Column(Uuid, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

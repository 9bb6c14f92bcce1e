"""
Notification routes for user notifications
"""

from fastapi import APIRouter, Depends, Query
from typing import List

from ..auth.dependencies import get_current_user
from ..auth.guard import Principal
from ..database import get_log_sink
from ..schemas.notification import NotificationResponse
from ..services.log_sink import LogSink

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    unread_only: bool = Query(False),
    current_user: Principal = Depends(get_current_user),
    log_sink: LogSink = Depends(get_log_sink),
):
    """Get notifications for the current user"""
    return log_sink.notifications_for(current_user.user_id, skip=skip, limit=limit, unread_only=unread_only)


@router.get("/unread-count")
def get_unread_count(
    current_user: Principal = Depends(get_current_user),
    log_sink: LogSink = Depends(get_log_sink),
):
    """Get count of unread notifications"""
    return {"unread_count": log_sink.unread_count(current_user.user_id)}

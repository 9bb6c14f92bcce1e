"""
Best-effort sink for status history and notifications.

Writes happen after the primary transaction has committed. Each write runs on
a worker thread against the log store's own sessions; the caller waits at
most ``timeout`` seconds and never sees an exception. Failures and timeouts
are logged as warnings.
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import sessionmaker

from ..core.logging import get_logger
from ..enums.log import NotificationType, RelatedType
from ..models.log import HistoryStatus, Notification

logger = get_logger(__name__)


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


class LogSink:
    def __init__(
        self,
        session_factory: sessionmaker,
        timeout: float = 5.0,
        retries: int = 1,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.session_factory = session_factory
        self.timeout = timeout
        self.retries = max(0, retries)
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="log-sink")

    def record_status_change(
        self,
        entity_id: UUID,
        entity_type: RelatedType,
        old_status,
        new_status,
        actor_id: UUID,
        note: Optional[str] = None,
    ) -> bool:
        fields = {
            "related_id": entity_id,
            "related_type": RelatedType(entity_type),
            "old_status": _status_value(old_status),
            "new_status": _status_value(new_status),
            "changed_by": actor_id,
            "timestamp": datetime.now(timezone.utc),
            "note": note,
        }
        return self._dispatch(HistoryStatus, fields, f"history status for {_status_value(entity_type)} {entity_id}")

    def record_notification(
        self,
        recipient_id: UUID,
        title: str,
        message: str,
        notification_type: NotificationType,
        related_id: Optional[UUID] = None,
    ) -> bool:
        fields = {
            "user_id": recipient_id,
            "title": title,
            "message": message,
            "type": NotificationType(notification_type),
            "related_id": related_id,
            "is_read": False,
            "created_at": datetime.now(timezone.utc),
        }
        return self._dispatch(Notification, fields, f"notification for user {recipient_id}")

    def history_for(self, related_id: UUID) -> List[HistoryStatus]:
        """Status history of one entity, oldest first; empty when the log store is unreachable."""
        try:
            db = self.session_factory()
            try:
                return (
                    db.query(HistoryStatus)
                    .filter(HistoryStatus.related_id == related_id)
                    .order_by(HistoryStatus.timestamp)
                    .all()
                )
            finally:
                db.close()
        except Exception as e:
            logger.warning(f"Failed to read history for {related_id}: {e}")
            return []

    def notifications_for(
        self, user_id: UUID, skip: int = 0, limit: int = 50, unread_only: bool = False
    ) -> List[Notification]:
        db = self.session_factory()
        try:
            query = db.query(Notification).filter(Notification.user_id == user_id)
            if unread_only:
                query = query.filter(Notification.is_read == False)  # noqa: E712
            return query.order_by(desc(Notification.created_at)).offset(skip).limit(limit).all()
        finally:
            db.close()

    def unread_count(self, user_id: UUID) -> int:
        db = self.session_factory()
        try:
            return db.query(Notification).filter(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            ).count()
        finally:
            db.close()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    def _write(self, model, fields: dict) -> None:
        db = self.session_factory()
        try:
            db.add(model(**fields))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _write_with_retries(self, model, fields: dict) -> None:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self._write(model, fields)
                return
            except Exception as e:
                if attempt == attempts:
                    raise
                logger.info(f"Retrying {model.__tablename__} write (attempt {attempt}/{attempts}): {e}")

    def _dispatch(self, model, fields: dict, label: str) -> bool:
        try:
            future = self._executor.submit(self._write_with_retries, model, fields)
            future.result(timeout=self.timeout)
            return True
        except FutureTimeoutError:
            logger.warning(f"Timed out after {self.timeout}s saving {label}")
        except Exception as e:
            logger.warning(f"Failed to save {label}: {e}")
        return False

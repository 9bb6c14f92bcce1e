"""
Shared plumbing for the engines: injected handles and commit/rollback.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth.guard import AuthorizationGuard
from ..core.logging import get_logger
from .exceptions import StoreUnavailable
from .log_sink import LogSink

logger = get_logger(__name__)


class BaseService:
    def __init__(self, db: Session, guard: AuthorizationGuard, log_sink: LogSink):
        self.db = db
        self.guard = guard
        self.log_sink = log_sink

    def _save(self, *instances) -> None:
        """Add and commit in one transaction; store failures surface as StoreUnavailable."""
        try:
            for instance in instances:
                self.db.add(instance)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Primary store write failed: {e}", exc_info=True)
            raise StoreUnavailable() from e
        for instance in instances:
            self.db.refresh(instance)

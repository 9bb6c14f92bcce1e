"""
Database configuration and session management
"""

from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .models.base import Base
from .models.log import LogBase
# Import all models to ensure they're registered with SQLAlchemy
from .models import user, shop, item, offer, order, log  # noqa: F401


def create_db_engine(url: str, settings: Settings) -> Engine:
    """
    Build an engine for the primary or the log store.

    Every connection is bounded: pool checkout by ``db_pool_timeout`` and, on
    PostgreSQL, each statement by ``db_statement_timeout_ms``.
    """
    connect_args = {}
    pool_args = {"pool_recycle": 300}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    else:
        pool_args["pool_timeout"] = settings.db_pool_timeout
    if url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
        # For Cloud SQL, if host starts with /cloudsql/, use it as the Unix socket directory
        if settings.db_host.startswith('/cloudsql/'):
            connect_args["host"] = '/cloudsql/' + settings.db_host.split('/cloudsql/')[1]

    return create_engine(
        url,
        echo=(settings.log_verbosity == "full"),
        pool_pre_ping=True,
        connect_args=connect_args,
        **pool_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine: Engine, log_engine: Optional[Engine] = None) -> None:
    """Create primary tables, and the log store tables on ``log_engine`` (or the same engine)."""
    Base.metadata.create_all(bind=engine)
    LogBase.metadata.create_all(bind=log_engine or engine)


def get_db(request: Request):
    """
    Database dependency for FastAPI routes
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_log_sink(request: Request):
    return request.app.state.log_sink

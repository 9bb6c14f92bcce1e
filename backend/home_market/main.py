"""
Application factory: wires settings, stores, log sink and routers
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, get_settings
from .core.logging import get_logger, setup_logging
from .database import create_db_engine, create_session_factory
from .routes import items, notifications, offers, orders
from .services.exceptions import MarketError
from .services.log_sink import LogSink

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    engine = create_db_engine(settings.database_url, settings)
    if settings.log_database_url == settings.database_url:
        log_engine = engine
    else:
        log_engine = create_db_engine(settings.log_database_url, settings)

    log_sink = LogSink(
        create_session_factory(log_engine),
        timeout=settings.log_sink_timeout_seconds,
        retries=settings.log_sink_retries,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.app_name} starting")
        yield
        log_sink.shutdown()
        engine.dispose()
        if log_engine is not engine:
            log_engine.dispose()
        logger.info(f"{settings.app_name} stopped")

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.log_engine = log_engine
    app.state.session_factory = create_session_factory(engine)
    app.state.log_sink = log_sink

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(offers.router, prefix="/api/offers", tags=["Offers"])
    app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
    app.include_router(items.market_router, prefix="/api/market", tags=["Marketplace"])
    app.include_router(items.router, prefix="/api/items", tags=["Items"])
    app.include_router(items.admin_router, prefix="/api/admin", tags=["Admin"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])

    @app.get("/health")
    def health():
        return {"status": "ok", "app": settings.app_name}

    return app


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(MarketError)
    async def market_error_handler(request: Request, exc: MarketError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Rejected input is not echoed back; it may not be JSON-serializable (NaN)
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(errors), "error": "validation_error"},
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} primary store error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Primary store is unavailable", "error": "store_unavailable"},
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("home_market.main:create_app", factory=True, host="0.0.0.0", port=8000)

"""
FastAPI application factory
"""
import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from subtracker.api import subscriptions
from subtracker.config import Settings, get_settings
from subtracker.domain.errors import (
    DuplicateSubscriptionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from subtracker.infrastructure.db.repository import SqlSubscriptionStorage
from subtracker.infrastructure.db.session import Database
from subtracker.logging_config import setup_logging
from subtracker.storage.base import SubscriptionStorage
from subtracker.storage.memory import InMemorySubscriptionStorage

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches anything the exception handlers did not, logs the traceback, returns 500"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "Internal Server Error"},
            )


def build_storage(settings: Settings) -> tuple[SubscriptionStorage, Optional[Database]]:
    """
    Собрать storage по настройкам (STORAGE_BACKEND)

    Returns:
        (storage, database) — database is None for the in-memory backend
    """
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.warning("Using in-memory storage: data is lost on restart")
        return InMemorySubscriptionStorage(), None
    if backend != "sql":
        raise ValueError(f"Unknown STORAGE_BACKEND {settings.STORAGE_BACKEND!r} (expected 'sql' or 'memory')")

    database = Database.from_settings(settings)
    return SqlSubscriptionStorage(database.session_factory), database


def register_exception_handlers(app: FastAPI) -> None:
    """Domain/storage errors -> HTTP responses"""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        # 400 instead of FastAPI's default 422
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(DuplicateSubscriptionError)
    async def duplicate_handler(request: Request, exc: DuplicateSubscriptionError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(
            "Storage error on %s %s: %s", request.method, request.url.path, exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal storage error"},
        )


def create_app(
    storage: Optional[SubscriptionStorage] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Args:
        storage: Готовый storage (тесты передают InMemorySubscriptionStorage).
            Если не передан — собирается по settings.STORAGE_BACKEND.
        settings: Настройки (по умолчанию get_settings())

    Returns:
        Настроенный FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    database: Optional[Database] = None
    if storage is None:
        storage, database = build_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database is not None:
            database.create_schema()
            logger.info("Database schema ready")
        yield
        if database is not None:
            database.dispose()

    app = FastAPI(
        title="Subscriptions",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.storage = storage

    app.add_middleware(ErrorLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(subscriptions.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (проверяет доступность хранилища)"""
        try:
            storage.ping()
        except StorageError:
            logger.exception("Readiness check failed")
            return PlainTextResponse("storage unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return "ok"

    return app


# Create app instance
app = create_app()

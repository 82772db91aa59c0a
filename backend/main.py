import logging
import logging.config
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.core.config import settings
from backend.app.core.db import Database
from backend.app.core.errors import FleetError
from backend.app.core.middleware import RequestLoggingMiddleware
from backend.app.api.v1 import vehicles

logger = logging.getLogger(__name__)


def setup_logging(service_name: str) -> None:
    log_level = settings.LOG_LEVEL
    log_dir = settings.LOG_DIR

    max_bytes = settings.LOG_MAX_BYTES
    backup_count = settings.LOG_BACKUP_COUNT

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "default",
        }
    }

    root_handlers = ["console"]

    if settings.LOG_TO_FILE:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "default",
            "filename": str(Path(log_dir) / f"{service_name}.log"),
            "maxBytes": max_bytes,
            "backupCount": backup_count,
            "encoding": "utf-8",
        }
        handlers["file_error"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "default",
            "filename": str(Path(log_dir) / f"{service_name}.error.log"),
            "maxBytes": max_bytes,
            "backupCount": backup_count,
            "encoding": "utf-8",
        }
        root_handlers.extend(["file", "file_error"])

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                }
            },
            "handlers": handlers,
            "root": {"level": log_level, "handlers": root_handlers},
        }
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FleetError)
    async def fleet_error_handler(request: Request, exc: FleetError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err.get('msg')}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "; ".join(parts) or "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Сборка приложения. database_url переопределяет settings.DB_URL (тесты).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(database_url or settings.DB_URL, echo=settings.DEBUG)
        await database.init()
        app.state.database = database
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    _register_error_handlers(app)

    # API v1
    app.include_router(vehicles.router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.PROJECT_NAME,
        }

    @app.get("/")
    async def root():
        return {
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "endpoints": {
                "vehicles": "/api/v1/vehicles",
                "health": "/health",
            },
        }

    return app


setup_logging("backend")

app = create_app()

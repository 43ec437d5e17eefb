"""URL Shortener Service - Main FastAPI Application.

A URL shortening service with:
- Plain-text, JSON and batch shortening
- Redirect to original URLs
- Per-user listing via the user_id cookie
- Asynchronous batched soft deletion
- In-memory (with JSON file mirror) or SQLite persistence
- Optional file/remote audit trail
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.gzip import GZipMiddleware

from .core.config import Settings, settings
from .core.database import Database
from .api.middleware import LoggingMiddleware, UserCookieMiddleware
from .api.routes import health_router, urls_router
from .repository import FileStorage, MemoryURLRepository, SQLiteURLRepository, URLRepository
from .services import ServiceClosedError, URLService, build_audit_manager

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_repository(config: Settings) -> tuple[URLRepository, Optional[FileStorage]]:
    """Create the repository selected by configuration.

    A database DSN selects SQLite. Otherwise records live in memory and are
    mirrored to the JSON storage file, which is replayed here.
    """
    if config.database_dsn:
        logger.info(f"Using SQLite storage: {config.database_dsn}")
        return SQLiteURLRepository(Database(config.database_dsn)), None

    repository = MemoryURLRepository()
    storage = FileStorage(config.storage_path)
    storage.load(repository)
    logger.info(f"Using in-memory storage mirrored to {config.storage_path}")
    return repository, storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info(f"Starting {settings.app_title}...")
    repository, storage = build_repository(settings)
    app.state.file_storage = storage
    app.state.url_service = URLService(
        repository,
        short_code_length=settings.short_code_length,
        queue_size=settings.delete_queue_size,
        batch_size=settings.delete_batch_size,
        flush_interval=settings.delete_flush_interval,
    )
    app.state.audit_manager = build_audit_manager(settings.audit_file, settings.audit_url)
    yield
    # Shutdown
    logger.info("Shutting down URL Shortener Service...")
    app.state.url_service.close()
    app.state.audit_manager.close()


# Create FastAPI application
app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(UserCookieMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=500)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(ServiceClosedError)
async def service_closed_handler(request: Request, exc: ServiceClosedError):
    """Reject requests arriving during shutdown."""
    return JSONResponse(
        status_code=503,
        content={"detail": "Service is shutting down", "error_code": "503"},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler."""
    logger.error(f"Unhandled Exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_code": "500"},
    )


# Include routers
app.include_router(health_router)
app.include_router(urls_router)

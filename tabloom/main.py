"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import __version__
from .api import auth_router, bookmarks_router, export_router, folders_router, tags_router
from .core.config import ConfigurationError, Environment, settings
from .core.logging_config import setup_logging
from .database import DATABASE_URL, SessionLocal, get_db, init_db
from .exceptions import TabloomException
from .middleware.exception_handler import (
    generic_exception_handler,
    request_validation_handler,
    tabloom_exception_handler,
)
from .middleware.request_context import RequestContextMiddleware
from .services.export_service import ExportSnapshotService

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", url)


logger.info("Using database: %s", _mask_url(DATABASE_URL))
init_db()


def _reconcile_export_jobs() -> None:
    db = SessionLocal()
    try:
        count = ExportSnapshotService(db, settings.export_dir).reconcile_stale_jobs(
            settings.export_job_timeout_minutes
        )
        if count:
            logger.info("Marked %d interrupted export job(s) as failed", count)
    except Exception as e:
        logger.warning(f"Export job reconciliation failed (non-fatal): {e}")
    finally:
        db.close()


def _seed() -> None:
    from .core.seeder import seed_sample_data

    db = SessionLocal()
    try:
        seeded = seed_sample_data(db)
        if seeded > 0:
            logger.info(f"First startup: seeded {seeded} bookmarks")
    except Exception as e:
        db.rollback()
        logger.warning(f"Seed loading failed (non-fatal): {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the Tabloom API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        for problem in settings.insecure_settings():
            logger.warning(f"SECURITY: {problem}")

    _reconcile_export_jobs()

    if settings.seed_sample_data:
        _seed()

    yield


app = FastAPI(
    title="Tabloom API",
    description=(
        "REST API for the Tabloom bookmark manager: bookmarks, nested folders, "
        "tags and a cached JSON export.\n\n"
        "**Authentication:** every endpoint except `GET /api/export/json`, "
        "`/api/auth/login` and `/api/auth/register` requires a `Bearer` token."
    ),
    version=__version__,
    lifespan=lifespan,
)

# CORS wraps request context
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(TabloomException, tabloom_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(auth_router)
app.include_router(bookmarks_router)
app.include_router(folders_router)
app.include_router(tags_router)
app.include_router(export_router)

logger.info(
    "Tabloom API started | env=%s | db=%s | export_dir=%s | cors=%s",
    settings.environment.value,
    "SQLite" if DATABASE_URL.startswith("sqlite") else "PostgreSQL",
    settings.export_dir,
    ",".join(settings.get_cors_origins()),
)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Tabloom API",
        "version": __version__,
        "status": "running",
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Database status, uptime and bookmark count.

    Never raises: a database failure is reported as ``degraded`` so probes
    do not receive 5xx.
    """
    db_status = "ok"
    bookmark_count = 0
    try:
        db.execute(text("SELECT 1"))
        bookmark_count = db.execute(
            text("SELECT COUNT(*) FROM bookmarks WHERE lifecycle = 'active'")
        ).scalar() or 0
    except Exception:
        logger.exception("Health check database probe failed")
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": __version__,
        "bookmark_count": bookmark_count,
    }

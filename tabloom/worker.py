"""
Export worker: regenerates the cached snapshot on a fixed interval.

On startup, export jobs left ``running`` by a crashed process are marked
failed. Each cycle runs one tracked export; a failed cycle is logged and
the loop continues.

Usage:
    tabloom-export-worker
"""

import logging
import time

from .core.config import settings
from .core.logging_config import setup_logging
from .database import SessionLocal, init_db
from .services.export_service import ExportSnapshotService

logger = logging.getLogger("tabloom.worker")


def run_export_once() -> str:
    """Run one tracked export in its own session. Returns the job id."""
    db = SessionLocal()
    try:
        return ExportSnapshotService(db, settings.export_dir).run_tracked_job()
    finally:
        db.close()


def reconcile_on_startup() -> int:
    db = SessionLocal()
    try:
        return ExportSnapshotService(db, settings.export_dir).reconcile_stale_jobs(
            settings.export_job_timeout_minutes
        )
    finally:
        db.close()


def main() -> None:
    """Main worker loop."""
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)
    init_db()

    interval = max(1, settings.export_interval_seconds)
    logger.info(
        "Export worker started",
        extra={"interval_seconds": interval, "export_dir": settings.export_dir},
    )

    reconciled = reconcile_on_startup()
    if reconciled:
        logger.info(f"Marked {reconciled} interrupted export job(s) as failed")

    while True:
        try:
            job_id = run_export_once()
            logger.info("Scheduled export finished", extra={"job_id": job_id})
        except KeyboardInterrupt:
            logger.info("Worker shutting down")
            break
        except Exception as e:
            # The job row already records the failure
            logger.error(f"Scheduled export failed: {e}")

        try:
            time.sleep(interval)
        except KeyboardInterrupt:
            logger.info("Worker shutting down")
            break


if __name__ == "__main__":
    main()

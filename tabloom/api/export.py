"""Export API endpoints.

``GET /api/export/json`` is public; everything else requires authentication.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..core.config import settings
from ..database import get_db
from ..exceptions import ExportFailedError
from ..schemas.export import (
    ExportJobListResponse,
    ExportJobResponse,
    ExportSnapshot,
    ExportTriggerResponse,
)
from ..services.export_job_service import DEFAULT_JOB_LIST_LIMIT, ExportJobService
from ..services.export_service import ExportSnapshotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])


def get_export_service(db: Session = Depends(get_db)) -> ExportSnapshotService:
    return ExportSnapshotService(db, settings.export_dir)


@router.get("/json", response_model=ExportSnapshot)
def export_json(
    fresh: bool = Query(False),
    service: ExportSnapshotService = Depends(get_export_service),
):
    """Serve the cached snapshot, generating one on a cache miss or ``fresh=true``.

    This path never writes the cache file.
    """
    try:
        snapshot = None if fresh else service.load_cached_snapshot()
        if snapshot is None:
            snapshot = service.generate_snapshot()
    except Exception:
        logger.exception("Export JSON generation failed")
        raise ExportFailedError("Failed to generate export") from None
    return snapshot


@router.post("/trigger", response_model=ExportTriggerResponse)
def trigger_export(
    service: ExportSnapshotService = Depends(get_export_service),
    auth: AuthContext = Depends(require_auth),
):
    """Regenerate and persist the snapshot synchronously under a job row."""
    try:
        job_id = service.run_tracked_job()
    except Exception:
        raise ExportFailedError("Failed to trigger export") from None
    logger.info("Export triggered", extra={"job_id": job_id, "user_id": auth.user_id})
    return ExportTriggerResponse(message="Export completed", job_id=job_id)


@router.get("/jobs", response_model=ExportJobListResponse)
def list_export_jobs(
    limit: int = Query(DEFAULT_JOB_LIST_LIMIT),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Most recent jobs first, at most 50."""
    jobs = ExportJobService(db).list_jobs(limit)
    return ExportJobListResponse(jobs=[ExportJobResponse.model_validate(j) for j in jobs])


@router.get("/jobs/{job_id}", response_model=ExportJobResponse)
def get_export_job(
    job_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return ExportJobService(db).get_job(job_id)

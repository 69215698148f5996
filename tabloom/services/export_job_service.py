"""Service for export job bookkeeping."""

import logging
from datetime import timedelta
from typing import List

from sqlalchemy.orm import Session

from ..models import ExportJob, ExportJobStatus
from ..models.mixins import utcnow
from ..repositories import ExportJobRepository

logger = logging.getLogger(__name__)

DEFAULT_JOB_LIST_LIMIT = 10
MAX_JOB_LIST_LIMIT = 50

INTERRUPTED_MESSAGE = "Export interrupted: job was still running at startup"


class ExportJobService:
    """
    Lifecycle of export jobs: running -> success | failure.

    Every transition is committed immediately so the job log survives a
    failure of the work it tracks. Terminal jobs are immutable.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ExportJobRepository(db)

    def start(self) -> ExportJob:
        job = self.repo.add(ExportJob(status=ExportJobStatus.RUNNING.value))
        self.db.commit()
        self.db.refresh(job)
        logger.info("Export job started", extra={"job_id": job.id})
        return job

    def _finish(self, job_id: str, status: ExportJobStatus, error_message: str = None) -> ExportJob:
        job = self.repo.get_by_id(job_id)
        if job.is_terminal:
            raise ValueError(f"Export job {job_id} already finished with status {job.status}")
        job.status = status.value
        job.finished_at = utcnow()
        job.error_message = error_message
        self.db.commit()
        self.db.refresh(job)
        return job

    def succeed(self, job_id: str) -> ExportJob:
        job = self._finish(job_id, ExportJobStatus.SUCCESS)
        logger.info("Export job succeeded", extra={"job_id": job_id})
        return job

    def fail(self, job_id: str, error_message: str) -> ExportJob:
        job = self._finish(job_id, ExportJobStatus.FAILURE, error_message or "Unknown error")
        logger.warning("Export job failed", extra={"job_id": job_id, "error": error_message})
        return job

    def get_job(self, job_id: str) -> ExportJob:
        return self.repo.get_by_id(job_id)

    def list_jobs(self, limit: int = DEFAULT_JOB_LIST_LIMIT) -> List[ExportJob]:
        """Newest first; *limit* is clamped to [1, 50]."""
        limit = min(MAX_JOB_LIST_LIMIT, max(1, limit))
        return self.repo.list_recent(limit)

    def reconcile_stale(self, timeout_minutes: int) -> int:
        """Mark jobs running for longer than *timeout_minutes* as failed.

        A process that dies mid-export leaves its job running forever;
        this is called at startup to close such jobs.

        Returns:
            Number of jobs reconciled.
        """
        cutoff = utcnow() - timedelta(minutes=timeout_minutes)
        stale = self.repo.running_started_before(cutoff)
        now = utcnow()
        for job in stale:
            job.status = ExportJobStatus.FAILURE.value
            job.finished_at = now
            job.error_message = INTERRUPTED_MESSAGE
        if stale:
            self.db.commit()
            logger.warning(
                "Reconciled stale export jobs",
                extra={"count": len(stale), "job_ids": [job.id for job in stale]},
            )
        return len(stale)

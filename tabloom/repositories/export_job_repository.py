"""Repository for export job rows."""

from datetime import datetime
from typing import List

from ..exceptions import ExportJobNotFoundError
from ..models import ExportJob, ExportJobStatus
from .base import BaseRepository


class ExportJobRepository(BaseRepository[ExportJob]):
    model_class = ExportJob
    not_found_error = ExportJobNotFoundError

    def list_recent(self, limit: int) -> List[ExportJob]:
        return self.db.query(ExportJob).order_by(
            ExportJob.started_at.desc(), ExportJob.id
        ).limit(limit).all()

    def running_started_before(self, cutoff: datetime) -> List[ExportJob]:
        return self.db.query(ExportJob).filter(
            ExportJob.status == ExportJobStatus.RUNNING.value,
            ExportJob.started_at < cutoff,
        ).all()

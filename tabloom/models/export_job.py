"""Export job model for tracking snapshot generation attempts."""

from enum import Enum

from sqlalchemy import Column, String, Text

from ..database import Base
from .mixins import UtcDateTime, new_id, utcnow


class ExportJobStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"


TERMINAL_STATUSES = frozenset({ExportJobStatus.SUCCESS.value, ExportJobStatus.FAILURE.value})


class ExportJob(Base):
    """
    One attempt at generating and persisting the export snapshot.

    Status transitions: running -> success | failure. A terminal job is
    never modified again.
    """

    __tablename__ = "export_jobs"

    id = Column(String(36), primary_key=True, default=new_id)

    # Allowed values: running, success, failure
    status = Column(String(20), nullable=False, default=ExportJobStatus.RUNNING.value, index=True)
    error_message = Column(Text, nullable=True)

    started_at = Column(UtcDateTime(), nullable=False, default=utcnow)
    finished_at = Column(UtcDateTime(), nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

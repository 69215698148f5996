"""Export snapshot and export job schemas.

``ExportSnapshot`` is both the API response and the on-disk format of
``bookmarks.json``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel


class ExportBookmark(ApiModel):
    id: str
    url: str
    title: Optional[str] = None
    note: Optional[str] = None
    folder_id: Optional[str] = None
    folder_name: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ExportFolder(ApiModel):
    id: str
    name: str
    parent_id: Optional[str] = None
    sort_order: int
    children: List["ExportFolder"] = Field(default_factory=list)
    bookmarks: List[ExportBookmark] = Field(default_factory=list)


class ExportTag(ApiModel):
    id: str
    name: str
    bookmark_count: int


class ExportSnapshot(ApiModel):
    exported_at: datetime
    version: str
    folders: List[ExportFolder]
    bookmarks: List[ExportBookmark]
    tags: List[ExportTag]


class ExportJobResponse(ApiModel):
    id: str
    status: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    error_message: Optional[str] = None


class ExportJobListResponse(ApiModel):
    jobs: List[ExportJobResponse]


class ExportTriggerResponse(ApiModel):
    message: str
    job_id: str

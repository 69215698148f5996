"""Database models."""

from .mixins import Lifecycle
from .user import User
from .folder import Folder
from .bookmark import Bookmark, BookmarkTag
from .tag import Tag
from .export_job import ExportJob, ExportJobStatus

__all__ = [
    "Lifecycle",
    "User", "Folder", "Bookmark", "BookmarkTag", "Tag",
    "ExportJob", "ExportJobStatus",
]

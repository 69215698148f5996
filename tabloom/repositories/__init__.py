"""Data access repositories."""

from .base import BaseRepository
from .bookmark_repository import BookmarkRepository
from .export_job_repository import ExportJobRepository
from .folder_repository import FolderRepository
from .tag_repository import TagRepository

__all__ = [
    "BaseRepository",
    "BookmarkRepository",
    "ExportJobRepository",
    "FolderRepository",
    "TagRepository",
]

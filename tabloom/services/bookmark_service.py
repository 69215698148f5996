"""Service for bookmark writes and single-bookmark reads."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import ValidationError
from ..models import Bookmark
from ..models.mixins import utcnow
from ..repositories import BookmarkRepository, FolderRepository, TagRepository
from ..schemas.bookmark import BookmarkCreate, BookmarkUpdate

logger = logging.getLogger(__name__)


def _dedupe(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class BookmarkService:
    """
    Bookmark CRUD.

    Referenced folder and tags are validated before anything is written.
    A tag set is replaced as a whole (delete all links, insert the new
    ones) in the same transaction as the rest of the update.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookmarkRepository(db)
        self.folder_repo = FolderRepository(db)
        self.tag_repo = TagRepository(db)

    def get_bookmark(self, bookmark_id: str) -> Bookmark:
        return self.repo.get_by_id(bookmark_id)

    def _check_folder(self, folder_id: Optional[str]) -> None:
        if folder_id and self.folder_repo.get_by_id_optional(folder_id) is None:
            raise ValidationError("Folder not found", field="folderId")

    def _check_tags(self, tag_ids: List[str]) -> List[str]:
        tag_ids = _dedupe(tag_ids)
        missing = set(tag_ids) - self.tag_repo.existing_ids(tag_ids)
        if missing:
            raise ValidationError(
                f"Tag not found: {sorted(missing)[0]}", field="tagIds"
            )
        return tag_ids

    def create_bookmark(self, data: BookmarkCreate) -> Bookmark:
        self._check_folder(data.folder_id)
        tag_ids = self._check_tags(data.tag_ids or [])

        try:
            bookmark = self.repo.add(Bookmark(
                url=data.url,
                title=data.title,
                note=data.note,
                folder_id=data.folder_id or None,
            ))
            if tag_ids:
                self.repo.replace_tags(bookmark, tag_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(bookmark)
        logger.info("Created bookmark", extra={"bookmark_id": bookmark.id, "tag_count": len(tag_ids)})
        return bookmark

    def update_bookmark(self, bookmark_id: str, data: BookmarkUpdate) -> Bookmark:
        bookmark = self.repo.get_by_id(bookmark_id)
        fields = data.model_fields_set

        if "folder_id" in fields:
            self._check_folder(data.folder_id)
        tag_ids = None
        if "tag_ids" in fields and data.tag_ids is not None:
            tag_ids = self._check_tags(data.tag_ids)

        try:
            if "url" in fields:
                bookmark.url = data.url
            if "title" in fields:
                bookmark.title = data.title
            if "note" in fields:
                bookmark.note = data.note
            if "folder_id" in fields:
                bookmark.folder_id = data.folder_id or None
            if tag_ids is not None:
                self.repo.replace_tags(bookmark, tag_ids)
            bookmark.updated_at = utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(bookmark)
        logger.info("Updated bookmark", extra={"bookmark_id": bookmark.id})
        return bookmark

    def delete_bookmark(self, bookmark_id: str) -> None:
        """Soft delete. A second delete finds nothing and raises 404."""
        bookmark = self.repo.get_by_id(bookmark_id)
        bookmark.mark_deleted()
        bookmark.updated_at = utcnow()
        self.db.commit()
        logger.info("Deleted bookmark", extra={"bookmark_id": bookmark_id})

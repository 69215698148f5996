"""Repository for bookmark and bookmark-tag database operations."""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import exists, or_
from sqlalchemy.orm import selectinload

from ..exceptions import BookmarkNotFoundError
from ..models import Bookmark, BookmarkTag, Lifecycle
from ..models.mixins import utcnow
from .base import BaseRepository


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally (escape char ``\\``)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BookmarkRepository(BaseRepository[Bookmark]):
    model_class = Bookmark
    not_found_error = BookmarkNotFoundError

    def _with_relations(self):
        return self._base_query().options(
            selectinload(Bookmark.folder),
            selectinload(Bookmark.tag_links).selectinload(BookmarkTag.tag),
        )

    def search(
        self,
        search: Optional[str] = None,
        folder_id: Optional[str] = None,
        tag_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Bookmark], int]:
        """Filtered page of active bookmarks plus the total match count.

        Ordered by most recently updated first, id as tiebreak.
        """
        query = self._with_relations()

        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(or_(
                Bookmark.title.ilike(pattern, escape="\\"),
                Bookmark.url.ilike(pattern, escape="\\"),
                Bookmark.note.ilike(pattern, escape="\\"),
            ))
        if folder_id:
            query = query.filter(Bookmark.folder_id == folder_id)
        if tag_id:
            query = query.filter(exists().where(
                BookmarkTag.bookmark_id == Bookmark.id,
                BookmarkTag.tag_id == tag_id,
            ))

        total = query.order_by(None).count()
        rows = (
            query.order_by(Bookmark.updated_at.desc(), Bookmark.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return rows, total

    def list_active_for_export(self) -> List[Bookmark]:
        return self._with_relations().order_by(
            Bookmark.updated_at.desc(), Bookmark.id
        ).all()

    def list_in_folder(self, folder_id: str) -> List[Bookmark]:
        return self._base_query().filter(Bookmark.folder_id == folder_id).order_by(
            Bookmark.updated_at.desc(), Bookmark.id
        ).all()

    def replace_tags(self, bookmark: Bookmark, tag_ids: Sequence[str]) -> None:
        """Delete every link of *bookmark*, then insert one per tag id."""
        self.db.query(BookmarkTag).filter(
            BookmarkTag.bookmark_id == bookmark.id
        ).delete(synchronize_session=False)
        self.db.add_all(
            BookmarkTag(bookmark_id=bookmark.id, tag_id=tag_id) for tag_id in tag_ids
        )
        self.db.flush()
        self.db.expire(bookmark, ["tag_links"])

    def soft_delete_in_folder(self, folder_id: str) -> int:
        """Soft-delete every active bookmark filed under *folder_id*."""
        return self._base_query().filter(Bookmark.folder_id == folder_id).update(
            {Bookmark.lifecycle: Lifecycle.DELETED, Bookmark.updated_at: utcnow()},
            synchronize_session="fetch",
        )

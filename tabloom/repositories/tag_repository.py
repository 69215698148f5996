"""Repository for tag database operations."""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func

from ..exceptions import TagNotFoundError
from ..models import Bookmark, BookmarkTag, Tag
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model_class = Tag
    not_found_error = TagNotFoundError

    def get_by_name(self, name: str) -> Optional[Tag]:
        return self.db.query(Tag).filter(Tag.name == name).first()

    def existing_ids(self, tag_ids: Sequence[str]) -> set:
        if not tag_ids:
            return set()
        rows = self.db.query(Tag.id).filter(Tag.id.in_(list(tag_ids))).all()
        return {row.id for row in rows}

    def list_with_counts(self) -> List[Tuple[Tag, int]]:
        """Every tag ordered by name with its join-table bookmark count.

        The count includes links to soft-deleted bookmarks. Both the tag
        listing and the export snapshot use this query so they agree.
        """
        return (
            self.db.query(Tag, func.count(BookmarkTag.bookmark_id))
            .outerjoin(BookmarkTag, BookmarkTag.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name)
            .all()
        )

    def count_links(self, tag_id: str) -> int:
        return self.db.query(func.count(BookmarkTag.bookmark_id)).filter(
            BookmarkTag.tag_id == tag_id
        ).scalar() or 0

    def active_bookmarks(self, tag_id: str) -> List[Bookmark]:
        return (
            self.db.query(Bookmark)
            .join(BookmarkTag, BookmarkTag.bookmark_id == Bookmark.id)
            .filter(BookmarkTag.tag_id == tag_id, Bookmark.active())
            .order_by(Bookmark.updated_at.desc(), Bookmark.id)
            .all()
        )

"""Service for tag CRUD."""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from ..exceptions import ConflictError
from ..models import Bookmark, Tag
from ..models.mixins import utcnow
from ..repositories import TagRepository
from ..schemas.tag import TagCreate, TagUpdate

logger = logging.getLogger(__name__)


class TagService:
    """Tag names are unique (case-sensitive); deleting a tag removes its links."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TagRepository(db)

    def list_tags(self) -> List[Tuple[Tag, int]]:
        return self.repo.list_with_counts()

    def get_tag_detail(self, tag_id: str) -> Tuple[Tag, int, List[Bookmark]]:
        tag = self.repo.get_by_id(tag_id)
        return tag, self.repo.count_links(tag.id), self.repo.active_bookmarks(tag.id)

    def _ensure_name_free(self, name: str, tag_id: str = None) -> None:
        existing = self.repo.get_by_name(name)
        if existing is not None and existing.id != tag_id:
            raise ConflictError("Tag name already exists", field="name")

    def create_tag(self, data: TagCreate) -> Tag:
        self._ensure_name_free(data.name)
        tag = self.repo.add(Tag(name=data.name))
        self.db.commit()
        self.db.refresh(tag)
        logger.info("Created tag", extra={"tag_id": tag.id})
        return tag

    def update_tag(self, tag_id: str, data: TagUpdate) -> Tag:
        tag = self.repo.get_by_id(tag_id)
        self._ensure_name_free(data.name, tag.id)
        tag.name = data.name
        tag.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(tag)
        logger.info("Renamed tag", extra={"tag_id": tag.id})
        return tag

    def delete_tag(self, tag_id: str) -> None:
        tag = self.repo.get_by_id(tag_id)
        self.db.delete(tag)
        self.db.commit()
        logger.info("Deleted tag", extra={"tag_id": tag_id})

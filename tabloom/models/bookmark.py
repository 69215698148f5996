"""Bookmark and BookmarkTag models."""

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from .mixins import SoftDeleteMixin, TimestampMixin, UtcDateTime, new_id, utcnow


class Bookmark(SoftDeleteMixin, TimestampMixin, Base):
    """A saved URL, optionally filed under one folder and tagged."""

    __tablename__ = "bookmarks"

    id = Column(String(36), primary_key=True, default=new_id)
    url = Column(Text, nullable=False)
    title = Column(String(500), nullable=True)
    note = Column(Text, nullable=True)
    folder_id = Column(String(36), ForeignKey("folders.id"), nullable=True, index=True)

    folder = relationship("Folder", back_populates="bookmarks")
    tag_links = relationship(
        "BookmarkTag",
        back_populates="bookmark",
        cascade="all, delete-orphan",
    )

    @property
    def tags(self):
        """Tags attached to this bookmark, ordered by name."""
        return sorted((link.tag for link in self.tag_links), key=lambda t: t.name)


class BookmarkTag(Base):
    """Join row; the composite key forbids assigning a tag twice."""

    __tablename__ = "bookmark_tags"

    bookmark_id = Column(
        String(36), ForeignKey("bookmarks.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = Column(
        String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    created_at = Column(UtcDateTime(), nullable=False, default=utcnow)

    bookmark = relationship("Bookmark", back_populates="tag_links")
    tag = relationship("Tag", back_populates="bookmark_links")

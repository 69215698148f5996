"""Folder model: a self-referencing hierarchy with soft delete."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base
from .mixins import SoftDeleteMixin, TimestampMixin, new_id


class Folder(SoftDeleteMixin, TimestampMixin, Base):
    """
    A folder in the bookmark hierarchy.

    Siblings are ordered by ``sort_order`` ascending. ``parent_id`` may
    point at a deleted folder: child folders are not cascaded on delete and
    the tree builder promotes them to root.
    """

    __tablename__ = "folders"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    parent_id = Column(String(36), ForeignKey("folders.id"), nullable=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)

    parent = relationship("Folder", remote_side=[id], back_populates="children")
    children = relationship("Folder", back_populates="parent")
    bookmarks = relationship("Bookmark", back_populates="folder")

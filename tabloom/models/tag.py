"""Tag model. Tags are hard-deleted; their BookmarkTag rows go with them."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from ..database import Base
from .mixins import TimestampMixin, new_id


class Tag(TimestampMixin, Base):
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=new_id)
    # Case-sensitive, globally unique
    name = Column(String(100), unique=True, nullable=False)

    bookmark_links = relationship(
        "BookmarkTag",
        back_populates="tag",
        cascade="all, delete-orphan",
    )

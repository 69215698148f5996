"""User accounts. Only the first registration succeeds, so in practice
there is a single admin."""

from sqlalchemy import Column, String, Text

from ..database import Base
from .mixins import TimestampMixin, new_id


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    # Stored lower-cased
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default="admin")

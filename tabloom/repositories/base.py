"""Base repository with shared get-by-ID patterns.

Subclasses specify ``model_class`` and ``not_found_error``. Models using
``SoftDeleteMixin`` are filtered to active rows in ``_base_query()``, so
``get_by_id`` treats a soft-deleted row as missing.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from ..database import Base
from ..exceptions import TabloomException
from ..models.mixins import SoftDeleteMixin

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Repositories only ``flush``; the calling service owns the commit.
    """

    model_class: Type[ModelT]
    not_found_error: Type[TabloomException]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        query = self.db.query(self.model_class)
        if issubclass(self.model_class, SoftDeleteMixin):
            query = query.filter(self.model_class.active())
        return query

    def get_by_id(self, entity_id: str) -> ModelT:
        """Get entity by primary key. Raises not_found_error if missing."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        return self._base_query().filter(self.model_class.id == entity_id).first()

    def get_including_deleted(self, entity_id: str) -> Optional[ModelT]:
        """Lookup that ignores the lifecycle filter."""
        return self.db.get(self.model_class, entity_id)

    def count(self) -> int:
        return self._base_query().count()

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

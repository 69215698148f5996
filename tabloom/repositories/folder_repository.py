"""Repository for folder database operations."""

from typing import Dict, List, Optional

from ..exceptions import FolderNotFoundError
from ..models import Folder
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    model_class = Folder
    not_found_error = FolderNotFoundError

    def list_active(self) -> List[Folder]:
        """Active folders in a deterministic order for the tree builder."""
        return self._base_query().order_by(
            Folder.sort_order, Folder.created_at, Folder.id
        ).all()

    def list_children(self, folder_id: str) -> List[Folder]:
        return self._base_query().filter(Folder.parent_id == folder_id).order_by(
            Folder.sort_order, Folder.created_at, Folder.id
        ).all()

    def parent_map(self) -> Dict[str, Optional[str]]:
        """``{id: parent_id}`` for every active folder."""
        rows = self.db.query(Folder.id, Folder.parent_id).filter(Folder.active()).all()
        return {row.id: row.parent_id for row in rows}

"""Service for folder reads and guarded folder mutations."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError, ValidationError
from ..models import Folder
from ..models.mixins import utcnow
from ..repositories import BookmarkRepository, FolderRepository
from ..schemas.folder import FolderCreate, FolderUpdate
from .folder_tree import FolderNode, build_folder_tree

logger = logging.getLogger(__name__)


class FolderService:
    """
    Folder CRUD that keeps the parent graph acyclic.

    Guards on every parent assignment: the parent must be an active
    folder, may not be the folder itself, and may not be one of its
    descendants. Deleting a folder soft-deletes the bookmarks filed in it
    within the same transaction; child folders are left in place.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FolderRepository(db)
        self.bookmark_repo = BookmarkRepository(db)

    def list_folders(self) -> List[Folder]:
        return self.repo.list_active()

    def get_tree(self) -> List[FolderNode]:
        return build_folder_tree(self.repo.list_active())

    def get_folder(self, folder_id: str) -> Folder:
        return self.repo.get_by_id(folder_id)

    def get_folder_detail(self, folder_id: str) -> dict:
        """Folder plus its parent, active children and active bookmarks."""
        folder = self.repo.get_by_id(folder_id)
        parent = self.repo.get_including_deleted(folder.parent_id) if folder.parent_id else None
        return {
            "folder": folder,
            "parent": parent,
            "children": self.repo.list_children(folder.id),
            "bookmarks": self.bookmark_repo.list_in_folder(folder.id),
        }

    def _require_active_parent(self, parent_id: str) -> Folder:
        parent = self.repo.get_by_id_optional(parent_id)
        if parent is None:
            raise ValidationError("Parent folder not found", field="parentId")
        return parent

    def _ensure_not_descendant(self, folder_id: str, new_parent_id: str) -> None:
        """Walk up from *new_parent_id*; reaching *folder_id* means a cycle."""
        parents = self.repo.parent_map()
        current: Optional[str] = new_parent_id
        # Bounded by the folder count, so stored cycles cannot loop forever
        for _ in range(len(parents) + 1):
            if current is None:
                return
            if current == folder_id:
                raise ValidationError(
                    "Folder cannot be moved into its own descendant", field="parentId"
                )
            current = parents.get(current)

    def create_folder(self, data: FolderCreate) -> Folder:
        if data.parent_id:
            self._require_active_parent(data.parent_id)

        folder = self.repo.add(Folder(
            name=data.name,
            parent_id=data.parent_id or None,
            sort_order=data.sort_order,
        ))
        self.db.commit()
        self.db.refresh(folder)
        logger.info("Created folder", extra={"folder_id": folder.id, "parent_id": folder.parent_id})
        return folder

    def update_folder(self, folder_id: str, data: FolderUpdate) -> Folder:
        folder = self.repo.get_by_id(folder_id)
        fields = data.model_fields_set

        if "parent_id" in fields:
            new_parent = data.parent_id or None
            if new_parent is not None:
                if new_parent == folder.id:
                    raise ValidationError("Folder cannot be its own parent", field="parentId")
                self._require_active_parent(new_parent)
                self._ensure_not_descendant(folder.id, new_parent)
            folder.parent_id = new_parent
        if "name" in fields:
            folder.name = data.name
        if "sort_order" in fields and data.sort_order is not None:
            folder.sort_order = data.sort_order

        folder.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(folder)
        logger.info("Updated folder", extra={"folder_id": folder.id})
        return folder

    def delete_folder(self, folder_id: str) -> int:
        """Soft-delete the folder and its bookmarks atomically.

        Returns:
            Number of bookmarks soft-deleted with it.
        """
        folder = self.repo.get_by_id(folder_id)
        try:
            folder.mark_deleted()
            folder.updated_at = utcnow()
            affected = self.bookmark_repo.soft_delete_in_folder(folder.id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Deleted folder",
            extra={"folder_id": folder_id, "bookmarks_deleted": affected},
        )
        return affected

"""Folder and folder tree schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import ApiModel
from .bookmark import BookmarkSummary


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Folder name is required")
    return v


class FolderCreate(ApiModel):
    name: str = Field(max_length=255)
    parent_id: Optional[str] = None
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class FolderUpdate(ApiModel):
    """Partial update; ``model_fields_set`` tells an explicit
    ``parentId: null`` (move to root) apart from an omitted field."""

    name: Optional[str] = Field(default=None, max_length=255)
    parent_id: Optional[str] = None
    sort_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Folder name cannot be null")
        return _clean_name(v)


class FolderResponse(ApiModel):
    id: str
    name: str
    parent_id: Optional[str] = None
    sort_order: int
    created_at: datetime
    updated_at: datetime


class FolderTreeNode(ApiModel):
    id: str
    name: str
    parent_id: Optional[str] = None
    sort_order: int
    created_at: datetime
    updated_at: datetime
    children: List["FolderTreeNode"] = Field(default_factory=list)


class FolderChildSummary(ApiModel):
    id: str
    name: str
    sort_order: int


class FolderParentSummary(ApiModel):
    id: str
    name: str


class FolderDetailResponse(FolderResponse):
    parent: Optional[FolderParentSummary] = None
    children: List[FolderChildSummary] = Field(default_factory=list)
    bookmarks: List[BookmarkSummary] = Field(default_factory=list)


class FolderListResponse(ApiModel):
    folders: List[FolderResponse]


class FolderTreeResponse(ApiModel):
    folders: List[FolderTreeNode]

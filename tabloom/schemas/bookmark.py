"""Bookmark schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import AnyUrl, Field, TypeAdapter, ValidationError as PydanticValidationError, field_validator

from .base import ApiModel

_url_adapter = TypeAdapter(AnyUrl)


def validate_absolute_url(value: str) -> str:
    """Reject anything that is not an absolute URL; keep the text as given."""
    value = value.strip()
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Invalid URL format") from None
    return value


class BookmarkCreate(ApiModel):
    url: str
    title: Optional[str] = None
    note: Optional[str] = None
    folder_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        return validate_absolute_url(v)


class BookmarkUpdate(ApiModel):
    """Partial update. Only fields present in the body are applied;
    ``tagIds`` replaces the whole tag set."""

    url: Optional[str] = None
    title: Optional[str] = None
    note: Optional[str] = None
    folder_id: Optional[str] = None
    tag_ids: Optional[List[str]] = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("URL cannot be null")
        return validate_absolute_url(v)


class FolderRef(ApiModel):
    id: str
    name: str


class TagRef(ApiModel):
    id: str
    name: str


class BookmarkResponse(ApiModel):
    id: str
    url: str
    title: Optional[str] = None
    note: Optional[str] = None
    folder_id: Optional[str] = None
    folder: Optional[FolderRef] = None
    tags: List[TagRef] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class BookmarkSummary(ApiModel):
    id: str
    url: str
    title: Optional[str] = None


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class BookmarkListResponse(ApiModel):
    bookmarks: List[BookmarkResponse]
    pagination: Pagination

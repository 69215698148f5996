"""Tag schemas."""

from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from .base import ApiModel
from .bookmark import BookmarkSummary


class TagCreate(ApiModel):
    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        # Case is significant; only surrounding whitespace is dropped
        v = v.strip()
        if not v:
            raise ValueError("Tag name is required")
        return v


class TagUpdate(TagCreate):
    pass


class TagResponse(ApiModel):
    id: str
    name: str
    bookmark_count: int = 0
    created_at: datetime
    updated_at: datetime


class TagDetailResponse(TagResponse):
    bookmarks: List[BookmarkSummary] = Field(default_factory=list)


class TagListResponse(ApiModel):
    tags: List[TagResponse]

"""Server-side filtered, paginated bookmark listing."""

import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Bookmark
from ..repositories import BookmarkRepository

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


@dataclass(frozen=True)
class BookmarkQuery:
    """Listing criteria. Out-of-range paging values are clamped, not rejected."""

    search: Optional[str] = None
    folder_id: Optional[str] = None
    tag_id: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(self, "limit", min(MAX_LIMIT, max(1, self.limit)))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class BookmarkPage:
    bookmarks: List[Bookmark]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


class BookmarkQueryService:
    """Active bookmarks only, most recently updated first.

    Folder and tag filters are exact matches; a folder filter does not
    include bookmarks of descendant folders.
    """

    def __init__(self, db: Session):
        self.repo = BookmarkRepository(db)

    def list_bookmarks(self, query: BookmarkQuery) -> BookmarkPage:
        rows, total = self.repo.search(
            search=query.search,
            folder_id=query.folder_id,
            tag_id=query.tag_id,
            offset=query.offset,
            limit=query.limit,
        )
        return BookmarkPage(bookmarks=rows, page=query.page, limit=query.limit, total=total)

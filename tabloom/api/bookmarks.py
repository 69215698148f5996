"""Bookmark API endpoints. All require authentication."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.bookmark import (
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkResponse,
    BookmarkUpdate,
    Pagination,
)
from ..services.bookmark_query_service import DEFAULT_LIMIT, BookmarkQuery, BookmarkQueryService
from ..services.bookmark_service import BookmarkService

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


@router.get("", response_model=BookmarkListResponse)
def list_bookmarks(
    search: Optional[str] = Query(None),
    folder_id: Optional[str] = Query(None, alias="folderId"),
    tag_id: Optional[str] = Query(None, alias="tagId"),
    page: int = Query(1),
    limit: int = Query(DEFAULT_LIMIT),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Filtered, paginated listing; out-of-range page/limit are clamped."""
    result = BookmarkQueryService(db).list_bookmarks(BookmarkQuery(
        search=search or None,
        folder_id=folder_id or None,
        tag_id=tag_id or None,
        page=page,
        limit=limit,
    ))
    return BookmarkListResponse(
        bookmarks=[BookmarkResponse.model_validate(b) for b in result.bookmarks],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
def get_bookmark(
    bookmark_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return BookmarkService(db).get_bookmark(bookmark_id)


@router.post("", response_model=BookmarkResponse, status_code=201)
def create_bookmark(
    data: BookmarkCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return BookmarkService(db).create_bookmark(data)


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
def update_bookmark(
    bookmark_id: str,
    data: BookmarkUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return BookmarkService(db).update_bookmark(bookmark_id, data)


@router.delete("/{bookmark_id}", status_code=204)
def delete_bookmark(
    bookmark_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    BookmarkService(db).delete_bookmark(bookmark_id)
    return Response(status_code=204)

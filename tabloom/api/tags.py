"""Tag API endpoints. All require authentication."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.bookmark import BookmarkSummary
from ..schemas.tag import TagCreate, TagDetailResponse, TagListResponse, TagResponse, TagUpdate
from ..services.tag_service import TagService

router = APIRouter(prefix="/api/tags", tags=["tags"])


def _tag_response(tag, count: int) -> TagResponse:
    return TagResponse(
        id=tag.id,
        name=tag.name,
        bookmark_count=count,
        created_at=tag.created_at,
        updated_at=tag.updated_at,
    )


@router.get("", response_model=TagListResponse)
def list_tags(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Tags ordered by name with the number of bookmarks linked to each."""
    return TagListResponse(
        tags=[_tag_response(tag, count) for tag, count in TagService(db).list_tags()]
    )


@router.get("/{tag_id}", response_model=TagDetailResponse)
def get_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    tag, count, bookmarks = TagService(db).get_tag_detail(tag_id)
    return TagDetailResponse(
        **_tag_response(tag, count).model_dump(),
        bookmarks=[BookmarkSummary.model_validate(b) for b in bookmarks],
    )


@router.post("", response_model=TagResponse, status_code=201)
def create_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return _tag_response(TagService(db).create_tag(data), 0)


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: str,
    data: TagUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    service = TagService(db)
    tag = service.update_tag(tag_id, data)
    return _tag_response(tag, service.repo.count_links(tag.id))


@router.delete("/{tag_id}", status_code=204)
def delete_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Hard delete; the tag's bookmark links are removed with it."""
    TagService(db).delete_tag(tag_id)
    return Response(status_code=204)

"""Folder API endpoints. All require authentication.

``GET /api/folders`` returns the nested tree by default and the flat list
with ``?flat=true``.
"""

from typing import List, Union

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.bookmark import BookmarkSummary
from ..schemas.folder import (
    FolderChildSummary,
    FolderCreate,
    FolderDetailResponse,
    FolderListResponse,
    FolderParentSummary,
    FolderResponse,
    FolderTreeNode,
    FolderTreeResponse,
    FolderUpdate,
)
from ..services.folder_service import FolderService
from ..services.folder_tree import FolderNode

router = APIRouter(prefix="/api/folders", tags=["folders"])


def _tree_to_schema(forest: List[FolderNode]) -> List[FolderTreeNode]:
    """Convert the forest bottom-up without recursion."""
    converted = {}
    stack = [(root, False) for root in reversed(forest)]
    while stack:
        node, children_done = stack.pop()
        if children_done:
            converted[node.id] = FolderTreeNode(
                id=node.id,
                name=node.name,
                parent_id=node.parent_id,
                sort_order=node.sort_order,
                created_at=node.created_at,
                updated_at=node.updated_at,
                children=[converted[child.id] for child in node.children],
            )
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in node.children)
    return [converted[root.id] for root in forest]


@router.get("", response_model=None)
def list_folders(
    flat: bool = Query(False),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
) -> Union[FolderListResponse, FolderTreeResponse]:
    service = FolderService(db)
    if flat:
        return FolderListResponse(
            folders=[FolderResponse.model_validate(f) for f in service.list_folders()]
        )
    return FolderTreeResponse(folders=_tree_to_schema(service.get_tree()))


@router.get("/{folder_id}", response_model=FolderDetailResponse)
def get_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    detail = FolderService(db).get_folder_detail(folder_id)
    folder = detail["folder"]
    parent = detail["parent"]
    return FolderDetailResponse(
        id=folder.id,
        name=folder.name,
        parent_id=folder.parent_id,
        sort_order=folder.sort_order,
        created_at=folder.created_at,
        updated_at=folder.updated_at,
        parent=FolderParentSummary.model_validate(parent) if parent is not None else None,
        children=[FolderChildSummary.model_validate(c) for c in detail["children"]],
        bookmarks=[BookmarkSummary.model_validate(b) for b in detail["bookmarks"]],
    )


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).create_folder(data)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return FolderService(db).update_folder(folder_id, data)


@router.delete("/{folder_id}", status_code=204)
def delete_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Soft-delete the folder and the bookmarks filed in it."""
    FolderService(db).delete_folder(folder_id)
    return Response(status_code=204)

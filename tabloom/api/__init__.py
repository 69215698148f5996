"""API routers."""

from .auth_routes import router as auth_router
from .bookmarks import router as bookmarks_router
from .export import router as export_router
from .folders import router as folders_router
from .tags import router as tags_router

__all__ = [
    "auth_router",
    "bookmarks_router",
    "export_router",
    "folders_router",
    "tags_router",
]

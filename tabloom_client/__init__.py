"""Client for the Tabloom bookmark API: HTTP client, snapshot filtering and an MCP server."""

from .api_client import TabloomClient
from .browser import BookmarkBrowser
from .filters import FilterCriteria, filter_bookmarks

__all__ = ["TabloomClient", "BookmarkBrowser", "FilterCriteria", "filter_bookmarks"]

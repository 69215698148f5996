"""Browsing state over the exported snapshot."""

import logging
from dataclasses import replace
from typing import Any, List, Optional

from .api_client import TabloomClient
from .filters import FilterCriteria, filter_bookmarks

logger = logging.getLogger(__name__)


class BookmarkBrowser:
    """
    Holds the fetched snapshot, loading/error state and the filter criteria.

    The snapshot is fetched once per ``refresh``; every criterion change is
    applied locally by ``filtered_bookmarks``, recomputed from the full list
    on each access.
    """

    def __init__(self, client: TabloomClient):
        self.client = client
        self.data: Optional[dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None
        self.criteria = FilterCriteria()

    async def refresh(self, fresh: bool = False) -> None:
        """Fetch the snapshot. On failure the previous data is kept."""
        self.loading = True
        self.error = None
        try:
            self.data = await self.client.fetch_export(fresh=fresh)
        except Exception as e:
            logger.warning("Failed to fetch bookmarks: %s", e)
            self.error = str(e) or "Failed to fetch bookmarks"
        finally:
            self.loading = False

    @property
    def search_query(self) -> str:
        return self.criteria.search

    @search_query.setter
    def search_query(self, value: str) -> None:
        self.criteria = replace(self.criteria, search=value)

    @property
    def selected_folder_id(self) -> Optional[str]:
        return self.criteria.folder_id

    @selected_folder_id.setter
    def selected_folder_id(self, value: Optional[str]) -> None:
        self.criteria = replace(self.criteria, folder_id=value)

    @property
    def selected_tags(self) -> List[str]:
        return list(self.criteria.tags)

    @selected_tags.setter
    def selected_tags(self, value: List[str]) -> None:
        self.criteria = replace(self.criteria, tags=tuple(value))

    def toggle_tag(self, tag: str) -> None:
        tags = self.criteria.tags
        if tag in tags:
            tags = tuple(t for t in tags if t != tag)
        else:
            tags = tags + (tag,)
        self.criteria = replace(self.criteria, tags=tags)

    @property
    def filtered_bookmarks(self) -> List[dict[str, Any]]:
        if not self.data:
            return []
        return filter_bookmarks(self.data.get("bookmarks", []), self.criteria)

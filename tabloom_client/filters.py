"""Filter snapshot bookmarks in memory.

Operates on the camelCase bookmark dicts of ``GET /api/export/json``.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class FilterCriteria:
    """Empty search, no folder and no tags each mean "no restriction"."""

    search: str = ""
    folder_id: Optional[str] = None
    tags: Tuple[str, ...] = ()


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


def matches(bookmark: dict[str, Any], criteria: FilterCriteria) -> bool:
    if criteria.search:
        needle = criteria.search.lower()
        if not (
            _contains(bookmark.get("title"), needle)
            or _contains(bookmark.get("url"), needle)
            or _contains(bookmark.get("note"), needle)
        ):
            return False

    if criteria.folder_id and bookmark.get("folderId") != criteria.folder_id:
        return False

    # Every selected tag is required
    if criteria.tags:
        bookmark_tags = set(bookmark.get("tags") or ())
        if not all(tag in bookmark_tags for tag in criteria.tags):
            return False

    return True


def filter_bookmarks(
    bookmarks: Iterable[dict[str, Any]], criteria: FilterCriteria
) -> List[dict[str, Any]]:
    """Bookmarks passing every criterion, in their original order."""
    return [b for b in bookmarks if matches(b, criteria)]

"""Seed sample folders, tags and bookmarks into an empty database.

Enabled with ``SEED_SAMPLE_DATA=true``. Idempotent: skips when any folder,
tag or bookmark already exists. Never creates users; the admin account
comes from the registration endpoint.
"""

import json
import logging
from pathlib import Path

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "seed_bookmarks.json"


def seed_sample_data(db: Session, fixture_path: Path = _FIXTURE_PATH) -> int:
    """Load the sample fixture if the database has no content.

    Returns:
        Number of bookmarks seeded (0 if skipped).
    """
    from ..models import Bookmark, BookmarkTag, Folder, Tag

    if db.query(Folder).count() or db.query(Tag).count() or db.query(Bookmark).count():
        logger.debug("Database already has content, skipping seed")
        return 0

    if not fixture_path.exists():
        logger.debug("No seed fixture at %s", fixture_path)
        return 0

    try:
        with open(fixture_path, encoding="utf-8") as f:
            fixture = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read seed fixture: %s", e)
        return 0

    for data in fixture.get("folders", []):
        db.add(Folder(
            id=data["id"],
            name=data["name"],
            parent_id=data.get("parentId"),
            sort_order=data.get("sortOrder", 0),
        ))

    tag_ids = {}
    for data in fixture.get("tags", []):
        db.add(Tag(id=data["id"], name=data["name"]))
        tag_ids[data["name"]] = data["id"]
    db.flush()

    bookmarks = fixture.get("bookmarks", [])
    for data in bookmarks:
        db.add(Bookmark(
            id=data["id"],
            url=data["url"],
            title=data.get("title"),
            note=data.get("note"),
            folder_id=data.get("folderId"),
        ))
    db.flush()

    for data in bookmarks:
        for name in data.get("tags", []):
            db.add(BookmarkTag(bookmark_id=data["id"], tag_id=tag_ids[name]))

    db.commit()
    logger.info("Seeded sample data", extra={"bookmarks": len(bookmarks)})
    return len(bookmarks)

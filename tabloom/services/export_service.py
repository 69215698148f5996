"""Export snapshot generation, caching and tracked export jobs.

The snapshot is a denormalized view of every active folder, bookmark and
tag. It is cached as a single JSON file (``<export_dir>/bookmarks.json``);
each persist replaces the previous one, last write wins.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..models.mixins import utcnow
from ..repositories import BookmarkRepository, FolderRepository, TagRepository
from ..schemas.export import ExportBookmark, ExportFolder, ExportSnapshot, ExportTag
from .export_job_service import ExportJobService
from .folder_tree import FolderNode, build_folder_tree, index_forest

logger = logging.getLogger(__name__)

EXPORT_FILE_NAME = "bookmarks.json"
SNAPSHOT_VERSION = "1.0"


def _to_export_folder(node: FolderNode) -> ExportFolder:
    """Convert a tree without recursion; depth is unbounded."""
    converted = {}
    stack = [(node, False)]
    while stack:
        current, children_done = stack.pop()
        if children_done:
            converted[current.id] = ExportFolder(
                id=current.id,
                name=current.name,
                parent_id=current.parent_id,
                sort_order=current.sort_order,
                children=[converted[child.id] for child in current.children],
                bookmarks=current.bookmarks,
            )
        else:
            stack.append((current, True))
            stack.extend((child, False) for child in current.children)
    return converted[node.id]


class ExportSnapshotService:
    """
    Generates, persists and loads the export snapshot.

    Constructed with an explicit session and export directory; holds no
    other state. ``generate_snapshot`` only reads, so concurrent calls are
    safe. Tracked runs record their outcome through ``ExportJobService``.
    """

    def __init__(self, db: Session, export_dir: Union[str, Path]):
        self.db = db
        self.export_dir = Path(export_dir)
        self.jobs = ExportJobService(db)

    @property
    def export_path(self) -> Path:
        return self.export_dir / EXPORT_FILE_NAME

    def generate_snapshot(self) -> ExportSnapshot:
        folders = FolderRepository(self.db).list_active()
        bookmarks = BookmarkRepository(self.db).list_active_for_export()
        tags = TagRepository(self.db).list_with_counts()

        forest = build_folder_tree(folders)
        nodes = index_forest(forest)

        export_bookmarks = []
        for bookmark in bookmarks:
            item = ExportBookmark(
                id=bookmark.id,
                url=bookmark.url,
                title=bookmark.title,
                note=bookmark.note,
                folder_id=bookmark.folder_id,
                folder_name=bookmark.folder.name if bookmark.folder is not None else None,
                tags=[tag.name for tag in bookmark.tags],
                created_at=bookmark.created_at,
                updated_at=bookmark.updated_at,
            )
            export_bookmarks.append(item)
            # Bookmarks of deleted or unknown folders stay in the flat list only
            if bookmark.folder_id in nodes:
                nodes[bookmark.folder_id].bookmarks.append(item)

        return ExportSnapshot(
            exported_at=utcnow(),
            version=SNAPSHOT_VERSION,
            folders=[_to_export_folder(root) for root in forest],
            bookmarks=export_bookmarks,
            tags=[
                ExportTag(id=tag.id, name=tag.name, bookmark_count=count)
                for tag, count in tags
            ],
        )

    def persist_snapshot(self, snapshot: ExportSnapshot) -> Path:
        """Write *snapshot* to the cache file, replacing it atomically."""
        self.export_dir.mkdir(parents=True, exist_ok=True)
        payload = snapshot.model_dump_json(by_alias=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.export_dir, prefix=".bookmarks-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.export_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info("Persisted export snapshot", extra={"path": str(self.export_path)})
        return self.export_path

    def load_cached_snapshot(self) -> Optional[ExportSnapshot]:
        """The cached snapshot, or None if missing, unreadable or malformed."""
        try:
            raw = self.export_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read export cache", extra={"path": str(self.export_path), "error": str(e)})
            return None

        try:
            return ExportSnapshot.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(
                "Ignoring malformed export cache",
                extra={"path": str(self.export_path), "error_count": e.error_count()},
            )
            return None

    def run_tracked_job(self) -> str:
        """Generate and persist under a job row; the job records the outcome.

        Runs synchronously. Failures are recorded on the job and re-raised.

        Returns:
            The job id.
        """
        job = self.jobs.start()
        job_id = job.id
        try:
            self.persist_snapshot(self.generate_snapshot())
        except Exception as e:
            self.db.rollback()
            logger.exception("Export job failed", extra={"job_id": job_id})
            self.jobs.fail(job_id, str(e) or type(e).__name__)
            raise

        self.jobs.succeed(job_id)
        return job_id

    def reconcile_stale_jobs(self, timeout_minutes: int) -> int:
        return self.jobs.reconcile_stale(timeout_minutes)

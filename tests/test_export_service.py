"""Tests for snapshot generation, caching and tracked export jobs."""

import json
from datetime import timedelta

import pytest

from tabloom.models import ExportJob, ExportJobStatus, Lifecycle
from tabloom.models.mixins import utcnow
from tabloom.services.export_job_service import ExportJobService
from tabloom.services.export_service import EXPORT_FILE_NAME, ExportSnapshotService
from tests.conftest import make_bookmark, make_folder, make_tag


@pytest.fixture()
def service(db, export_dir):
    return ExportSnapshotService(db, export_dir)


def content(snapshot):
    return snapshot.model_dump(by_alias=True, exclude={"exported_at"}, mode="json")


class TestGenerateSnapshot:

    def test_nested_example(self, db, service):
        f1 = make_folder(db, "Dev")
        f2 = make_folder(db, "JS", parent_id=f1.id)
        ts = make_tag(db, "TypeScript")
        b1 = make_bookmark(db, title="TS", folder_id=f2.id, tags=[ts])

        snapshot = service.generate_snapshot()

        assert snapshot.version == "1.0"
        assert [f.id for f in snapshot.folders] == [f1.id]
        assert snapshot.folders[0].bookmarks == []
        child = snapshot.folders[0].children[0]
        assert child.id == f2.id
        assert child.children == []
        assert [b.id for b in child.bookmarks] == [b1.id]
        assert [b.id for b in snapshot.bookmarks] == [b1.id]
        assert snapshot.bookmarks[0].folder_name == "JS"
        assert snapshot.bookmarks[0].tags == ["TypeScript"]
        assert [(t.name, t.bookmark_count) for t in snapshot.tags] == [("TypeScript", 1)]

    def test_unfiled_and_orphaned_bookmarks_only_in_flat_list(self, db, service):
        gone = make_folder(db, "Gone", lifecycle=Lifecycle.DELETED)
        unfiled = make_bookmark(db, title="unfiled")
        orphan = make_bookmark(db, title="orphan", folder_id=gone.id)

        snapshot = service.generate_snapshot()

        assert snapshot.folders == []
        assert {b.id for b in snapshot.bookmarks} == {unfiled.id, orphan.id}

    def test_excludes_deleted_folders_and_bookmarks(self, db, service):
        make_folder(db, "Gone", lifecycle=Lifecycle.DELETED)
        make_bookmark(db, lifecycle=Lifecycle.DELETED)
        snapshot = service.generate_snapshot()
        assert snapshot.folders == []
        assert snapshot.bookmarks == []

    def test_repeatable_without_writes(self, db, service):
        root = make_folder(db, "Root")
        make_folder(db, "A", parent_id=root.id)
        make_folder(db, "B", parent_id=root.id)
        tag = make_tag(db, "T")
        make_bookmark(db, folder_id=root.id, tags=[tag])
        make_bookmark(db)

        assert content(service.generate_snapshot()) == content(service.generate_snapshot())

    def test_camel_case_wire_format(self, db, service):
        make_bookmark(db, folder_id=make_folder(db, "F").id)
        data = service.generate_snapshot().model_dump(by_alias=True, mode="json")
        assert set(data) == {"exportedAt", "version", "folders", "bookmarks", "tags"}
        assert set(data["folders"][0]) == {"id", "name", "parentId", "sortOrder", "children", "bookmarks"}
        assert set(data["bookmarks"][0]) == {
            "id", "url", "title", "note", "folderId", "folderName", "tags", "createdAt", "updatedAt",
        }


class TestSnapshotCache:

    def test_load_missing_is_none(self, service):
        assert service.load_cached_snapshot() is None

    def test_persist_creates_directory_and_round_trips(self, db, service, export_dir):
        make_bookmark(db)
        snapshot = service.generate_snapshot()
        path = service.persist_snapshot(snapshot)

        assert path == export_dir / EXPORT_FILE_NAME
        assert json.loads(path.read_text(encoding="utf-8"))["version"] == "1.0"
        assert service.load_cached_snapshot() == snapshot
        assert [p.name for p in export_dir.iterdir()] == [EXPORT_FILE_NAME]

    def test_corrupt_file_is_none(self, service, export_dir):
        export_dir.mkdir(parents=True)
        (export_dir / EXPORT_FILE_NAME).write_text("{not json", encoding="utf-8")
        assert service.load_cached_snapshot() is None

    def test_schema_mismatch_is_none(self, service, export_dir):
        export_dir.mkdir(parents=True)
        (export_dir / EXPORT_FILE_NAME).write_text('{"hello": "world"}', encoding="utf-8")
        assert service.load_cached_snapshot() is None

    def test_last_write_wins(self, db, service):
        service.persist_snapshot(service.generate_snapshot())
        make_bookmark(db, title="late")
        service.persist_snapshot(service.generate_snapshot())
        assert [b.title for b in service.load_cached_snapshot().bookmarks] == ["late"]


class TestTrackedJob:

    def test_success_records_job_and_writes_file(self, db, service):
        job_id = service.run_tracked_job()
        job = ExportJobService(db).get_job(job_id)
        assert job.status == ExportJobStatus.SUCCESS.value
        assert job.finished_at is not None
        assert job.error_message is None
        assert service.export_path.exists()

    def test_failure_recorded_and_reraised(self, db, service, monkeypatch):
        def boom(snapshot):
            raise OSError("disk full")

        monkeypatch.setattr(service, "persist_snapshot", boom)
        with pytest.raises(OSError, match="disk full"):
            service.run_tracked_job()

        job = db.query(ExportJob).one()
        assert job.status == ExportJobStatus.FAILURE.value
        assert job.finished_at is not None
        assert job.error_message == "disk full"


class TestExportJobService:

    def test_terminal_job_cannot_change(self, db):
        jobs = ExportJobService(db)
        job = jobs.start()
        jobs.succeed(job.id)
        with pytest.raises(ValueError):
            jobs.fail(job.id, "late failure")

    def test_reconcile_marks_only_stale_running_jobs(self, db):
        stale = ExportJob(status="running", started_at=utcnow() - timedelta(hours=2))
        recent = ExportJob(status="running", started_at=utcnow())
        finished = ExportJob(
            status="success",
            started_at=utcnow() - timedelta(hours=3),
            finished_at=utcnow() - timedelta(hours=3),
        )
        db.add_all([stale, recent, finished])
        db.commit()

        assert ExportJobService(db).reconcile_stale(timeout_minutes=30) == 1

        db.expire_all()
        assert db.get(ExportJob, stale.id).status == "failure"
        assert db.get(ExportJob, stale.id).error_message
        assert db.get(ExportJob, recent.id).status == "running"
        assert db.get(ExportJob, finished.id).status == "success"

    def test_list_jobs_newest_first_and_capped(self, db):
        now = utcnow()
        for i in range(60):
            db.add(ExportJob(status="success", started_at=now - timedelta(minutes=i), finished_at=now))
        db.commit()

        jobs = ExportJobService(db).list_jobs(limit=500)
        assert len(jobs) == 50
        started = [j.started_at for j in jobs]
        assert started == sorted(started, reverse=True)
        assert len(ExportJobService(db).list_jobs()) == 10

"""Shared test fixtures for the Tabloom test suite.

Tests run against an in-memory SQLite database shared through a static
pool. Every table is emptied before each test, and the export directory
points at a per-test temporary path.
"""

import os
import tempfile

# Configure the app before any tabloom imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FORMAT"] = "text"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["EXPORT_DIR"] = tempfile.mkdtemp(prefix="tabloom-test-exports-")

import pytest
from fastapi.testclient import TestClient

from tabloom.core.auth import AuthProvider
from tabloom.core.config import settings
from tabloom.database import Base, SessionLocal, engine, get_db
from tabloom.main import app
from tabloom.models import Bookmark, BookmarkTag, Folder, Tag, User

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def _clean_tables():
    """Delete all rows before each test, children before parents."""
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture(autouse=True)
def export_dir(tmp_path, monkeypatch):
    """Per-test export directory, read by the export routes at call time."""
    path = tmp_path / "exports"
    monkeypatch.setattr(settings, "export_dir", str(path))
    return path


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_user(db) -> User:
    from tabloom.services.auth_service import register_admin

    return register_admin(db, "admin@tabloom.local", TEST_PASSWORD)


@pytest.fixture()
def auth_headers(admin_user) -> dict:
    """Bearer headers for the admin, signed with the configured secret."""
    provider = AuthProvider(secret=settings.jwt_secret_key)
    token = provider.issue(admin_user.id, admin_user.role)
    return {"Authorization": f"Bearer {token}"}


def make_folder(db, name: str = "Folder", parent_id=None, sort_order: int = 0, **overrides) -> Folder:
    folder = Folder(name=name, parent_id=parent_id, sort_order=sort_order, **overrides)
    db.add(folder)
    db.commit()
    db.refresh(folder)
    return folder


def make_tag(db, name: str) -> Tag:
    tag = Tag(name=name)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def make_bookmark(
    db,
    url: str = "https://example.com/",
    title: str = "Example",
    note=None,
    folder_id=None,
    tags=(),
    **overrides,
) -> Bookmark:
    bookmark = Bookmark(url=url, title=title, note=note, folder_id=folder_id, **overrides)
    db.add(bookmark)
    db.flush()
    for tag in tags:
        db.add(BookmarkTag(bookmark_id=bookmark.id, tag_id=tag.id))
    db.commit()
    db.refresh(bookmark)
    return bookmark

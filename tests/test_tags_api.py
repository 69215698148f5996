"""Tests for tag endpoints."""

from tabloom.models import BookmarkTag, Lifecycle, Tag
from tests.conftest import make_bookmark, make_tag


class TestTagCrud:

    def test_create_and_list(self, client, auth_headers):
        resp = client.post("/api/tags", json={"name": "React"}, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["bookmarkCount"] == 0

        tags = client.get("/api/tags", headers=auth_headers).json()["tags"]
        assert [t["name"] for t in tags] == ["React"]

    def test_duplicate_name_is_400_and_first_untouched(self, client, auth_headers):
        first = client.post("/api/tags", json={"name": "React"}, headers=auth_headers).json()
        resp = client.post("/api/tags", json={"name": "React"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "CONFLICT"
        assert resp.json()["message"] == "Tag name already exists"

        tags = client.get("/api/tags", headers=auth_headers).json()["tags"]
        assert [t["id"] for t in tags] == [first["id"]]

    def test_names_are_case_sensitive(self, client, auth_headers):
        assert client.post("/api/tags", json={"name": "css"}, headers=auth_headers).status_code == 201
        assert client.post("/api/tags", json={"name": "CSS"}, headers=auth_headers).status_code == 201

    def test_rename_to_taken_name_rejected(self, client, auth_headers, db):
        make_tag(db, "A")
        b = make_tag(db, "B")
        resp = client.put(f"/api/tags/{b.id}", json={"name": "A"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_rename_to_same_name_allowed(self, client, auth_headers, db):
        tag = make_tag(db, "Same")
        resp = client.put(f"/api/tags/{tag.id}", json={"name": "Same"}, headers=auth_headers)
        assert resp.status_code == 200

    def test_delete_removes_links(self, client, auth_headers, db):
        tag = make_tag(db, "Gone")
        bookmark = make_bookmark(db, tags=[tag])

        assert client.delete(f"/api/tags/{tag.id}", headers=auth_headers).status_code == 204
        db.expire_all()
        assert db.get(Tag, tag.id) is None
        assert db.query(BookmarkTag).filter(BookmarkTag.bookmark_id == bookmark.id).count() == 0
        assert client.get(f"/api/tags/{tag.id}", headers=auth_headers).status_code == 404


class TestTagCounts:

    def test_counts_include_soft_deleted_bookmarks(self, client, auth_headers, db):
        tag = make_tag(db, "TypeScript")
        make_bookmark(db, tags=[tag])
        make_bookmark(db, tags=[tag], lifecycle=Lifecycle.DELETED)

        tags = client.get("/api/tags", headers=auth_headers).json()["tags"]
        assert tags[0]["bookmarkCount"] == 2

        snapshot = client.get("/api/export/json?fresh=true").json()
        assert snapshot["tags"][0]["bookmarkCount"] == 2

    def test_detail_lists_active_bookmarks(self, client, auth_headers, db):
        tag = make_tag(db, "React")
        live = make_bookmark(db, title="live", tags=[tag])
        make_bookmark(db, title="dead", tags=[tag], lifecycle=Lifecycle.DELETED)

        body = client.get(f"/api/tags/{tag.id}", headers=auth_headers).json()
        assert body["bookmarkCount"] == 2
        assert [b["id"] for b in body["bookmarks"]] == [live.id]

"""Tests for folder endpoints."""

from tests.conftest import make_bookmark, make_folder


class TestFolderAuth:

    def test_requires_token(self, client):
        resp = client.get("/api/folders")
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"


class TestFolderTree:

    def test_tree_is_nested_and_sorted(self, client, auth_headers):
        dev = client.post("/api/folders", json={"name": "Dev", "sortOrder": 1}, headers=auth_headers).json()
        design = client.post("/api/folders", json={"name": "Design", "sortOrder": 0}, headers=auth_headers).json()
        js = client.post("/api/folders", json={"name": "JS", "parentId": dev["id"]}, headers=auth_headers).json()

        resp = client.get("/api/folders", headers=auth_headers)
        assert resp.status_code == 200
        roots = resp.json()["folders"]
        assert [f["id"] for f in roots] == [design["id"], dev["id"]]
        assert [c["id"] for c in roots[1]["children"]] == [js["id"]]
        assert roots[1]["children"][0]["parentId"] == dev["id"]

    def test_flat_listing(self, client, auth_headers, db):
        a = make_folder(db, "A")
        make_folder(db, "B", parent_id=a.id)
        resp = client.get("/api/folders?flat=true", headers=auth_headers)
        folders = resp.json()["folders"]
        assert len(folders) == 2
        assert "children" not in folders[0]
        assert {f["name"] for f in folders} == {"A", "B"}


class TestFolderCrud:

    def test_create_returns_201(self, client, auth_headers):
        resp = client.post("/api/folders", json={"name": "Reading"}, headers=auth_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Reading"
        assert body["parentId"] is None
        assert body["sortOrder"] == 0

    def test_empty_name_rejected(self, client, auth_headers):
        resp = client.post("/api/folders", json={"name": "  "}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"
        assert resp.json()["message"] == "Folder name is required"

    def test_create_under_deleted_parent_is_400(self, client, auth_headers, db):
        parent = make_folder(db, "Parent")
        client.delete(f"/api/folders/{parent.id}", headers=auth_headers)
        resp = client.post(
            "/api/folders", json={"name": "Child", "parentId": parent.id}, headers=auth_headers
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Parent folder not found"
        assert resp.json()["details"]["field"] == "parentId"

    def test_self_parent_is_400(self, client, auth_headers, db):
        folder = make_folder(db, "A")
        resp = client.put(
            f"/api/folders/{folder.id}", json={"parentId": folder.id}, headers=auth_headers
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Folder cannot be its own parent"

    def test_descendant_parent_is_400(self, client, auth_headers, db):
        a = make_folder(db, "A")
        b = make_folder(db, "B", parent_id=a.id)
        resp = client.put(f"/api/folders/{a.id}", json={"parentId": b.id}, headers=auth_headers)
        assert resp.status_code == 400

    def test_detail_includes_parent_children_and_bookmarks(self, client, auth_headers, db):
        parent = make_folder(db, "Parent")
        folder = make_folder(db, "Folder", parent_id=parent.id)
        make_folder(db, "Second", parent_id=folder.id, sort_order=2)
        make_folder(db, "First", parent_id=folder.id, sort_order=1)
        bookmark = make_bookmark(db, folder_id=folder.id, title="Inside")

        resp = client.get(f"/api/folders/{folder.id}", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["parent"] == {"id": parent.id, "name": "Parent"}
        assert [c["name"] for c in body["children"]] == ["First", "Second"]
        assert body["bookmarks"] == [{"id": bookmark.id, "url": bookmark.url, "title": "Inside"}]

    def test_unknown_folder_is_404(self, client, auth_headers):
        resp = client.get("/api/folders/does-not-exist", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["error"] == "FOLDER_NOT_FOUND"

    def test_delete_hides_folder_and_its_bookmarks(self, client, auth_headers, db):
        folder = make_folder(db, "Doomed")
        bookmark = make_bookmark(db, folder_id=folder.id)

        assert client.delete(f"/api/folders/{folder.id}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/folders/{folder.id}", headers=auth_headers).status_code == 404
        assert client.get(f"/api/bookmarks/{bookmark.id}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/folders/{folder.id}", headers=auth_headers).status_code == 404

"""Tests for root, health and request context headers."""

from tests.conftest import make_bookmark


class TestHealth:

    def test_health_ok(self, client, db):
        make_bookmark(db)
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["db"] == "ok"
        assert body["bookmark_count"] == 1
        assert "uptime_seconds" in body

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Tabloom API"


class TestRequestContext:

    def test_request_id_generated(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Request-ID"]
        assert resp.headers["X-Response-Time"].endswith("ms")

    def test_request_id_propagated(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"

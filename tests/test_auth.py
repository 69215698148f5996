"""Tests for tokens, registration, login and the auth dependency."""

from tabloom.core.auth import AuthProvider, get_auth_provider
from tabloom.core.token_factory import create_token, decode_token
from tabloom.main import app
from tabloom.models import User
from tests.conftest import TEST_PASSWORD


class TestTokenFactory:

    def test_create_and_decode(self):
        token = create_token("user-1", "admin", "test-secret")
        payload = decode_token(token, "test-secret")
        assert payload is not None
        assert payload.sub == "user-1"
        assert payload.role == "admin"

    def test_wrong_secret_returns_none(self):
        token = create_token("user-1", "admin", "correct-secret")
        assert decode_token(token, "wrong-secret") is None

    def test_expired_token_returns_none(self):
        token = create_token("user-1", "admin", "secret", expires_hours=-1)
        assert decode_token(token, "secret") is None

    def test_malformed_token_returns_none(self):
        assert decode_token("not.a.token", "secret") is None
        assert decode_token("", "secret") is None

    def test_tampered_claims_rejected(self):
        header, _, sig = create_token("user-1", "admin", "secret").split(".")
        other_claims = create_token("user-2", "admin", "secret").split(".")[1]
        assert decode_token(f"{header}.{other_claims}.{sig}", "secret") is None


class TestRegister:

    def test_first_registration_succeeds(self, client):
        resp = client.post("/api/auth/register", json={"email": "Admin@Example.com", "password": "secret1"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["user"]["email"] == "admin@example.com"
        assert body["user"]["role"] == "admin"
        assert body["token"]

    def test_second_registration_forbidden(self, client, db):
        client.post("/api/auth/register", json={"email": "a@example.com", "password": "secret1"})
        resp = client.post("/api/auth/register", json={"email": "b@example.com", "password": "secret2"})
        assert resp.status_code == 403
        assert resp.json()["error"] == "FORBIDDEN"
        assert db.query(User).count() == 1

    def test_short_password_rejected(self, client):
        resp = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Password must be at least 6 characters"

    def test_invalid_email_rejected(self, client):
        resp = client.post("/api/auth/register", json={"email": "nope", "password": "secret1"})
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "email"


class TestLogin:

    def test_login_returns_usable_token(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": admin_user.email, "password": TEST_PASSWORD})
        assert resp.status_code == 200
        token = resp.json()["token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["user"]["id"] == admin_user.id

    def test_wrong_password_is_401(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": admin_user.email, "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    def test_unknown_email_is_401(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 401


class TestRequireAuth:

    def test_missing_token_is_401(self, client):
        assert client.get("/api/tags").status_code == 401

    def test_garbage_token_is_401(self, client):
        resp = client.get("/api/tags", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_token_for_unknown_user_is_401(self, client):
        token = AuthProvider(secret="test-secret").issue("no-such-user", "admin")
        resp = client.get("/api/tags", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_provider_can_be_overridden(self, client, admin_user):
        provider = AuthProvider(secret="another-secret")
        app.dependency_overrides[get_auth_provider] = lambda: provider
        token = provider.issue(admin_user.id, admin_user.role)
        resp = client.get("/api/tags", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    def test_public_export_needs_no_token(self, client):
        assert client.get("/api/export/json").status_code == 200

"""
User management tests.

Verifies:
- Only admins can list, create and delete users (403 otherwise)
- Usernames are unique
- An admin cannot delete their own account or the primary admin
"""

import pytest

from conftest import USER_PASSWORD, auth_headers, get_auth_token
from leasedesk.errors import ConflictError, ForbiddenError
from leasedesk.models import ActivityLogEntry, User
from leasedesk.validation import UserInput

ROLES = ("admin", "manager", "executive", "agent", "user")


class TestUserStore:
    def test_create(self, services, db_session, seeded):
        user = services.users.create(UserInput(username="carol", password="secret1", role="agent"), actor="admin")
        assert user.id is not None
        assert services.passwords.verify(user.password_hash, "secret1")
        entry = db_session.query(ActivityLogEntry).filter_by(action="Create User").one()
        assert entry.username == "admin"

    def test_duplicate_username(self, services, seeded):
        with pytest.raises(ConflictError):
            services.users.create(UserInput(username="admin", password="secret1", role="user"))

    def test_usernames_are_case_sensitive(self, services, seeded):
        services.users.create(UserInput(username="Admin", password="secret1", role="user"))
        assert services.users.find_by_username("Admin").username == "Admin"

    def test_race_is_caught_by_constraint(self, services, db_session, seeded, monkeypatch):
        monkeypatch.setattr(services.users, "find_by_username", lambda *a, **k: None)
        with pytest.raises(ConflictError):
            services.users.create(UserInput(username="admin", password="secret1", role="user"))
        assert db_session.query(User).filter_by(username="admin").count() == 1

    def test_cannot_delete_self(self, services, db_session, second_admin):
        with pytest.raises(ForbiddenError):
            services.users.delete(second_admin.id, actor=second_admin)
        assert db_session.get(User, second_admin.id) is not None

    def test_cannot_delete_primary_admin(self, services, admin, second_admin):
        with pytest.raises(ForbiddenError):
            services.users.delete(admin.id, actor=second_admin)

    def test_seed_is_idempotent(self, app, services, db_session, seeded):
        assert services.users.ensure_primary_admin("other") is None
        assert db_session.query(User).count() == 1


class TestUserRoutes:
    def test_list_hides_credentials(self, client, admin_headers):
        resp = client.get("/api/users", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["count"] == 1
        assert "password_hash" not in resp.json["users"][0]

    def test_create(self, client, admin_headers):
        resp = client.post(
            "/api/users",
            json={"username": "dave", "password": "secret1", "role": "manager"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json["user"]["role"] == "manager"
        assert get_auth_token(client, "dave", "secret1")

    def test_create_duplicate(self, client, admin_headers):
        resp = client.post("/api/users", json={"username": "admin", "password": "secret1"}, headers=admin_headers)
        assert resp.status_code == 409

    def test_create_invalid_role(self, client, admin_headers):
        resp = client.post(
            "/api/users",
            json={"username": "eve", "password": "secret1", "role": "root"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_self_delete_forbidden(self, client, db_session, admin, admin_headers):
        resp = client.delete(f"/api/users/{admin.id}", headers=admin_headers)
        assert resp.status_code == 403
        db_session.expire_all()
        assert db_session.get(User, admin.id) is not None

    def test_primary_admin_protected(self, client, admin, second_admin):
        headers = auth_headers(get_auth_token(client, "bob", USER_PASSWORD))
        resp = client.delete(f"/api/users/{admin.id}", headers=headers)
        assert resp.status_code == 403

    def test_delete_other(self, client, db_session, admin_headers, regular_user):
        user_id = regular_user.id
        resp = client.delete(f"/api/users/{user_id}", headers=admin_headers)
        assert resp.status_code == 200
        db_session.expire_all()
        assert db_session.query(User).filter_by(id=user_id).first() is None

    def test_delete_missing(self, client, admin_headers):
        assert client.delete("/api/users/9999", headers=admin_headers).status_code == 404

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/users"),
            ("POST", "/api/users"),
            ("DELETE", "/api/users/1"),
        ],
    )
    def test_non_admin_forbidden(self, client, user_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=user_headers)
        assert resp.status_code == 403
        assert resp.json == {"error": "Forbidden: Admin access required"}

"""Health checks, CORS and CLI tests."""

import json

from conftest import ADMIN_PASSWORD, agreement_payload
from leasedesk.models import Agreement, User
from leasedesk.validation import AgreementInput


class TestHealthChecks:
    def test_health(self, client, db_session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["checks"]["database"]["status"] == "healthy"

    def test_connectivity(self, client):
        resp = client.get("/api/test")
        assert resp.status_code == 200
        assert resp.json["message"] == "Server is running"


class TestCors:
    def test_allowed_origin(self, client):
        resp = client.get("/api/test", headers={"Origin": "http://localhost:5173"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_other_origin(self, client):
        resp = client.get("/api/test", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers


class TestCli:
    def test_system_init_is_idempotent(self, app, db_session):
        runner = app.test_cli_runner()
        first = runner.invoke(args=["system", "init"])
        assert first.exit_code == 0, first.output
        assert "Created primary admin" in first.output

        second = runner.invoke(args=["system", "init"])
        assert second.exit_code == 0, second.output
        assert db_session.query(User).count() == 1

    def test_users_create_and_list(self, app, seeded):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "create", "--username", "frank", "--password", "secret1", "--role", "agent"])
        assert result.exit_code == 0, result.output
        listing = runner.invoke(args=["users", "list"])
        assert "frank" in listing.output

    def test_users_create_duplicate(self, app, seeded):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "create", "--username", "admin", "--password", "secret1"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_backup_export_and_restore(self, app, services, db_session, seeded, tmp_path):
        services.agreements.create(AgreementInput.from_payload(agreement_payload()))
        path = tmp_path / "backup.json"
        runner = app.test_cli_runner()

        exported = runner.invoke(args=["backup", "export", str(path)])
        assert exported.exit_code == 0, exported.output
        snapshot = json.loads(path.read_text(encoding="utf-8"))
        assert snapshot["users"][0]["password"] == "[REDACTED]"
        assert ADMIN_PASSWORD not in path.read_text(encoding="utf-8")

        restored = runner.invoke(args=["backup", "restore", str(path), "--yes"])
        assert restored.exit_code == 0, restored.output
        db_session.expire_all()
        assert db_session.query(Agreement).count() == 1

"""
Activity log tests.

Verifies:
- Entries are appended for authentication and record changes
- A failing log write never aborts the primary operation
- Listing is admin-only, newest first, and capped
"""

from sqlalchemy.exc import OperationalError

from conftest import agreement_payload
from leasedesk.models import ActivityLogEntry, Agreement
from leasedesk.services.activity_log_service import ActivityLog, MAX_LIMIT
from leasedesk.validation import AgreementInput


class _BrokenSavepointSession:
    """Stand-in session whose savepoint cannot be opened."""

    def begin_nested(self):
        raise OperationalError("SAVEPOINT sa_savepoint_1", {}, Exception("database is locked"))


class TestActivityLog:
    def test_record(self, services, db_session, seeded):
        entry = services.activity.record("Login", username="admin", ip_address="127.0.0.1")
        db_session.commit()
        assert entry.id is not None
        assert db_session.query(ActivityLogEntry).count() == 1

    def test_sink_failure_is_absorbed(self):
        log = ActivityLog(_BrokenSavepointSession())
        assert log.record("Login", username="admin") is None

    def test_sink_failure_does_not_abort_operation(self, services, db_session, seeded, monkeypatch):
        broken = ActivityLog(_BrokenSavepointSession())
        monkeypatch.setattr(services.agreements, "activity", broken)
        agreement = services.agreements.create(AgreementInput.from_payload(agreement_payload()), actor="admin")
        assert agreement.id is not None
        assert db_session.query(Agreement).count() == 1
        assert db_session.query(ActivityLogEntry).count() == 0

    def test_list_recent_newest_first(self, services, db_session, seeded):
        for i in range(5):
            services.activity.record(f"Action {i}", username="admin")
        db_session.commit()
        entries = services.activity.list_recent(3)
        assert [e.action for e in entries] == ["Action 4", "Action 3", "Action 2"]

    def test_list_is_capped(self, services, seeded):
        assert len(services.activity.list_recent(10_000)) == 0
        assert MAX_LIMIT == 500


class TestActivityRoutes:
    def test_admin_can_list(self, client, admin_headers):
        resp = client.get("/api/activity-logs?limit=10", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json["logs"][0]["action"] == "Login"

    def test_non_admin_forbidden(self, client, user_headers):
        assert client.get("/api/activity-logs", headers=user_headers).status_code == 403

from __future__ import annotations

from ..extensions import db
from leasedesk.time_utils import to_utc_z, utcnow


class ActivityLogEntry(db.Model):
    """
    Audit trail of logins, credential changes and record mutations.

    IMMUTABLE: Never update or delete. Append-only for audit integrity.
    username is stored as text rather than a foreign key so entries outlive
    the user they name.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        db.Index("ix_activity_logs_created_at", "created_at"),
        db.Index("ix_activity_logs_username", "username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=True)
    action = db.Column(db.String(64), nullable=False)  # Login, Create Agreement, ...
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "action": self.action,
            "details": self.details,
            "ip_address": self.ip_address,
            "created_at": to_utc_z(self.created_at),
        }

from __future__ import annotations

from ..extensions import db
from leasedesk.time_utils import to_utc_z, utcnow

USER_STATUS_ACTIVE = "active"
USER_STATUS_INACTIVE = "inactive"


class User(db.Model):
    """
    User accounts for authentication and attribution.

    Username is unique and case-sensitive. The stored credential is a bcrypt
    hash, or a legacy plain/base64 form that is upgraded on the next
    successful login. Delete is physical; there is no soft delete.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False)

    # Never serialized. See services/passwords.py for the accepted forms.
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(32), nullable=False, default="user")
    status = db.Column(db.String(16), nullable=False, default=USER_STATUS_ACTIVE)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    last_login_at = db.Column(db.DateTime, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == USER_STATUS_ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "last_login_at": to_utc_z(self.last_login_at) if self.last_login_at else None,
        }

from __future__ import annotations

from ..extensions import db
from leasedesk.time_utils import to_utc_z

SETTINGS_ROW_ID = 1


class SystemSettings(db.Model):
    """
    Operational defaults. Exactly one row (id=1), created at first run and
    updated in place; never deleted.
    """
    __tablename__ = "system_settings"
    __table_args__ = (
        db.CheckConstraint(f"id = {SETTINGS_ROW_ID}", name="singleton"),
    )

    id = db.Column(db.Integer, primary_key=True, default=SETTINGS_ROW_ID)

    default_cc_email = db.Column(db.String(255), nullable=True)
    company_name = db.Column(db.String(200), nullable=True)
    reminder_days_before = db.Column(db.Integer, nullable=False, default=30)
    date_format = db.Column(db.String(32), nullable=False, default="DD-MM-YYYY")
    currency_symbol = db.Column(db.String(8), nullable=False, default="₹")
    session_timeout = db.Column(db.Integer, nullable=False, default=60)  # minutes
    max_records_per_page = db.Column(db.Integer, nullable=False, default=25)

    updated_by = db.Column(db.String(64), nullable=True)
    updated_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self) -> dict:
        return {
            "default_cc_email": self.default_cc_email,
            "company_name": self.company_name,
            "reminder_days_before": self.reminder_days_before,
            "date_format": self.date_format,
            "currency_symbol": self.currency_symbol,
            "session_timeout": self.session_timeout,
            "max_records_per_page": self.max_records_per_page,
            "updated_by": self.updated_by,
            "updated_at": to_utc_z(self.updated_at),
        }

# Overview: Service-layer operations for the system settings singleton.

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageFailure
from ..models import SystemSettings, SETTINGS_ROW_ID
from ..validation import SettingsInput
from .activity_log_service import ActivityLog
from leasedesk.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "default_cc_email": None,
    "company_name": "LeaseDesk",
    "reminder_days_before": 30,
    "date_format": "DD-MM-YYYY",
    "currency_symbol": "₹",
    "session_timeout": 60,
    "max_records_per_page": 25,
}


class SettingsService:
    """Reads and updates the single SystemSettings row (id=1)."""

    def __init__(self, session, activity: ActivityLog):
        self.session = session
        self.activity = activity

    def get(self) -> SystemSettings:
        """Return the settings row, creating it with defaults on first use."""
        settings = self.session.get(SystemSettings, SETTINGS_ROW_ID)
        if settings is None:
            settings = self.ensure_seeded()
        return settings

    def ensure_seeded(self, *, commit: bool = True) -> SystemSettings:
        """With commit=False the row is only flushed into the caller's transaction."""
        settings = self.session.get(SystemSettings, SETTINGS_ROW_ID)
        if settings is not None:
            return settings
        settings = SystemSettings(id=SETTINGS_ROW_ID, **DEFAULT_SETTINGS)
        self.session.add(settings)
        if not commit:
            self.session.flush()
            return settings
        self._commit()
        logger.info("Seeded default system settings")
        return settings

    def apply(self, values: dict, *, actor: str | None = None) -> SystemSettings:
        """Overwrite the given keys in place. No commit."""
        settings = self.get()
        for key, value in values.items():
            if key in DEFAULT_SETTINGS:
                setattr(settings, key, value)
        settings.updated_by = actor
        settings.updated_at = utcnow()
        return settings

    def update(self, data: SettingsInput, *, actor: str | None = None, ip_address: str | None = None) -> SystemSettings:
        settings = self.apply(data.values, actor=actor)
        self.activity.record(
            "Update Settings",
            username=actor,
            details=", ".join(sorted(data.values)) or None,
            ip_address=ip_address,
        )
        self._commit()
        return settings

    def _current(self, key: str):
        """Read one value without seeding the row."""
        settings = self.session.get(SystemSettings, SETTINGS_ROW_ID)
        value = getattr(settings, key, None) if settings is not None else None
        return value or DEFAULT_SETTINGS[key]

    def page_size(self) -> int:
        return int(self._current("max_records_per_page"))

    def reminder_days(self) -> int:
        return int(self._current("reminder_days_before"))

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Settings commit failed")
            raise StorageFailure()

# Overview: Service-layer operations for the activity log; append-only audit sink.

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageFailure
from ..models import ActivityLogEntry
from leasedesk.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 500


class ActivityLog:
    """
    Append-only audit sink.

    Entries are written inside a savepoint of the caller's transaction, so
    they commit together with the operation they describe. A failed write is
    logged and dropped; it never aborts the primary operation.
    """

    def __init__(self, session):
        self.session = session

    def record(
        self,
        action: str,
        *,
        username: str | None = None,
        details: str | None = None,
        ip_address: str | None = None,
    ) -> ActivityLogEntry | None:
        entry = ActivityLogEntry(
            username=username,
            action=action,
            details=details,
            ip_address=ip_address,
            created_at=utcnow(),
        )
        try:
            with self.session.begin_nested():
                self.session.add(entry)
        except SQLAlchemyError:
            logger.warning("Activity log write failed (action=%s)", action, exc_info=True)
            return None
        return entry

    def list_recent(self, limit: int | None = None) -> list[ActivityLogEntry]:
        limit = min(max(limit or DEFAULT_LIMIT, 1), MAX_LIMIT)
        try:
            return (
                self.session.query(ActivityLogEntry)
                .order_by(ActivityLogEntry.created_at.desc(), ActivityLogEntry.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Failed to read activity log")
            raise StorageFailure()

# Overview: Service-layer operations for agreements; encapsulates business logic and database work.

"""
Agreement store.

- token_number is unique. The service checks first for a clean error
  message, and the database constraint catches the race between two
  concurrent creates; both surface as ConflictError.
- Derived amounts are recomputed from the submitted inputs on every create
  and update. Client-supplied derived values never reach the row.
- Every create/update/delete appends an activity log entry naming the
  token number.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, NotFoundError, StorageFailure
from ..models import Agreement
from ..validation import AgreementInput
from .activity_log_service import ActivityLog
from .financials import derived_fields
from leasedesk.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100


def apply_agreement_input(agreement: Agreement, data: AgreementInput) -> None:
    """Overwrite every input column and recompute every derived column."""
    for key, value in data.columns().items():
        setattr(agreement, key, value)
    for key, value in derived_fields(data.amounts).items():
        setattr(agreement, key, value)


class AgreementStore:
    def __init__(self, session, activity: ActivityLog):
        self.session = session
        self.activity = activity

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _ordered(self):
        return self.session.query(Agreement).order_by(
            Agreement.created_at.desc(), Agreement.id.desc()
        )

    def list_agreements(self, page: int | None = None, per_page: int | None = None) -> dict:
        """
        Newest first. Without `page` every row is returned; otherwise the
        result carries pagination metadata.
        """
        base_query = self._ordered()

        if page is None:
            agreements = base_query.all()
            return {
                "agreements": [a.to_dict() for a in agreements],
                "count": len(agreements),
            }

        per_page = min(per_page or DEFAULT_PER_PAGE, MAX_PER_PAGE)
        page = max(page, 1)

        total = base_query.count()
        total_pages = (total + per_page - 1) // per_page if total > 0 else 1

        agreements = base_query.offset((page - 1) * per_page).limit(per_page).all()

        return {
            "agreements": [a.to_dict() for a in agreements],
            "count": len(agreements),
            "pagination": {
                "page": page,
                "per_page": per_page,
                "total": total,
                "total_pages": total_pages,
                "has_next": page < total_pages,
                "has_prev": page > 1,
            },
        }

    def all(self) -> list[Agreement]:
        return self._ordered().all()

    def get(self, agreement_id: int) -> Agreement:
        agreement = self.session.get(Agreement, agreement_id)
        if not agreement:
            raise NotFoundError("Agreement not found")
        return agreement

    def token_taken(self, token_number: str, exclude_id: int | None = None) -> bool:
        query = self.session.query(Agreement.id).filter(Agreement.token_number == token_number)
        if exclude_id is not None:
            query = query.filter(Agreement.id != exclude_id)
        return query.first() is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: AgreementInput, *, actor: str | None = None, ip_address: str | None = None) -> Agreement:
        if self.token_taken(data.token_number):
            raise ConflictError("Token number already exists")

        now = utcnow()
        agreement = Agreement(created_at=now, updated_at=now)
        apply_agreement_input(agreement, data)
        self.insert(agreement)

        self.activity.record(
            "Create Agreement",
            username=actor,
            details=f"Token: {agreement.token_number}",
            ip_address=ip_address,
        )
        self._commit()
        return agreement

    def insert(self, agreement: Agreement) -> Agreement:
        """Add and flush; the unique constraint maps to ConflictError. No commit."""
        self.session.add(agreement)
        self._flush()
        return agreement

    def update(
        self,
        agreement_id: int,
        data: AgreementInput,
        *,
        actor: str | None = None,
        ip_address: str | None = None,
    ) -> Agreement:
        agreement = self.get(agreement_id)
        if self.token_taken(data.token_number, exclude_id=agreement.id):
            raise ConflictError("Token number already exists")

        apply_agreement_input(agreement, data)
        agreement.updated_at = utcnow()
        self._flush()

        self.activity.record(
            "Update Agreement",
            username=actor,
            details=f"Token: {agreement.token_number}",
            ip_address=ip_address,
        )
        self._commit()
        return agreement

    def delete(self, agreement_id: int, *, actor: str | None = None, ip_address: str | None = None) -> None:
        agreement = self.get(agreement_id)
        token_number = agreement.token_number
        self.session.delete(agreement)
        self._flush()

        self.activity.record(
            "Delete Agreement",
            username=actor,
            details=f"Token: {token_number}",
            ip_address=ip_address,
        )
        self._commit()

    def clear(self) -> int:
        """Delete every agreement (restore only). No commit."""
        try:
            return self.session.query(Agreement).delete(synchronize_session=False)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to clear agreements")
            raise StorageFailure()

    # ------------------------------------------------------------------

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Token number already exists")
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Agreement store flush failed")
            raise StorageFailure()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Token number already exists")
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Agreement store commit failed")
            raise StorageFailure()

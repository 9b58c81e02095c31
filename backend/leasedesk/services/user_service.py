# Overview: Service-layer operations for users; encapsulates business logic and database work.

"""
User store.

Usernames are unique (case-sensitive) via a database constraint, so two
concurrent creates of the same username yield one row and one
ConflictError. Every change to authentication state is written to the
activity log in the same transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, ForbiddenError, NotFoundError, StorageFailure, UnauthorizedError
from ..models import User, USER_STATUS_ACTIVE
from ..validation import UserInput
from .activity_log_service import ActivityLog
from .passwords import PasswordHasher
from leasedesk.time_utils import utcnow

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(
        self,
        session,
        passwords: PasswordHasher,
        activity: ActivityLog,
        *,
        primary_admin_username: str,
    ):
        self.session = session
        self.passwords = passwords
        self.activity = activity
        self.primary_admin_username = primary_admin_username

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_users(self) -> list[User]:
        return self.session.query(User).order_by(User.username.asc()).all()

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def get_by_username(self, username: str) -> User:
        user = self.find_by_username(username)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def is_protected(self, user: User) -> bool:
        return user.username == self.primary_admin_username

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: UserInput, *, actor: str | None = None, ip_address: str | None = None) -> User:
        """Create a user. ConflictError if the username exists."""
        self.passwords.validate_new_password(data.password)
        if self.find_by_username(data.username):
            raise ConflictError("Username already exists")

        user = User(
            username=data.username,
            password_hash=self.passwords.hash(data.password),
            role=data.role,
            status=USER_STATUS_ACTIVE,
            created_at=utcnow(),
        )
        self.insert(user)
        self.activity.record(
            "Create User",
            username=actor,
            details=f"Created user {user.username} ({user.role})",
            ip_address=ip_address,
        )
        self.commit()
        return user

    def insert(self, user: User) -> User:
        """
        Add and flush a prepared row, mapping the unique constraint to
        ConflictError. Does not commit (used by restore as well).
        """
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Username already exists")
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("User insert failed")
            raise StorageFailure()
        return user

    def delete(self, user_id: int, *, actor: User, ip_address: str | None = None) -> None:
        """
        Physically remove a user.

        Forbidden for the caller's own account and for the primary admin.
        """
        user = self.get(user_id)
        if user.id == actor.id:
            raise ForbiddenError("You cannot delete your own account")
        if self.is_protected(user):
            raise ForbiddenError("The primary admin account cannot be deleted")

        username = user.username
        self.session.delete(user)
        self._flush()
        self.activity.record(
            "Delete User",
            username=actor.username,
            details=f"Deleted user {username}",
            ip_address=ip_address,
        )
        self.commit()

    def update_credential(
        self,
        user: User,
        current_password: str,
        new_password: str,
        *,
        ip_address: str | None = None,
    ) -> None:
        """Replace the credential after verifying the current one."""
        if not self.passwords.verify(user.password_hash, current_password):
            raise UnauthorizedError("Invalid current password")
        self.passwords.validate_new_password(new_password)

        user.password_hash = self.passwords.hash(new_password)
        self._flush()
        self.activity.record(
            "Change Password",
            username=user.username,
            details="Password changed",
            ip_address=ip_address,
        )
        self.commit()

    def upgrade_credential(self, user: User, password: str) -> None:
        """Rewrite a legacy stored form as a current-scheme hash (no commit)."""
        user.password_hash = self.passwords.hash(password)
        self._flush()

    def mark_login(self, user: User) -> None:
        user.last_login_at = utcnow()
        self._flush()

    def ensure_primary_admin(self, password: str) -> User | None:
        """Seed the primary admin when the user table is empty."""
        if self.session.query(User.id).first() is not None:
            return None
        user = User(
            username=self.primary_admin_username,
            password_hash=self.passwords.hash(password),
            role="admin",
            status=USER_STATUS_ACTIVE,
            created_at=utcnow(),
        )
        self.insert(user)
        self.commit()
        logger.info("Seeded primary admin user %s", user.username)
        return user

    # ------------------------------------------------------------------

    def _flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("User store flush failed")
            raise StorageFailure()

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("User store commit failed")
            raise StorageFailure()

# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Login states:
- unknown user / inactive user / no credential match -> UnauthorizedError
- current-scheme match                                -> accept
- legacy match (plain or base64)                      -> accept, and the stored
  credential is rewritten to bcrypt before the response is returned

All rejection paths raise the same UnauthorizedError("Invalid credentials")
so a caller cannot tell an unknown username from a wrong password. The
unknown-user path still spends one bcrypt verification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..errors import UnauthorizedError
from ..models import User
from ..validation import LoginInput, PasswordChangeInput
from .activity_log_service import ActivityLog
from .passwords import CredentialMatch, PasswordHasher
from .session_service import SessionTokens
from .user_service import UserStore
from leasedesk.time_utils import to_utc_z

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str
    expires_at: datetime
    migrated: bool = False

    def to_dict(self) -> dict:
        return {
            "message": "Login successful",
            "token": self.token,
            "expires_at": to_utc_z(self.expires_at),
            "user": {
                "id": self.user.id,
                "username": self.user.username,
                "role": self.user.role,
                "token": self.token,
            },
            "username": self.user.username,
            "role": self.user.role,
        }


class AuthService:
    def __init__(
        self,
        users: UserStore,
        passwords: PasswordHasher,
        tokens: SessionTokens,
        activity: ActivityLog,
    ):
        self.users = users
        self.passwords = passwords
        self.tokens = tokens
        self.activity = activity

    def login(self, data: LoginInput, *, ip_address: str | None = None) -> LoginResult:
        user = self.users.find_by_username(data.username)
        if user is None or not user.is_active:
            self.passwords.burn(data.password)
            self._reject(data.username, ip_address)

        outcome = self.passwords.check(user.password_hash, data.password)
        if outcome is CredentialMatch.NONE:
            self._reject(data.username, ip_address)

        migrated = outcome is CredentialMatch.LEGACY
        if migrated:
            self.users.upgrade_credential(user, data.password)
            self.activity.record(
                "Credential Upgraded",
                username=user.username,
                details="Legacy password migrated to bcrypt",
                ip_address=ip_address,
            )
            logger.info("Migrated legacy credential for user id=%s", user.id)

        self.users.mark_login(user)
        self.activity.record("Login", username=user.username, ip_address=ip_address)
        self.users.commit()

        token, expires_at = self.tokens.issue(user)
        return LoginResult(user=user, token=token, expires_at=expires_at, migrated=migrated)

    def change_password(
        self,
        user: User,
        data: PasswordChangeInput,
        *,
        ip_address: str | None = None,
    ) -> None:
        self.users.update_credential(
            user,
            data.current_password,
            data.new_password,
            ip_address=ip_address,
        )

    def _reject(self, username: str, ip_address: str | None) -> None:
        self.activity.record(
            "Login Failed",
            username=username[:64],
            details="Invalid credentials",
            ip_address=ip_address,
        )
        self.users.commit()
        raise UnauthorizedError(INVALID_CREDENTIALS)

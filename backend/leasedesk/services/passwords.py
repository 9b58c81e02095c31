# Overview: Password hashing and verification, including legacy credential migration.

"""
Password credentials.

Stored forms:
- current: bcrypt ("$2b$<cost>$<salt+digest>"), salted and self-describing,
  so verification needs only the stored string and the candidate.
- legacy: the plaintext itself, or base64(plaintext). Older revisions wrote
  these. They are accepted exactly once per account: a successful login
  through a legacy form rewrites the stored value to bcrypt before the
  response is returned (see AuthService.login).

verify() never raises on malformed stored forms; it returns False.
Nothing here logs or returns plaintext or stored forms.
"""

from __future__ import annotations

import base64
import binascii
import enum
import hmac

import bcrypt

from ..errors import ValidationError

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt ignores input past 72 bytes. Longer passwords are refused, never truncated.
BCRYPT_MAX_BYTES = 72


class CredentialMatch(enum.Enum):
    NONE = "none"
    CURRENT = "current"
    LEGACY = "legacy"


def _encode(password: str) -> bytes:
    return (password or "").encode("utf-8")


def fits_bcrypt(password: str | None) -> bool:
    return len(_encode(password)) <= BCRYPT_MAX_BYTES


def is_current_scheme(stored) -> bool:
    return isinstance(stored, str) and stored.startswith(BCRYPT_PREFIXES)


def _legacy_matches(stored: str, candidate: str) -> bool:
    """Plain-text or base64 comparison, constant-time in both branches."""
    stored_bytes = stored.encode("utf-8")
    candidate_bytes = candidate.encode("utf-8")
    if hmac.compare_digest(stored_bytes, candidate_bytes):
        return True
    try:
        decoded = base64.b64decode(stored_bytes, validate=True)
    except (binascii.Error, ValueError):
        return False
    return hmac.compare_digest(decoded, candidate_bytes)


class PasswordHasher:
    """Hashes and verifies credentials with bcrypt at a fixed cost factor."""

    def __init__(self, rounds: int = 12, min_length: int = 6):
        self.rounds = rounds
        self.min_length = min_length
        self._dummy_hash: str | None = None

    def validate_new_password(self, password: str | None) -> None:
        if not password or len(password) < self.min_length:
            raise ValidationError(f"Password must be at least {self.min_length} characters long")
        if not fits_bcrypt(password):
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")

    def hash(self, password: str) -> str:
        if not fits_bcrypt(password):
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, stored: str | None, candidate: str | None) -> bool:
        """True only if `stored` is a bcrypt hash of `candidate`."""
        if not is_current_scheme(stored) or candidate is None:
            return False
        # No stored hash can come from a longer input.
        if not fits_bcrypt(candidate):
            return False
        try:
            return bcrypt.checkpw(_encode(candidate), stored.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def check(self, stored: str | None, candidate: str | None) -> CredentialMatch:
        """
        Classify a login attempt against a stored credential.

        CURRENT -> accept; LEGACY -> accept and upgrade; NONE -> reject.
        """
        if not stored or candidate is None:
            return CredentialMatch.NONE
        if is_current_scheme(stored):
            return CredentialMatch.CURRENT if self.verify(stored, candidate) else CredentialMatch.NONE
        # A legacy match over the limit could never be rewritten to bcrypt.
        if candidate and fits_bcrypt(candidate) and _legacy_matches(stored, candidate):
            return CredentialMatch.LEGACY
        return CredentialMatch.NONE

    def burn(self, candidate: str | None) -> None:
        """Spend one verification on a throwaway hash (unknown-user logins)."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("not-a-real-password")
        self.verify(self._dummy_hash, candidate or "")

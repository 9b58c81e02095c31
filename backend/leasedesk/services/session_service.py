# Overview: Service-layer operations for session tokens; issues and validates signed JWTs.

"""
Session Token Service

Tokens are stateless HS256 JWTs carrying {sub: user id, username, role}
plus iat/exp. They expire after a fixed window (24 hours by default) and
are opaque to the client. There is no server-side session store, so
logout is a client-side concern.

Validation also re-reads the user: a token for a deleted or inactive
account is rejected even if its signature and expiry are still good.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..errors import UnauthorizedError
from ..models import User


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    username: str
    role: str
    expires_at: datetime


@dataclass
class SessionContext:
    """Authenticated caller, as resolved from a bearer token."""
    user: User
    claims: SessionClaims

    @property
    def role(self) -> str:
        return self.user.role


class SessionTokens:
    def __init__(self, session, *, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("A signing secret is required for session tokens")
        self.session = session
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user: User, *, now: datetime | None = None) -> tuple[str, datetime]:
        """Return (token, expires_at) for a user."""
        now = now or datetime.now(timezone.utc)
        expires_at = now + self.ttl
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at

    def decode(self, token: str) -> SessionClaims:
        """Verify signature and expiry. UnauthorizedError on any failure."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Invalid or expired token")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid or expired token")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise UnauthorizedError("Invalid or expired token")

        return SessionClaims(
            user_id=user_id,
            username=str(payload.get("username") or ""),
            role=str(payload.get("role") or ""),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def validate(self, token: str | None) -> SessionContext:
        if not token:
            raise UnauthorizedError("Authentication required")
        claims = self.decode(token)
        user = self.session.get(User, claims.user_id)
        if not user or not user.is_active or user.username != claims.username:
            raise UnauthorizedError("Invalid or expired token")
        return SessionContext(user=user, claims=claims)

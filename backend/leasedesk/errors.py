# Overview: Error taxonomy shared by services and routes.

"""
Service-layer error taxonomy.

Every failure a caller can observe is one of these. Each carries the HTTP
status the API surfaces it with, so routes only need to catch ServiceError.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    default_message = "Request failed"

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(ServiceError, ValueError):
    """400-level input problem. No state change."""
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(ServiceError):
    """Missing, invalid or expired session, or failed login."""
    status_code = 401
    default_message = "Invalid credentials"


class ForbiddenError(ServiceError):
    """Valid session but insufficient role, or a protected-record mutation."""
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError, ValueError):
    """409-level uniqueness violation (token number, username, agent name)."""
    status_code = 409
    default_message = "Conflict"


class StorageFailure(ServiceError):
    """
    Underlying store failure not otherwise classified.

    The message is always generic; details go to the server log only.
    """
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(self.default_message)

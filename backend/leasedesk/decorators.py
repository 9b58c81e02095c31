# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .errors import UnauthorizedError
from .services.registry import get_services


def client_ip() -> str | None:
    """Caller address; honours the first X-Forwarded-For hop when present."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",", 1)[0].strip() or request.remote_addr
    return request.remote_addr


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user') and hasattr(g, 'session_context')


def require_auth(f):
    """
    Require a valid bearer session token.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_context: The full SessionContext object

    SECURITY: Returns 401 if:
    - No Authorization header
    - Invalid or expired token
    - User account deleted, deactivated or renamed since the token was issued
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1].strip()

        try:
            context = get_services().tokens.validate(token)
        except UnauthorizedError as e:
            return jsonify({"error": e.message}), 401

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Require the authenticated user to hold one of `roles`.

    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if g.current_user.role not in roles:
                if roles == ("admin",):
                    message = "Forbidden: Admin access required"
                else:
                    message = f"Forbidden: requires one of {', '.join(roles)}"
                return jsonify({"error": message}), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


require_admin = require_role("admin")

# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

SECURITY:
- Unknown username, inactive account and wrong password all answer with the
  same 401 {"error": "Invalid credentials"}
- Legacy stored credentials are upgraded to bcrypt on the first successful
  login, before the response is returned
- Session tokens are signed and expire after SESSION_TTL_HOURS
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from ..validation import LoginInput, PasswordChangeInput
from .common import internal_error, json_error, json_payload


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate a user and issue a session token.

    Token must be included in the Authorization header for protected routes.
    """
    try:
        data = LoginInput.from_payload(json_payload())
        result = get_services().auth.login(data, ip_address=client_ip())
        return jsonify(result.to_dict()), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to login user")


@auth_bp.put("/change-password")
@require_auth
def change_password_route():
    """
    Change the caller's password.

    Request body: {"currentPassword": "...", "newPassword": "..."}
    """
    try:
        data = PasswordChangeInput.from_payload(json_payload())
        get_services().auth.change_password(g.current_user, data, ip_address=client_ip())
        return jsonify({"message": "Password changed successfully"}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to change password")


@auth_bp.get("/me")
@require_auth
def me_route():
    claims = g.session_context.claims
    return jsonify({
        "user": g.current_user.to_dict(),
        "expires_at": claims.expires_at.isoformat().replace("+00:00", "Z"),
    }), 200

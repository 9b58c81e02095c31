# Overview: Flask API routes for user management; admin only.

"""
User management API routes

All routes require an admin session. Self-registration does not exist:
accounts are created here or via `flask users create`.

SECURITY:
- Stored credentials are never serialized
- An admin cannot delete their own account
- The primary admin account cannot be deleted
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_admin, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from ..validation import UserInput
from .common import internal_error, json_error, json_payload


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_admin
def list_users_route():
    try:
        users = get_services().users.list_users()
        return jsonify({"users": [u.to_dict() for u in users], "count": len(users)}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to list users")


@users_bp.post("")
@require_auth
@require_admin
def create_user_route():
    """
    Create a user.

    Request body: {"username": "...", "password": "...", "role": "user"}
    """
    try:
        services = get_services()
        data = UserInput.from_payload(json_payload(), roles=services.roles)
        user = services.users.create(data, actor=g.current_user.username, ip_address=client_ip())
        return jsonify({"message": "User created successfully", "user": user.to_dict()}), 201
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to create user")


@users_bp.delete("/<int:user_id>")
@require_auth
@require_admin
def delete_user_route(user_id: int):
    try:
        get_services().users.delete(user_id, actor=g.current_user, ip_address=client_ip())
        return jsonify({"message": "User deleted successfully"}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to delete user")

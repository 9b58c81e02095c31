# Overview: Flask API routes for system settings.

from __future__ import annotations

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_admin, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from ..validation import SettingsInput
from .common import internal_error, json_error, json_payload


settings_bp = Blueprint("settings", __name__, url_prefix="/api")


@settings_bp.get("/settings")
@require_auth
def get_settings_route():
    try:
        return jsonify({"settings": get_services().settings.get().to_dict()}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to load settings")


@settings_bp.put("/settings")
@require_auth
@require_admin
def update_settings_route():
    """Partial update; only the keys present in the body change."""
    try:
        data = SettingsInput.from_payload(json_payload())
        settings = get_services().settings.update(
            data,
            actor=g.current_user.username,
            ip_address=client_ip(),
        )
        return jsonify({"message": "Settings updated successfully", "settings": settings.to_dict()}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to update settings")

# Overview: Flask API routes for backup export and restore; admin only.

"""
Backup API routes

- GET  /api/backup  - full snapshot; credentials are redacted
- POST /api/backup  - restore a snapshot in one transaction

Restore replaces every agreement and merges users additively; see
services/backup_service.py for the exact policy.
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_admin, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from .common import internal_error, json_error, json_payload


backup_bp = Blueprint("backup", __name__, url_prefix="/api/backup")


@backup_bp.get("")
@require_auth
@require_admin
def export_backup_route():
    try:
        return jsonify(get_services().backup.export()), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to export backup")


@backup_bp.post("")
@require_auth
@require_admin
def restore_backup_route():
    try:
        result = get_services().backup.restore(
            json_payload(),
            actor=g.current_user.username,
            ip_address=client_ip(),
        )
        return jsonify(result.to_dict()), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to restore backup")

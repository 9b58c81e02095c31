# Overview: Flask API routes for the activity log; admin only, read-only.

from flask import Blueprint, jsonify, request

from ..decorators import require_auth, require_admin
from ..errors import ServiceError
from ..services.registry import get_services
from .common import internal_error, json_error


activity_bp = Blueprint("activity", __name__, url_prefix="/api")


@activity_bp.get("/activity-logs")
@require_auth
@require_admin
def list_activity_route():
    """
    Most recent activity entries, newest first.

    Query params:
        limit (optional): default 50, max 500
    """
    try:
        entries = get_services().activity.list_recent(request.args.get("limit", type=int))
        return jsonify({"logs": [e.to_dict() for e in entries], "count": len(entries)}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to list activity logs")

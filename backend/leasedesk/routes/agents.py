# Overview: Flask API routes for the agent directory.

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_admin, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from .common import internal_error, json_error, json_payload


agents_bp = Blueprint("agents", __name__, url_prefix="/api/agents")


@agents_bp.get("")
@require_auth
def list_agents_route():
    try:
        names = get_services().agents.list_names()
        return jsonify({"agents": names, "count": len(names)}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to list agents")


@agents_bp.post("")
@require_auth
@require_admin
def add_agent_route():
    try:
        payload = json_payload() or {}
        name = payload.get("name") if isinstance(payload, dict) else None
        agent = get_services().agents.add(name, actor=g.current_user.username, ip_address=client_ip())
        return jsonify({"message": "Agent added successfully", "agent": agent.to_dict()}), 201
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to add agent")

# Overview: Flask API routes for agreement operations; parses input and returns JSON responses.

from flask import Blueprint, jsonify, request, g

from ..decorators import require_auth, client_ip
from ..errors import ServiceError
from ..services.registry import get_services
from ..validation import AgreementInput
from .common import internal_error, json_error, json_payload


agreements_bp = Blueprint("agreements", __name__, url_prefix="/api/agreements")


@agreements_bp.get("")
@require_auth
def list_agreements_route():
    """
    List agreements, newest first.

    Query params:
        page (optional): enables pagination
        per_page (optional): defaults to the configured page size, max 100
    """
    try:
        services = get_services()
        page = request.args.get("page", type=int)
        per_page = request.args.get("per_page", type=int)
        if page is not None and per_page is None:
            per_page = services.settings.page_size()
        return jsonify(services.agreements.list_agreements(page=page, per_page=per_page)), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to list agreements")


@agreements_bp.get("/<int:agreement_id>")
@require_auth
def get_agreement_route(agreement_id: int):
    try:
        agreement = get_services().agreements.get(agreement_id)
        return jsonify({"agreement": agreement.to_dict()}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to get agreement")


@agreements_bp.post("")
@require_auth
def create_agreement_route():
    """
    Create an agreement.

    Derived amounts (grossProfit, netProfit, profitMargin, paymentDue) are
    computed server-side; values sent by the client are ignored.
    """
    try:
        data = AgreementInput.from_payload(json_payload())
        agreement = get_services().agreements.create(
            data,
            actor=g.current_user.username,
            ip_address=client_ip(),
        )
        return jsonify({
            "message": "Agreement created successfully",
            "id": agreement.id,
            "agreement": agreement.to_dict(),
        }), 201
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to create agreement")


@agreements_bp.put("/<int:agreement_id>")
@require_auth
def update_agreement_route(agreement_id: int):
    try:
        data = AgreementInput.from_payload(json_payload())
        agreement = get_services().agreements.update(
            agreement_id,
            data,
            actor=g.current_user.username,
            ip_address=client_ip(),
        )
        return jsonify({
            "message": "Agreement updated successfully",
            "agreement": agreement.to_dict(),
        }), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to update agreement")


@agreements_bp.delete("/<int:agreement_id>")
@require_auth
def delete_agreement_route(agreement_id: int):
    try:
        get_services().agreements.delete(
            agreement_id,
            actor=g.current_user.username,
            ip_address=client_ip(),
        )
        return jsonify({"message": "Agreement deleted successfully"}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to delete agreement")

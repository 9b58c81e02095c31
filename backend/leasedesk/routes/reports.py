# Overview: Flask API routes for reports; read-only.

"""
Reporting API routes

All routes are read-only.
- GET /api/reports            - agreements by agent/owner, expiry range, due sign
- GET /api/reports/profit     - profit details, summary and top agent
- GET /api/reports/expiring   - agreements expiring within N days
"""

from flask import Blueprint, jsonify, request

from ..decorators import require_auth
from ..errors import ServiceError, ValidationError
from ..services.registry import get_services
from ..validation import ProfitReportFilter, ReportFilter
from .common import internal_error, json_error


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("")
@require_auth
def agreements_report_route():
    """
    Query params (all optional):
        agentName, ownerName: exact match
        expiryFromDate, expiryToDate: inclusive YYYY-MM-DD bounds
        pendingAmount: "greater" (due > 0) or "less" (due < 0)
    """
    try:
        filters = ReportFilter.from_args(request.args)
        agreements = get_services().reports.agreements_report(filters)
        return jsonify({"agreements": agreements, "count": len(agreements)}), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to build agreement report")


@reports_bp.get("/profit")
@require_auth
def profit_report_route():
    """
    Query params (all optional):
        fromDate, toDate: inclusive agreement date bounds
        agentName: exact match
    """
    try:
        filters = ProfitReportFilter.from_args(request.args)
        return jsonify(get_services().reports.profit_report(filters)), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to build profit report")


@reports_bp.get("/expiring")
@require_auth
def expiring_report_route():
    try:
        days = request.args.get("days")
        if days is not None:
            try:
                days = int(days)
            except ValueError:
                raise ValidationError("days must be a non-negative integer")
            if days < 0:
                raise ValidationError("days must be a non-negative integer")
        return jsonify(get_services().reports.expiring(days=days)), 200
    except ServiceError as e:
        return json_error(e)
    except Exception:
        return internal_error("Failed to build expiry report")

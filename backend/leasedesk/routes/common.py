# Overview: Helpers shared by the API blueprints.

from __future__ import annotations

from flask import current_app, jsonify, request

from ..errors import ServiceError, StorageFailure
from ..extensions import db


def json_payload():
    """Request body as parsed JSON, or None when absent or malformed."""
    return request.get_json(silent=True)


def json_error(exc: ServiceError):
    """Roll back and render a ServiceError as {"error": message}."""
    db.session.rollback()
    return jsonify({"error": exc.message}), exc.status_code


def internal_error(log_message: str):
    db.session.rollback()
    current_app.logger.exception(log_message)
    return jsonify({"error": StorageFailure.default_message}), 500

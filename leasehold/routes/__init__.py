"""HTTP routes package and shared response helpers."""

from flask import jsonify, request
from pydantic import ValidationError

from leasehold.exceptions import EntitlementError


def error_response(message: str, status: int = 400, details: dict = None):
    """Helper to create error responses."""
    response = {
        "error": "Error",
        "message": message,
        "status": status,
    }
    if details:
        response["details"] = details
    return jsonify(response), status


def entitlement_error_response(error: EntitlementError):
    """Render an entitlement error with its error_code and status."""
    return jsonify(error.to_dict()), error.status_code


def validation_error_response(error: ValidationError):
    return error_response(
        "Request validation failed",
        400,
        {"errors": error.errors(include_url=False, include_context=False)},
    )


def get_changed_by() -> str:
    """Actor identifier for audit logs, taken from the X-Changed-By header."""
    return request.headers.get("X-Changed-By") or "system"


def get_json_body() -> dict:
    """Request JSON body, or an empty dict for an empty body."""
    return request.get_json(silent=True) or {}

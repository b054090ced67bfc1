"""API routes for the application."""

from flask import Blueprint, jsonify, current_app
from datetime import datetime

from leasehold.schemas import HealthCheckSchema, AppInfoSchema

bp = Blueprint("api", __name__, url_prefix="/api")


@bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    schema = HealthCheckSchema(
        status="healthy",
        timestamp=datetime.utcnow(),
        environment=current_app.config.get("ENV", "development"),
    )
    return jsonify(schema.model_dump(mode="json")), 200


@bp.route("/info", methods=["GET"])
def app_info():
    """Get application information."""
    schema = AppInfoSchema(
        name="Leasehold Entitlements",
        version="0.1.0",
        environment=current_app.config.get("ENV", "development"),
        debug=current_app.debug,
        timestamp=datetime.utcnow(),
    )
    return jsonify(schema.model_dump(mode="json")), 200


@bp.route("/", methods=["GET"])
def root():
    """Root API endpoint."""
    return jsonify({
        "message": "Welcome to the Leasehold entitlements API",
        "version": "0.1.0",
        "endpoints": {
            "health": "/api/health",
            "info": "/api/info",
            "package_tiers": "/api/package-tiers",
            "addon_products": "/api/addons/products",
            "organizations": "/api/organizations/<organization_id>",
        },
    }), 200

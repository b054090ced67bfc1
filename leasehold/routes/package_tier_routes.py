"""Package Tier API routes."""

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from leasehold.exceptions import EntitlementError
from leasehold.routes import (
    error_response,
    entitlement_error_response,
    validation_error_response,
    get_changed_by,
    get_json_body,
)
from leasehold.schemas import PackageTierCreateSchema, PackageTierUpdateSchema
from leasehold.services import PackageTierService

bp = Blueprint("package_tiers", __name__, url_prefix="/api/package-tiers")


@bp.route("", methods=["GET"])
def list_tiers():
    """
    List package tiers.

    Query params:
        - include_inactive: Include deactivated tiers (default: false)

    Returns:
        200: { tiers: [...], total }
    """
    try:
        include_inactive = request.args.get("include_inactive", "false").lower() == "true"
        result = PackageTierService.list_tiers(include_inactive=include_inactive)

        return jsonify({
            "tiers": [tier.model_dump(mode="json") for tier in result.items],
            "total": result.total,
        }), 200

    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:tier_id>", methods=["GET"])
def get_tier(tier_id: int):
    """
    Get a package tier by ID.

    Returns:
        200: Tier details
        404: Tier not found
    """
    try:
        tier = PackageTierService.get_tier(tier_id)
        return jsonify({"tier": tier.model_dump(mode="json")}), 200

    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/slug/<string:slug>", methods=["GET"])
def get_tier_by_slug(slug: str):
    """Get an active package tier by slug."""
    try:
        tier = PackageTierService.get_tier_by_slug(slug)
        return jsonify({"tier": tier.model_dump(mode="json")}), 200

    except EntitlementError:
        return error_response(f"Package tier '{slug}' not found", 404)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("", methods=["POST"])
def create_tier():
    """
    Create a package tier.

    Request body: PackageTierCreateSchema

    Returns:
        201: Created tier
        400: Validation error or duplicate slug
    """
    try:
        data = PackageTierCreateSchema.model_validate(get_json_body())
        tier = PackageTierService.create_tier(data, get_changed_by())

        return jsonify({
            "tier": tier.model_dump(mode="json"),
            "message": "Package tier created successfully",
        }), 201

    except ValidationError as e:
        return validation_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:tier_id>", methods=["PUT", "PATCH"])
def update_tier(tier_id: int):
    """
    Update a package tier.

    Request body: PackageTierUpdateSchema (``expected_version`` optional)

    Returns:
        200: Updated tier
        400: Validation error
        404: Tier not found
        409: Tier changed since ``expected_version``
    """
    try:
        data = PackageTierUpdateSchema.model_validate(get_json_body())
        tier = PackageTierService.update_tier(
            tier_id,
            data,
            get_changed_by(),
            expected_version=data.expected_version,
        )

        return jsonify({
            "tier": tier.model_dump(mode="json"),
            "message": "Package tier updated successfully",
        }), 200

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:tier_id>/deactivate", methods=["POST"])
def deactivate_tier(tier_id: int):
    """
    Deactivate a package tier.

    Returns:
        200: Deactivated tier
        404: Tier not found
        409: Organizations are still assigned to the tier
    """
    try:
        tier = PackageTierService.deactivate_tier(tier_id, get_changed_by())
        return jsonify({
            "tier": tier.model_dump(mode="json"),
            "message": "Package tier deactivated",
        }), 200

    except ValueError as e:
        status = 404 if "not found" in str(e) else 409
        return error_response(str(e), status)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:tier_id>/versions", methods=["GET"])
def list_versions(tier_id: int):
    """Version history of a tier, newest first."""
    try:
        versions = PackageTierService.list_versions(tier_id)
        return jsonify({
            "versions": [v.model_dump(mode="json") for v in versions],
            "total": len(versions),
        }), 200

    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return error_response(str(e), 500)

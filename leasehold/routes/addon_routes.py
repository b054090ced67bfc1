"""Add-on product and purchase API routes."""

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
from leasehold.schemas import AddonPurchaseCreateSchema, AddonQuantityUpdateSchema
from leasehold.services import AddonService

bp = Blueprint("addons", __name__, url_prefix="/api")


@bp.route("/addons/products", methods=["GET"])
def list_products():
    """List add-on products for sale."""
    try:
        include_inactive = request.args.get("include_inactive", "false").lower() == "true"
        products = AddonService.list_products(include_inactive=include_inactive)
        return jsonify({
            "products": [p.model_dump(mode="json") for p in products],
            "total": len(products),
        }), 200

    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/organizations/<int:organization_id>/addons", methods=["GET"])
def list_purchases(organization_id: int):
    """
    List an organization's add-on purchases.

    Query params:
        - include_inactive: Include expired purchases (default: false)
    """
    try:
        include_inactive = request.args.get("include_inactive", "false").lower() == "true"
        result = AddonService.list_purchases(organization_id, include_inactive=include_inactive)
        return jsonify({
            "purchases": [p.model_dump(mode="json") for p in result.items],
            "total": result.total,
        }), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/organizations/<int:organization_id>/addons", methods=["POST"])
def purchase_addon(organization_id: int):
    """
    Purchase an add-on.

    Request body: { "addon_product_id": 1, "quantity": 2 }

    Returns:
        201: Created purchase
        400: Invalid quantity or validation error
        404: Organization or product not found
    """
    try:
        data = AddonPurchaseCreateSchema.model_validate(get_json_body())
        purchase = AddonService.purchase_addon(
            organization_id,
            data.addon_product_id,
            data.quantity,
            get_changed_by(),
        )
        return jsonify({
            "purchase": purchase.model_dump(mode="json"),
            "message": "Add-on purchased successfully",
        }), 201

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/organizations/<int:organization_id>/addon-limits", methods=["GET"])
def get_organization_limits(organization_id: int):
    """Base cap, add-on bonus and total per resource type."""
    try:
        limits = AddonService.get_organization_limits(organization_id)
        return jsonify(limits.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/addons/purchases/<int:purchase_id>/cancel", methods=["POST"])
def cancel_addon(purchase_id: int):
    """
    Cancel an add-on purchase. It stays in effect until its next billing date.

    Returns:
        200: Cancelled purchase
        400: Purchase not active
        404: Purchase not found
    """
    try:
        purchase = AddonService.cancel_addon(purchase_id, get_changed_by())
        return jsonify({
            "purchase": purchase.model_dump(mode="json"),
            "message": "Add-on cancelled; it remains in effect until the next billing date",
        }), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/addons/purchases/<int:purchase_id>", methods=["PATCH"])
def update_quantity(purchase_id: int):
    """
    Change the quantity of an active add-on purchase.

    Request body: { "quantity": 3 }
    """
    try:
        data = AddonQuantityUpdateSchema.model_validate(get_json_body())
        purchase = AddonService.update_quantity(purchase_id, data.quantity, get_changed_by())
        return jsonify({"purchase": purchase.model_dump(mode="json")}), 200

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return error_response(str(e), 500)

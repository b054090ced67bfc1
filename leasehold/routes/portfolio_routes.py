"""Limit-guarded resource creation routes."""

from flask import Blueprint, jsonify
from pydantic import ValidationError

from leasehold.exceptions import EntitlementError
from leasehold.models import ResourceType
from leasehold.routes import (
    error_response,
    entitlement_error_response,
    validation_error_response,
    get_changed_by,
    get_json_body,
)
from leasehold.schemas import (
    BusinessCreateSchema,
    PropertyCreateSchema,
    UnitCreateSchema,
    TenantAccessCreateSchema,
    MemberCreateSchema,
)
from leasehold.services import PortfolioService

bp = Blueprint("portfolio", __name__, url_prefix="/api/organizations")


def _create(create, schema, *args):
    """Validate the body, run a guarded create and render the result."""
    try:
        data = schema.model_validate(get_json_body())
        resource = create(*args, data, get_changed_by())
        return jsonify({"resource": resource.to_dict()}), 201

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        status = 404 if "not found" in str(e) else 400
        return error_response(str(e), status)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/businesses", methods=["POST"])
def create_business(organization_id: int):
    """
    Create a business.

    Returns:
        201: Created business
        403: LIMIT_REACHED
        409: No tier configured
    """
    return _create(PortfolioService.create_business, BusinessCreateSchema, organization_id)


@bp.route("/<int:organization_id>/businesses/<int:business_id>/properties", methods=["POST"])
def create_property(organization_id: int, business_id: int):
    """Create a property under a business."""
    return _create(PortfolioService.create_property, PropertyCreateSchema, organization_id, business_id)


@bp.route("/<int:organization_id>/properties/<int:property_id>/units", methods=["POST"])
def create_unit(organization_id: int, property_id: int):
    """Create a unit under a property."""
    return _create(PortfolioService.create_unit, UnitCreateSchema, organization_id, property_id)


@bp.route("/<int:organization_id>/units/<int:unit_id>/tenant-access", methods=["POST"])
def grant_tenant_access(organization_id: int, unit_id: int):
    """Give a rental tenant access to a unit."""
    return _create(PortfolioService.grant_tenant_access, TenantAccessCreateSchema, organization_id, unit_id)


@bp.route("/<int:organization_id>/members", methods=["POST"])
def add_member(organization_id: int):
    """Add a member (user seat) to the organization."""
    return _create(PortfolioService.add_member, MemberCreateSchema, organization_id)


@bp.route(
    "/<int:organization_id>/<string:resource_type>/<int:resource_id>",
    methods=["DELETE"],
)
def soft_delete(organization_id: int, resource_type: str, resource_id: int):
    """
    Soft-delete a business, property, unit, tenant access or member.

    Path params:
        - resource_type: businesses | properties | units | tenant-access | members
    """
    resource_types = {
        "businesses": ResourceType.BUSINESS,
        "properties": ResourceType.PROPERTY,
        "units": ResourceType.UNIT,
        "tenant-access": ResourceType.TENANT,
        "members": ResourceType.USER,
    }
    if resource_type not in resource_types:
        return error_response(f"Unknown resource type '{resource_type}'", 404)

    try:
        PortfolioService.soft_delete(
            organization_id,
            resource_types[resource_type],
            resource_id,
            get_changed_by(),
        )
        return jsonify({"message": "Deleted"}), 200

    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return error_response(str(e), 500)

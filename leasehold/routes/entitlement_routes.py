"""Per-organization entitlement API routes: package settings, limits, features."""

from flask import Blueprint, jsonify, request
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
from leasehold.schemas import PackageSettingsUpdateSchema, UpgradeNotificationRespondSchema
from leasehold.services import (
    OrganizationPackageService,
    UsageService,
    LimitService,
    FeatureGateService,
)

bp = Blueprint("entitlements", __name__, url_prefix="/api/organizations")


def parse_resource_type(value: str) -> ResourceType:
    """Accept ``property`` as well as ``properties``."""
    for resource_type in ResourceType:
        if value in (resource_type.value, resource_type.usage_key):
            return resource_type
    raise ValueError(f"Unknown resource type '{value}'")


@bp.route("/<int:organization_id>/package-settings", methods=["GET"])
def get_package_settings(organization_id: int):
    """
    Get an organization's stored package settings.

    Returns:
        200: { settings } (null when none are stored)
        404: Organization not found
    """
    try:
        settings = OrganizationPackageService.get_settings(organization_id)
        return jsonify({"settings": settings.model_dump(mode="json") if settings else None}), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/package-settings", methods=["PUT"])
def set_package_settings(organization_id: int):
    """
    Create or update an organization's package settings.

    Request body: PackageSettingsUpdateSchema

    Returns:
        200: Stored settings
        400: Validation error
        404: Organization not found
        409: Tier not found or inactive
    """
    try:
        data = PackageSettingsUpdateSchema.model_validate(get_json_body())
        settings = OrganizationPackageService.set_settings(organization_id, data, get_changed_by())

        return jsonify({
            "settings": settings.model_dump(mode="json"),
            "message": "Package settings saved",
        }), 200

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/effective-settings", methods=["GET"])
def get_effective_settings(organization_id: int):
    """
    Resolve the settings enforced for an organization.

    Returns:
        200: { organization_id, tier, override, effective, uses_default_tier }
        404: Organization not found
        409: No tier configured / tier not found
    """
    try:
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        return jsonify(resolved.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/usage", methods=["GET"])
def get_usage(organization_id: int):
    """Active resource counts for an organization."""
    try:
        usage = UsageService.count_usage(organization_id)
        return jsonify({"organization_id": organization_id, "usage": usage.model_dump()}), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/limits", methods=["GET"])
def check_limits(organization_id: int):
    """
    Check usage against caps (including add-ons).

    Returns:
        200: { within_limits, violations: ["Properties: 5/3"], details: [...] }
    """
    try:
        result = LimitService.check_package_limits(organization_id)
        return jsonify(result.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/limit-status", methods=["GET"])
def get_limit_status(organization_id: int):
    """Per-resource usage, caps, percentage and add-on breakdown."""
    try:
        status = LimitService.get_limit_status(organization_id)
        return jsonify(status.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/can-add/<string:resource_type>", methods=["GET"])
def can_add(organization_id: int, resource_type: str):
    """
    Pre-flight check before creating a resource.

    Returns:
        200: { can_add, current, max, unlimited, ... }
        400: Unknown resource type
    """
    try:
        parsed = parse_resource_type(resource_type)
        result = LimitService.check_can_add(organization_id, parsed)
        return jsonify(result.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 400)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/features", methods=["GET"])
def list_feature_statuses(organization_id: int):
    """
    Feature gate decisions for a whole view with one resolution.

    Query params:
        - keys: Comma-separated feature keys (default: every catalog key)
    """
    try:
        keys_param = request.args.get("keys")
        keys = [k.strip() for k in keys_param.split(",") if k.strip()] if keys_param else None

        result = FeatureGateService.feature_statuses(organization_id, keys)
        return jsonify(result.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/features/<string:feature_key>", methods=["GET"])
def get_feature_status(organization_id: int, feature_key: str):
    """Feature gate decision for one feature."""
    try:
        result = FeatureGateService.feature_status(organization_id, feature_key)
        return jsonify(result.model_dump(mode="json")), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route("/<int:organization_id>/upgrade-notifications", methods=["GET"])
def list_upgrade_notifications(organization_id: int):
    """
    List package upgrade notifications.

    Query params:
        - pending: Only pending notifications (default: false)
    """
    try:
        pending_only = request.args.get("pending", "false").lower() == "true"
        notifications = OrganizationPackageService.list_upgrade_notifications(organization_id, pending_only)

        return jsonify({
            "notifications": [n.model_dump(mode="json") for n in notifications],
            "total": len(notifications),
        }), 200

    except EntitlementError as e:
        return entitlement_error_response(e)
    except Exception as e:
        return error_response(str(e), 500)


@bp.route(
    "/<int:organization_id>/upgrade-notifications/<int:notification_id>/respond",
    methods=["POST"],
)
def respond_to_upgrade_notification(organization_id: int, notification_id: int):
    """
    Accept or decline a package upgrade.

    Request body: { "accept": true | false }

    Returns:
        200: Updated notification
        404: Notification not found
        409: Notification no longer pending
    """
    try:
        data = UpgradeNotificationRespondSchema.model_validate(get_json_body())

        owned = {
            n.id for n in OrganizationPackageService.list_upgrade_notifications(organization_id)
        }
        if notification_id not in owned:
            return error_response(f"Upgrade notification with ID {notification_id} not found", 404)

        notification = OrganizationPackageService.respond_to_upgrade_notification(
            notification_id,
            data.accept,
            get_changed_by(),
        )
        return jsonify({"notification": notification.model_dump(mode="json")}), 200

    except ValidationError as e:
        return validation_error_response(e)
    except EntitlementError as e:
        return entitlement_error_response(e)
    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        return error_response(str(e), 500)

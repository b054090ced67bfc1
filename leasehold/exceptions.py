"""
Entitlement exceptions.

All of them subclass ValueError so callers that already handle
"not found" / "invalid input" ValueErrors keep working, while routes
can map each kind to its own status code and error_code.
"""

from typing import Optional


class EntitlementError(ValueError):
    """Base exception for entitlement and billing errors."""

    error_code = "ENTITLEMENT_ERROR"
    status_code = 400

    def to_dict(self) -> dict:
        """Serialize for a JSON error response."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": str(self),
            "status": self.status_code,
        }


class NoTierConfigured(EntitlementError):
    """
    Raised when an organization has no package settings and no default tier.

    Never substitute zero (or unlimited) limits for this state.
    """

    error_code = "NO_TIER_CONFIGURED"
    status_code = 409

    def __init__(self, organization_id: int):
        self.organization_id = organization_id
        super().__init__(
            f"Organization {organization_id} has no package tier configured"
        )


class TierNotFound(EntitlementError):
    """Raised when package settings reference a missing or inactive tier."""

    error_code = "TIER_NOT_FOUND"
    status_code = 409

    def __init__(self, tier_ref, organization_id: Optional[int] = None):
        self.tier_ref = tier_ref
        self.organization_id = organization_id
        message = f"Package tier {tier_ref!r} not found or inactive"
        if organization_id is not None:
            message += f" (referenced by organization {organization_id})"
        super().__init__(message)


class LimitReached(EntitlementError):
    """
    Raised before a write when the organization is at its cap for a resource.

    Callers route the user to the upgrade / add-on purchase flow.
    """

    error_code = "LIMIT_REACHED"
    status_code = 403

    def __init__(self, resource_type, current: int, maximum: int):
        self.resource_type = resource_type
        self.current = current
        self.maximum = maximum
        super().__init__(
            f"{resource_type.label} limit reached ({current}/{maximum}). "
            f"Upgrade your package or purchase an add-on."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "resource_type": self.resource_type.value,
            "current": self.current,
            "max": self.maximum,
        })
        return data


class AddonProductNotFound(EntitlementError):
    """Raised when an add-on product does not exist or is not for sale."""

    error_code = "ADDON_PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Add-on product {product_id} not found or inactive")


class AddonPurchaseNotFound(EntitlementError):
    error_code = "ADDON_PURCHASE_NOT_FOUND"
    status_code = 404

    def __init__(self, purchase_id):
        self.purchase_id = purchase_id
        super().__init__(f"Add-on purchase {purchase_id} not found")


class InvalidQuantity(EntitlementError):
    """Raised for an add-on purchase or update with a non-positive quantity."""

    error_code = "INVALID_QUANTITY"
    status_code = 400

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be greater than 0 (got {quantity})")


class OrganizationNotFound(EntitlementError):
    error_code = "ORGANIZATION_NOT_FOUND"
    status_code = 404

    def __init__(self, organization_id):
        self.organization_id = organization_id
        super().__init__(f"Organization with ID {organization_id} not found")


class StaleTierVersion(EntitlementError):
    """Raised when a tier edit was based on an outdated version."""

    error_code = "STALE_TIER_VERSION"
    status_code = 409

    def __init__(self, tier_id: int, expected_version: int, current_version: int):
        self.tier_id = tier_id
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"Package tier {tier_id} is at version {current_version}, "
            f"edit was based on version {expected_version}"
        )


class NotificationNotPending(EntitlementError):
    error_code = "NOTIFICATION_NOT_PENDING"
    status_code = 409

    def __init__(self, notification_id: int, status: str):
        self.notification_id = notification_id
        self.status = status
        super().__init__(
            f"Upgrade notification {notification_id} is {status}, not pending"
        )

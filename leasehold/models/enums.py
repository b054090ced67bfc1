"""Enumerations shared by the entitlement models, services and schemas."""

import enum

# Cap value the tier catalog uses for "no limit"
UNLIMITED = 999999


class ResourceType(str, enum.Enum):
    """Capped resource types an organization owns."""

    BUSINESS = "business"
    PROPERTY = "property"
    UNIT = "unit"
    TENANT = "tenant"
    USER = "user"

    @property
    def cap_field(self) -> str:
        """Name of the cap on tiers and effective settings (e.g. ``max_properties``)."""
        return f"max_{self.usage_key}"

    @property
    def usage_key(self) -> str:
        """Key of this resource in a usage snapshot (e.g. ``properties``)."""
        if self is ResourceType.PROPERTY:
            return "properties"
        return f"{self.value}s"

    @property
    def label(self) -> str:
        return self.usage_key.capitalize()

    @property
    def addon_type(self) -> "AddonType":
        """Add-on product type that raises this resource's cap."""
        if self is ResourceType.USER:
            return AddonType.TEAM_MEMBER
        return AddonType(self.value)


class AddonType(str, enum.Enum):
    """Resource an add-on product adds capacity for."""

    BUSINESS = "business"
    PROPERTY = "property"
    UNIT = "unit"
    TENANT = "tenant"
    TEAM_MEMBER = "team_member"

    @property
    def resource_type(self) -> ResourceType:
        if self is AddonType.TEAM_MEMBER:
            return ResourceType.USER
        return ResourceType(self.value)


class FeatureStatus(str, enum.Enum):
    """Feature gate decision for one feature key."""

    ACTIVE = "active"
    UPGRADE_REQUIRED = "upgrade_required"
    ADDON_AVAILABLE = "addon_available"


class UpgradeType(str, enum.Enum):
    """How a gated feature is unlocked."""

    PACKAGE = "package"
    ADDON = "addon"


class AddonPurchaseStatus(enum.Enum):
    """Add-on purchase status enumeration."""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class PackageType(enum.Enum):
    """Who a package tier is sold to."""
    SINGLE_COMPANY = "single_company"
    MANAGEMENT_COMPANY = "management_company"


class BillingCycle(enum.Enum):
    """Billing cycle enumeration."""
    MONTHLY = "monthly"
    ANNUAL = "annual"


class MemberRole(enum.Enum):
    """Organization member role enumeration."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class NotificationStatus(enum.Enum):
    """Package upgrade notification status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"

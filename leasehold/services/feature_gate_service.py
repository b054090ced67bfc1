"""Feature Gate Service - tri-state feature decisions for the UI."""

import logging
from typing import Dict, Iterable, Optional

from leasehold.models import FeatureStatus, UpgradeType, AddonType
from leasehold.schemas.feature_schema import (
    FeatureCatalogEntrySchema,
    FeatureStatusSchema,
    FeatureStatusListSchema,
)
from leasehold.services.organization_package_service import OrganizationPackageService

logger = logging.getLogger(__name__)


def _entry(key: str, **kwargs) -> FeatureCatalogEntrySchema:
    return FeatureCatalogEntrySchema(key=key, **kwargs)


FEATURE_CATALOG: Dict[str, FeatureCatalogEntrySchema] = {
    entry.key: entry
    for entry in (
        _entry(
            "white_label",
            name="White Label Branding",
            description="Customize the application with your own logo, colors, and branding.",
            benefits=["Custom logo and application name", "Brand color customization"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Professional",
        ),
        _entry(
            "multi_user",
            name="Team Members",
            description="Invite team members to help manage your properties with role-based access.",
            benefits=["Role-based permissions", "Activity tracking"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Professional",
        ),
        _entry(
            "advanced_reporting",
            name="Advanced Analytics & Reports",
            description="Financial reports, occupancy analytics and performance metrics for your portfolio.",
            benefits=["Financial performance dashboards", "Cash flow forecasting", "Export to PDF/Excel"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Professional",
        ),
        _entry(
            "api_access",
            name="API Access",
            description="Integrate with your existing systems using the REST API.",
            benefits=["Full REST API access", "Webhook notifications"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Manager Growth",
        ),
        _entry(
            "priority_support",
            name="Priority Support",
            description="Faster response times and dedicated support.",
            benefits=["Dedicated account manager", "Phone support"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Manager Growth",
        ),
        _entry(
            "rent_optimization",
            name="AI Rent Optimization",
            description="Optimize rental prices based on market data and trends.",
            benefits=["Market rate analysis", "Rent price recommendations"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Professional",
        ),
        _entry(
            "custom_integrations",
            name="Custom Integrations",
            description="Connect accounting software, payment processors and calendars.",
            benefits=["Accounting integration", "Payment gateway connections", "Calendar sync"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Manager Starter",
        ),
        _entry(
            "bulk_operations",
            name="Bulk Operations",
            description="Perform actions on multiple properties, units, or tenants at once.",
            benefits=["Bulk rent adjustments", "Mass communication"],
            upgrade_type=UpgradeType.PACKAGE,
            min_tier="Professional",
        ),
        _entry(
            "extra_property",
            name="Additional Properties",
            description="Expand your portfolio by adding more properties to your account.",
            upgrade_type=UpgradeType.ADDON,
            addon_type=AddonType.PROPERTY,
        ),
        _entry(
            "extra_unit",
            name="Additional Units",
            description="Add more rental units to your existing properties.",
            upgrade_type=UpgradeType.ADDON,
            addon_type=AddonType.UNIT,
        ),
        _entry(
            "extra_tenant",
            name="Additional Tenants",
            description="Track more tenants across your properties.",
            upgrade_type=UpgradeType.ADDON,
            addon_type=AddonType.TENANT,
        ),
    )
}


class FeatureGateService:
    """Service for feature gate decisions."""

    @staticmethod
    def status(effective_features: Dict[str, bool], feature_key: str) -> FeatureStatus:
        """
        Decide the status of one feature. Pure; safe to call per render.

        ``active`` only when the effective flag is exactly True; otherwise
        ``addon_available`` for add-on catalog entries, else
        ``upgrade_required`` (including keys missing from the catalog).
        """
        if effective_features.get(feature_key) is True:
            return FeatureStatus.ACTIVE

        entry = FEATURE_CATALOG.get(feature_key)
        if entry is not None and entry.upgrade_type == UpgradeType.ADDON:
            return FeatureStatus.ADDON_AVAILABLE

        return FeatureStatus.UPGRADE_REQUIRED

    @staticmethod
    def describe(effective_features: Dict[str, bool], feature_key: str) -> FeatureStatusSchema:
        entry = FEATURE_CATALOG.get(feature_key)
        return FeatureStatusSchema(
            feature_key=feature_key,
            status=FeatureGateService.status(effective_features, feature_key),
            name=entry.name if entry else None,
            description=entry.description if entry else None,
            upgrade_type=entry.upgrade_type if entry else None,
            min_tier=entry.min_tier if entry else None,
        )

    @staticmethod
    def feature_status(organization_id: int, feature_key: str) -> FeatureStatusSchema:
        """Resolve the organization's features once and decide one feature."""
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        return FeatureGateService.describe(resolved.effective.features, feature_key)

    @staticmethod
    def feature_statuses(
        organization_id: int,
        feature_keys: Optional[Iterable[str]] = None,
    ) -> FeatureStatusListSchema:
        """
        Decide many features with a single resolution.

        Defaults to every catalog key plus any flag set on the organization.
        """
        resolved = OrganizationPackageService.resolve_effective_settings(organization_id)
        features = resolved.effective.features

        if feature_keys is None:
            feature_keys = list(FEATURE_CATALOG) + [k for k in features if k not in FEATURE_CATALOG]

        statuses = [FeatureGateService.describe(features, key) for key in feature_keys]
        logger.debug(f"Resolved {len(statuses)} feature statuses for organization {organization_id}")
        return FeatureStatusListSchema(organization_id=organization_id, features=statuses)

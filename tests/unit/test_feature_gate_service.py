"""Unit tests for FeatureGateService."""

import pytest

from leasehold.exceptions import NoTierConfigured
from leasehold.models import FeatureStatus, UpgradeType
from leasehold.services import FeatureGateService
from leasehold.services.feature_gate_service import FEATURE_CATALOG


@pytest.mark.unit
class TestStatus:
    """The decision itself only looks at the effective feature map."""

    def test_enabled_feature_is_active(self):
        assert FeatureGateService.status({"white_label": True}, "white_label") == FeatureStatus.ACTIVE

    def test_disabled_package_feature_requires_upgrade(self):
        assert FeatureGateService.status({"white_label": False}, "white_label") == FeatureStatus.UPGRADE_REQUIRED

    def test_missing_package_feature_requires_upgrade(self):
        assert FeatureGateService.status({}, "white_label") == FeatureStatus.UPGRADE_REQUIRED

    def test_addon_feature_is_available_as_addon(self):
        assert FeatureGateService.status({}, "extra_property") == FeatureStatus.ADDON_AVAILABLE

    def test_enabled_addon_feature_is_active(self):
        assert FeatureGateService.status({"extra_property": True}, "extra_property") == FeatureStatus.ACTIVE

    def test_unknown_key_requires_upgrade(self):
        assert FeatureGateService.status({}, "teleportation") == FeatureStatus.UPGRADE_REQUIRED

    def test_only_true_counts_as_enabled(self):
        assert FeatureGateService.status({"white_label": "yes"}, "white_label") == FeatureStatus.UPGRADE_REQUIRED


@pytest.mark.unit
class TestCatalog:

    def test_addon_entries_name_their_addon_type(self):
        addon_entries = [e for e in FEATURE_CATALOG.values() if e.upgrade_type == UpgradeType.ADDON]

        assert {e.key for e in addon_entries} == {"extra_property", "extra_unit", "extra_tenant"}
        assert all(e.addon_type is not None for e in addon_entries)

    def test_package_entries_name_a_minimum_tier(self):
        package_entries = [e for e in FEATURE_CATALOG.values() if e.upgrade_type == UpgradeType.PACKAGE]

        assert all(e.min_tier for e in package_entries)


@pytest.mark.unit
class TestFeatureStatusForOrganization:

    def test_tier_feature_is_active(self, db, subscribed_organization):
        result = FeatureGateService.feature_status(subscribed_organization.id, "maintenance_tracking")

        assert result.status == FeatureStatus.ACTIVE

    def test_white_label_requires_upgrade_on_basic(self, db, subscribed_organization):
        result = FeatureGateService.feature_status(subscribed_organization.id, "white_label")

        assert result.status == FeatureStatus.UPGRADE_REQUIRED
        assert result.min_tier == "Professional"
        assert result.name == "White Label Branding"

    def test_override_enables_feature(self, db, settings_factory, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_features={"white_label": True})

        result = FeatureGateService.feature_status(sample_organization.id, "white_label")

        assert result.status == FeatureStatus.ACTIVE

    def test_statuses_cover_catalog_and_organization_flags(self, db, subscribed_organization):
        result = FeatureGateService.feature_statuses(subscribed_organization.id)
        by_key = {f.feature_key: f.status for f in result.features}

        assert set(FEATURE_CATALOG) <= set(by_key)
        assert by_key["maintenance_tracking"] == FeatureStatus.ACTIVE
        assert by_key["extra_unit"] == FeatureStatus.ADDON_AVAILABLE

    def test_statuses_for_selected_keys(self, db, subscribed_organization):
        result = FeatureGateService.feature_statuses(subscribed_organization.id, ["white_label", "extra_tenant"])

        assert [f.status for f in result.features] == [
            FeatureStatus.UPGRADE_REQUIRED,
            FeatureStatus.ADDON_AVAILABLE,
        ]

    def test_unresolvable_organization_propagates(self, db, sample_organization):
        with pytest.raises(NoTierConfigured):
            FeatureGateService.feature_status(sample_organization.id, "white_label")

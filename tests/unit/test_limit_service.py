"""Unit tests for LimitService."""

import pytest

from leasehold.exceptions import LimitReached, NoTierConfigured
from leasehold.models import UNLIMITED, ResourceType, AddonType, AddonPurchase, AddonPurchaseStatus
from leasehold.schemas import EffectiveSettingsSchema, UsageSnapshotSchema
from leasehold.services import LimitService
from leasehold.services.limit_service import usage_percentage


def effective_settings(**caps):
    values = {
        "monthly_price_cents": 2900,
        "annual_price_cents": 29900,
        "max_businesses": 1,
        "max_properties": 3,
        "max_units": 10,
        "max_tenants": 10,
        "max_users": 1,
        "max_payment_methods": 1,
        "features": {},
    }
    values.update(caps)
    return EffectiveSettingsSchema(**values)


@pytest.mark.unit
class TestCheckLimits:
    """``check_limits`` is pure and flags only usage strictly above the cap."""

    def test_within_limits(self):
        result = LimitService.check_limits(effective_settings(), UsageSnapshotSchema(businesses=1, properties=2))

        assert result.within_limits is True
        assert result.violations == []
        assert result.details == []

    def test_exactly_at_cap_is_compliant(self):
        result = LimitService.check_limits(
            effective_settings(max_properties=5),
            UsageSnapshotSchema(businesses=1, properties=5),
        )

        assert result.within_limits is True

    def test_over_cap_is_a_violation(self):
        result = LimitService.check_limits(effective_settings(), UsageSnapshotSchema(businesses=1, properties=5))

        assert result.within_limits is False
        assert result.violations == ["Properties: 5/3"]
        assert result.details[0].resource_type == ResourceType.PROPERTY
        assert result.details[0].current == 5
        assert result.details[0].max == 3

    def test_reports_every_violation(self):
        result = LimitService.check_limits(
            effective_settings(max_users=1),
            UsageSnapshotSchema(businesses=2, properties=4, users=3),
        )

        assert result.violations == ["Businesses: 2/1", "Properties: 4/3", "Users: 3/1"]

    def test_unlimited_cap_is_never_exceeded(self):
        result = LimitService.check_limits(
            effective_settings(max_properties=UNLIMITED),
            UsageSnapshotSchema(businesses=1, properties=5000),
        )

        assert result.within_limits is True


@pytest.mark.unit
class TestUsagePercentage:

    def test_regular_cap(self):
        assert usage_percentage(1, 4) == 25.0

    def test_unlimited_cap_reports_zero(self):
        assert usage_percentage(500, UNLIMITED) == 0.0

    def test_zero_cap(self):
        assert usage_percentage(0, 0) == 0.0
        assert usage_percentage(2, 0) == 100.0


@pytest.mark.unit
class TestCanAdd:
    """``can_add`` refuses once usage reaches the cap."""

    def test_below_cap(self, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=2)

        assert LimitService.can_add(subscribed_organization.id, ResourceType.PROPERTY) is True

    def test_at_cap_refuses_even_though_limits_are_met(
        self, db, tier_factory, settings_factory, portfolio_factory, sample_organization
    ):
        tier = tier_factory("five-properties", max_properties=5)
        settings_factory(sample_organization, tier)
        portfolio_factory(sample_organization, businesses=1, properties=5)

        assert LimitService.check_package_limits(sample_organization.id).within_limits is True
        assert LimitService.can_add(sample_organization.id, ResourceType.PROPERTY) is False

    def test_override_cap_is_used(self, db, settings_factory, portfolio_factory, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_max_properties=10)
        portfolio_factory(sample_organization, businesses=1, properties=3)

        result = LimitService.check_can_add(sample_organization.id, ResourceType.PROPERTY)

        assert result.can_add is True
        assert result.max == 10

    def test_zero_cap_refuses(self, db, settings_factory, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_max_users=0)

        assert LimitService.can_add(sample_organization.id, ResourceType.USER) is False

    def test_unlimited_cap_always_allows(self, db, settings_factory, portfolio_factory, sample_organization, unlimited_tier):
        settings_factory(sample_organization, unlimited_tier)
        portfolio_factory(sample_organization, businesses=3, properties=50)

        result = LimitService.check_can_add(sample_organization.id, ResourceType.PROPERTY)

        assert result.can_add is True
        assert result.unlimited is True

    def test_no_tier_configured_propagates(self, db, sample_organization):
        with pytest.raises(NoTierConfigured):
            LimitService.can_add(sample_organization.id, ResourceType.PROPERTY)

    def test_addon_raises_cap(
        self, db, tier_factory, settings_factory, portfolio_factory, addon_products, sample_organization
    ):
        tier = tier_factory("three-properties", max_properties=3)
        settings_factory(sample_organization, tier)
        portfolio_factory(sample_organization, businesses=1, properties=4)
        db.session.add(AddonPurchase(
            organization_id=sample_organization.id,
            addon_product_id=addon_products[AddonType.PROPERTY].id,
            quantity=2,
            status=AddonPurchaseStatus.ACTIVE,
        ))
        db.session.commit()

        result = LimitService.check_can_add(sample_organization.id, ResourceType.PROPERTY)

        assert result.max == 5
        assert result.can_add is True


@pytest.mark.unit
class TestAssertCanAdd:

    def test_raises_limit_reached_at_cap(self, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=3)

        with pytest.raises(LimitReached) as exc_info:
            LimitService.assert_can_add(subscribed_organization.id, ResourceType.PROPERTY)

        error = exc_info.value
        assert error.resource_type == ResourceType.PROPERTY
        assert error.current == 3
        assert error.maximum == 3
        assert error.to_dict()["error_code"] == "LIMIT_REACHED"

    def test_passes_below_cap(self, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=1)

        LimitService.assert_can_add(subscribed_organization.id, ResourceType.PROPERTY)


@pytest.mark.unit
class TestCheckPackageLimits:

    def test_includes_addon_bonus(
        self, db, settings_factory, portfolio_factory, addon_products, sample_organization, sample_tier
    ):
        settings_factory(sample_organization, sample_tier)
        portfolio_factory(sample_organization, businesses=1, properties=4)

        assert LimitService.check_package_limits(sample_organization.id).violations == ["Properties: 4/3"]

        db.session.add(AddonPurchase(
            organization_id=sample_organization.id,
            addon_product_id=addon_products[AddonType.PROPERTY].id,
            quantity=1,
            status=AddonPurchaseStatus.ACTIVE,
        ))
        db.session.commit()

        assert LimitService.check_package_limits(sample_organization.id).within_limits is True


@pytest.mark.unit
class TestLimitStatus:

    def test_reports_each_resource(self, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=3, units=5)

        status = LimitService.get_limit_status(subscribed_organization.id)
        by_type = {r.resource_type: r for r in status.resources}

        assert set(by_type) == set(ResourceType)
        assert by_type[ResourceType.PROPERTY].at_limit is True
        assert by_type[ResourceType.PROPERTY].percentage == 100.0
        assert by_type[ResourceType.UNIT].percentage == 50.0
        assert by_type[ResourceType.UNIT].at_limit is False
        assert by_type[ResourceType.TENANT].current == 0

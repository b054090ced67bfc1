"""Tests for per-organization entitlement endpoints."""

import pytest


@pytest.mark.integration
class TestPackageSettingsApi:

    def test_get_settings_without_row(self, client, db, sample_organization):
        response = client.get(f"/api/organizations/{sample_organization.id}/package-settings")

        assert response.status_code == 200
        assert response.get_json()["settings"] is None

    def test_put_assigns_tier(self, client, db, sample_organization, sample_tier):
        response = client.put(
            f"/api/organizations/{sample_organization.id}/package-settings",
            json={"package_tier_slug": "basic", "custom_max_properties": 8, "billing_cycle": "annual"},
            headers={"X-Changed-By": "super_admin:1"},
        )

        assert response.status_code == 200
        settings = response.get_json()["settings"]
        assert settings["package_tier_id"] == sample_tier.id
        assert settings["custom_max_properties"] == 8
        assert settings["has_custom_limits"] is True
        assert settings["billing_cycle"] == "annual"

    def test_put_unknown_tier_returns_409(self, client, db, sample_organization):
        response = client.put(
            f"/api/organizations/{sample_organization.id}/package-settings",
            json={"package_tier_slug": "platinum"},
        )

        assert response.status_code == 409
        assert response.get_json()["error_code"] == "TIER_NOT_FOUND"

    def test_put_without_tier_returns_400(self, client, db, sample_organization):
        response = client.put(
            f"/api/organizations/{sample_organization.id}/package-settings",
            json={"custom_max_properties": 8},
        )

        assert response.status_code == 400

    def test_unknown_organization_returns_404(self, client, db):
        response = client.get("/api/organizations/9999/package-settings")

        assert response.status_code == 404
        assert response.get_json()["error_code"] == "ORGANIZATION_NOT_FOUND"


@pytest.mark.integration
class TestEffectiveSettingsApi:

    def test_effective_settings(self, client, db, settings_factory, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_max_properties=10)

        response = client.get(f"/api/organizations/{sample_organization.id}/effective-settings")
        data = response.get_json()

        assert response.status_code == 200
        assert data["effective"]["max_properties"] == 10
        assert data["tier"]["max_properties"] == 3
        assert data["override"]["custom_max_properties"] == 10
        assert data["uses_default_tier"] is False

    def test_no_tier_configured_returns_409(self, client, db, sample_organization):
        response = client.get(f"/api/organizations/{sample_organization.id}/effective-settings")

        assert response.status_code == 409
        assert response.get_json()["error_code"] == "NO_TIER_CONFIGURED"

    def test_default_tier(self, app, client, db, monkeypatch, sample_organization, sample_tier):
        monkeypatch.setitem(app.config, "DEFAULT_PACKAGE_TIER_SLUG", "basic")

        response = client.get(f"/api/organizations/{sample_organization.id}/effective-settings")

        assert response.status_code == 200
        assert response.get_json()["uses_default_tier"] is True


@pytest.mark.integration
class TestUsageAndLimitsApi:

    def test_usage(self, client, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=2, units=3)

        response = client.get(f"/api/organizations/{subscribed_organization.id}/usage")

        assert response.get_json()["usage"] == {
            "businesses": 1,
            "properties": 2,
            "units": 3,
            "tenants": 0,
            "users": 0,
        }

    def test_limits_report_violations(self, client, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=5)

        data = client.get(f"/api/organizations/{subscribed_organization.id}/limits").get_json()

        assert data["within_limits"] is False
        assert data["violations"] == ["Properties: 5/3"]
        assert data["details"] == [{"resource_type": "property", "current": 5, "max": 3}]

    def test_can_add_at_cap(self, client, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=3)

        data = client.get(f"/api/organizations/{subscribed_organization.id}/can-add/properties").get_json()

        assert data["can_add"] is False
        assert data["current"] == 3
        assert data["max"] == 3

    def test_can_add_accepts_singular_type(self, client, db, subscribed_organization):
        response = client.get(f"/api/organizations/{subscribed_organization.id}/can-add/unit")

        assert response.status_code == 200
        assert response.get_json()["can_add"] is True

    def test_can_add_unknown_type_returns_400(self, client, db, subscribed_organization):
        response = client.get(f"/api/organizations/{subscribed_organization.id}/can-add/spaceships")

        assert response.status_code == 400

    def test_limit_status(self, client, db, portfolio_factory, subscribed_organization):
        portfolio_factory(subscribed_organization, businesses=1, properties=3)

        data = client.get(f"/api/organizations/{subscribed_organization.id}/limit-status").get_json()
        by_type = {r["resource_type"]: r for r in data["resources"]}

        assert by_type["property"]["at_limit"] is True
        assert by_type["property"]["percentage"] == 100.0


@pytest.mark.integration
class TestFeaturesApi:

    def test_single_feature(self, client, db, subscribed_organization):
        data = client.get(f"/api/organizations/{subscribed_organization.id}/features/white_label").get_json()

        assert data["status"] == "upgrade_required"
        assert data["upgrade_type"] == "package"

    def test_selected_features(self, client, db, subscribed_organization):
        data = client.get(
            f"/api/organizations/{subscribed_organization.id}/features?keys=maintenance_tracking,extra_property"
        ).get_json()

        assert [f["status"] for f in data["features"]] == ["active", "addon_available"]


@pytest.mark.integration
class TestUpgradeNotificationsApi:

    def test_accept_flow(self, client, db, settings_factory, sample_organization, sample_tier):
        settings_factory(sample_organization, sample_tier, custom_max_units=40)
        client.patch(f"/api/package-tiers/{sample_tier.id}", json={"max_units": 20})

        listed = client.get(
            f"/api/organizations/{sample_organization.id}/upgrade-notifications?pending=true"
        ).get_json()
        assert listed["total"] == 1
        notification_id = listed["notifications"][0]["id"]

        response = client.post(
            f"/api/organizations/{sample_organization.id}/upgrade-notifications/{notification_id}/respond",
            json={"accept": True},
            headers={"X-Changed-By": "member:3"},
        )

        assert response.status_code == 200
        assert response.get_json()["notification"]["status"] == "accepted"

        effective = client.get(f"/api/organizations/{sample_organization.id}/effective-settings").get_json()
        assert effective["effective"]["max_units"] == 20
        assert effective["override"]["package_version"] == 2

    def test_respond_twice_returns_409(self, client, db, subscribed_organization, sample_tier):
        client.patch(f"/api/package-tiers/{sample_tier.id}", json={"max_units": 20})
        notification_id = client.get(
            f"/api/organizations/{subscribed_organization.id}/upgrade-notifications"
        ).get_json()["notifications"][0]["id"]
        url = f"/api/organizations/{subscribed_organization.id}/upgrade-notifications/{notification_id}/respond"

        client.post(url, json={"accept": False})
        response = client.post(url, json={"accept": True})

        assert response.status_code == 409
        assert response.get_json()["error_code"] == "NOTIFICATION_NOT_PENDING"

    def test_notification_of_other_organization_returns_404(
        self, client, db, subscribed_organization, other_organization, sample_tier
    ):
        client.patch(f"/api/package-tiers/{sample_tier.id}", json={"max_units": 20})
        notification_id = client.get(
            f"/api/organizations/{subscribed_organization.id}/upgrade-notifications"
        ).get_json()["notifications"][0]["id"]

        response = client.post(
            f"/api/organizations/{other_organization.id}/upgrade-notifications/{notification_id}/respond",
            json={"accept": True},
        )

        assert response.status_code == 404

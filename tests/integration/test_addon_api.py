"""Tests for add-on endpoints."""

import pytest

from leasehold.models import AddonType


@pytest.mark.integration
class TestAddonProductsApi:

    def test_list_products(self, client, db, addon_products):
        data = client.get("/api/addons/products").get_json()

        assert data["total"] == len(AddonType)
        assert {p["addon_type"] for p in data["products"]} == {t.value for t in AddonType}


@pytest.mark.integration
class TestAddonPurchaseApi:

    def purchase(self, client, organization_id, product_id, quantity):
        return client.post(
            f"/api/organizations/{organization_id}/addons",
            json={"addon_product_id": product_id, "quantity": quantity},
            headers={"X-Changed-By": "member:1"},
        )

    def test_purchase_returns_201(self, client, db, addon_products, subscribed_organization):
        response = self.purchase(client, subscribed_organization.id, addon_products[AddonType.PROPERTY].id, 2)

        assert response.status_code == 201
        purchase = response.get_json()["purchase"]
        assert purchase["quantity"] == 2
        assert purchase["status"] == "active"
        assert purchase["in_effect"] is True

    def test_zero_quantity_returns_400(self, client, db, addon_products, subscribed_organization):
        response = self.purchase(client, subscribed_organization.id, addon_products[AddonType.PROPERTY].id, 0)

        assert response.status_code == 400
        assert response.get_json()["error_code"] == "INVALID_QUANTITY"

    def test_unknown_product_returns_404(self, client, db, subscribed_organization):
        response = self.purchase(client, subscribed_organization.id, 9999, 1)

        assert response.status_code == 404
        assert response.get_json()["error_code"] == "ADDON_PRODUCT_NOT_FOUND"

    def test_purchase_raises_limits(self, client, db, addon_products, subscribed_organization):
        self.purchase(client, subscribed_organization.id, addon_products[AddonType.PROPERTY].id, 2)

        limits = client.get(f"/api/organizations/{subscribed_organization.id}/addon-limits").get_json()

        assert limits["limits"]["property"] == {"base": 3, "addon": 2, "total": 5, "unlimited": False}

    def test_cancel_keeps_addon_in_effect(self, client, db, addon_products, subscribed_organization):
        purchase_id = self.purchase(
            client, subscribed_organization.id, addon_products[AddonType.UNIT].id, 1
        ).get_json()["purchase"]["id"]

        response = client.post(f"/api/addons/purchases/{purchase_id}/cancel")

        assert response.status_code == 200
        assert response.get_json()["purchase"]["status"] == "cancelled"
        listed = client.get(f"/api/organizations/{subscribed_organization.id}/addons").get_json()
        assert listed["total"] == 1

    def test_cancel_twice_returns_400(self, client, db, addon_products, subscribed_organization):
        purchase_id = self.purchase(
            client, subscribed_organization.id, addon_products[AddonType.UNIT].id, 1
        ).get_json()["purchase"]["id"]
        client.post(f"/api/addons/purchases/{purchase_id}/cancel")

        assert client.post(f"/api/addons/purchases/{purchase_id}/cancel").status_code == 400

    def test_cancel_unknown_purchase_returns_404(self, client, db):
        assert client.post("/api/addons/purchases/9999/cancel").status_code == 404

    def test_update_quantity(self, client, db, addon_products, subscribed_organization):
        purchase_id = self.purchase(
            client, subscribed_organization.id, addon_products[AddonType.TENANT].id, 1
        ).get_json()["purchase"]["id"]

        response = client.patch(f"/api/addons/purchases/{purchase_id}", json={"quantity": 3})

        assert response.status_code == 200
        assert response.get_json()["purchase"]["quantity"] == 3

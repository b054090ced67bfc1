"""Tests for health check and info endpoints."""

import pytest
from datetime import datetime


@pytest.mark.unit
class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check_returns_200(self, client):
        """Test health check returns 200."""
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_health_check_contains_required_fields(self, client):
        """Test health check response contains required fields."""
        response = client.get("/api/health")
        data = response.get_json()

        assert data["status"] == "healthy"
        assert data["environment"] == "testing"
        datetime.fromisoformat(data["timestamp"])

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.unit
class TestAppInfo:
    """Test app info endpoint."""

    def test_app_info_contains_required_fields(self, client):
        """Test app info response contains required fields."""
        response = client.get("/api/info")
        data = response.get_json()

        assert response.status_code == 200
        assert data["name"] == "Leasehold Entitlements"
        assert "version" in data
        assert "debug" in data


@pytest.mark.unit
class TestRootEndpoint:
    """Test root API endpoint."""

    def test_root_contains_endpoints(self, client):
        """Test root endpoint contains endpoints."""
        response = client.get("/api/")
        data = response.get_json()

        assert response.status_code == 200
        assert "health" in data["endpoints"]
        assert "package_tiers" in data["endpoints"]


@pytest.mark.integration
class TestErrorHandling:

    def test_unknown_route_returns_json_404(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.get_json()["error"] == "Not Found"

    def test_non_json_body_rejected(self, client):
        response = client.post("/api/package-tiers", data="tier_name=x", content_type="text/plain")

        assert response.status_code == 400
        assert "application/json" in response.get_json()["message"]

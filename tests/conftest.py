"""Pytest configuration and fixtures."""

import pytest
import sys
import os

# Add the parent directory to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from leasehold import create_app, db as app_db
from config.testing import TestingConfig
from leasehold.models import (
    UNLIMITED,
    Organization,
    OrganizationMember,
    OrganizationPackageSettings,
    PackageTier,
    PackageTierVersion,
    AddonProduct,
    AddonType,
    Business,
    Property,
    Unit,
    TenantAccess,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: service-level tests")
    config.addinivalue_line("markers", "integration: HTTP API tests")


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app(config=TestingConfig)
    return app


@pytest.fixture(scope="function")
def client(app):
    """Flask test client."""
    client = app.test_client()
    with app.app_context():
        yield client


@pytest.fixture(scope="function")
def db(app):
    """Database session for testing."""
    with app.app_context():
        # Create all tables
        app_db.create_all()
        yield app_db
        # Drop all tables
        app_db.session.remove()
        app_db.drop_all()


def _make_tier(db, slug, **overrides):
    """Persist a tier together with its version 1 snapshot."""
    values = {
        "tier_name": slug.title(),
        "tier_slug": slug,
        "display_name": slug.title(),
        "monthly_price_cents": 2900,
        "annual_price_cents": 29900,
        "max_businesses": 1,
        "max_properties": 3,
        "max_units": 10,
        "max_tenants": 10,
        "max_users": 1,
        "max_payment_methods": 1,
        "features": {"maintenance_tracking": True, "white_label": False},
        "version": 1,
    }
    values.update(overrides)

    tier = PackageTier(**values)
    db.session.add(tier)
    db.session.flush()
    db.session.add(PackageTierVersion.from_tier(tier, change_notes="Initial version", created_by="system"))
    db.session.commit()
    return tier


def _assign_tier(db, organization, tier, **overrides):
    settings = OrganizationPackageSettings(
        organization_id=organization.id,
        package_tier_id=tier.id,
        package_version=tier.version,
        **overrides,
    )
    settings.refresh_override_flags()
    db.session.add(settings)
    db.session.commit()
    return settings


def _build_portfolio(db, organization, businesses=1, properties=0, units=0, tenants=0):
    """
    Create live resources under an organization.

    Properties hang off the first business, units off the first property
    and tenant access rows off the first unit.
    """
    created = {"businesses": [], "properties": [], "units": [], "tenants": []}

    for i in range(businesses):
        created["businesses"].append(Business(organization_id=organization.id, name=f"Business {i}"))
    db.session.add_all(created["businesses"])
    db.session.flush()

    for i in range(properties):
        created["properties"].append(
            Property(business_id=created["businesses"][0].id, name=f"Property {i}", address=f"{i} Main St")
        )
    db.session.add_all(created["properties"])
    db.session.flush()

    for i in range(units):
        created["units"].append(Unit(property_id=created["properties"][0].id, unit_number=f"{100 + i}"))
    db.session.add_all(created["units"])
    db.session.flush()

    for i in range(tenants):
        created["tenants"].append(
            TenantAccess(unit_id=created["units"][0].id, tenant_name=f"Tenant {i}", tenant_email=f"tenant{i}@example.com")
        )
    db.session.add_all(created["tenants"])
    db.session.commit()
    return created


@pytest.fixture
def tier_factory(db):
    """Create tiers: ``tier_factory("professional", max_properties=25)``."""
    return lambda slug, **overrides: _make_tier(db, slug, **overrides)


@pytest.fixture
def settings_factory(db):
    """Assign a tier to an organization, with optional ``custom_*`` overrides."""
    return lambda organization, tier, **overrides: _assign_tier(db, organization, tier, **overrides)


@pytest.fixture
def portfolio_factory(db):
    return lambda organization, **counts: _build_portfolio(db, organization, **counts)


@pytest.fixture
def sample_tier(db):
    """Basic-like tier: 1 business, 3 properties, 10 units, 10 tenants, 1 user."""
    return _make_tier(db, "basic")


@pytest.fixture
def unlimited_tier(db):
    return _make_tier(
        db,
        "enterprise",
        monthly_price_cents=19900,
        annual_price_cents=199900,
        max_businesses=UNLIMITED,
        max_properties=UNLIMITED,
        max_units=UNLIMITED,
        max_tenants=UNLIMITED,
        max_users=UNLIMITED,
        max_payment_methods=UNLIMITED,
        features={"maintenance_tracking": True, "white_label": True},
    )


@pytest.fixture
def sample_organization(db):
    organization = Organization(name="Maple Rentals", slug="maple-rentals", is_active=True)
    db.session.add(organization)
    db.session.commit()
    return organization


@pytest.fixture
def other_organization(db):
    organization = Organization(name="Birch Holdings", slug="birch-holdings", is_active=True)
    db.session.add(organization)
    db.session.commit()
    return organization


@pytest.fixture
def subscribed_organization(db, sample_organization, sample_tier):
    """Organization assigned to the sample tier without overrides."""
    _assign_tier(db, sample_organization, sample_tier)
    return sample_organization


@pytest.fixture
def sample_member(db, sample_organization):
    member = OrganizationMember(
        organization_id=sample_organization.id,
        email="owner@maple.example.com",
        is_active=True,
    )
    db.session.add(member)
    db.session.commit()
    return member


@pytest.fixture
def addon_products(db):
    """One add-on product per add-on type, keyed by type."""
    products = {
        addon_type: AddonProduct(
            slug=f"extra_{addon_type.value}",
            addon_type=addon_type,
            display_name=f"Extra {addon_type.value.replace('_', ' ').title()}",
            monthly_price_cents=1000,
            units_per_addon=1,
            is_active=True,
        )
        for addon_type in AddonType
    }
    db.session.add_all(products.values())
    db.session.commit()
    return products

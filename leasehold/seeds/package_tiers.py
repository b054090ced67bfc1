"""Seed default package tiers."""

from sqlalchemy import select

from leasehold import db
from leasehold.models import UNLIMITED, PackageTier, PackageTierVersion, PackageType


BASIC_FEATURES = {
    "maintenance_tracking": True,
    "payment_tracking": True,
    "basic_reports": True,
}

PROFESSIONAL_FEATURES = {
    **BASIC_FEATURES,
    "advanced_reports": True,
    "lease_renewal_automation": True,
    "rent_optimization": True,
    "multi_user": True,
}

ENTERPRISE_FEATURES = {
    **PROFESSIONAL_FEATURES,
    "custom_integrations": True,
    "dedicated_support": True,
    "white_label": True,
}

DEFAULT_TIERS = [
    {
        "tier_name": "Basic",
        "tier_slug": "basic",
        "display_name": "Basic",
        "description": "For individual landlords with a few properties",
        "package_type": PackageType.SINGLE_COMPANY,
        "monthly_price_cents": 2900,
        "annual_price_cents": 29900,
        "max_businesses": 1,
        "max_properties": 5,
        "max_units": 25,
        "max_tenants": 25,
        "max_users": 1,
        "max_payment_methods": 1,
        "features": BASIC_FEATURES,
        "display_order": 1,
    },
    {
        "tier_name": "Professional",
        "tier_slug": "professional",
        "display_name": "Professional",
        "description": "For growing portfolios with a small team",
        "package_type": PackageType.SINGLE_COMPANY,
        "monthly_price_cents": 7900,
        "annual_price_cents": 79900,
        "max_businesses": 1,
        "max_properties": 25,
        "max_units": 150,
        "max_tenants": 150,
        "max_users": 5,
        "max_payment_methods": 3,
        "features": PROFESSIONAL_FEATURES,
        "is_featured": True,
        "display_order": 2,
    },
    {
        "tier_name": "Enterprise",
        "tier_slug": "enterprise",
        "display_name": "Enterprise",
        "description": "Unlimited portfolio size with dedicated support",
        "package_type": PackageType.MANAGEMENT_COMPANY,
        "monthly_price_cents": 19900,
        "annual_price_cents": 199900,
        "max_businesses": UNLIMITED,
        "max_properties": UNLIMITED,
        "max_units": UNLIMITED,
        "max_tenants": UNLIMITED,
        "max_users": UNLIMITED,
        "max_payment_methods": UNLIMITED,
        "features": ENTERPRISE_FEATURES,
        "display_order": 3,
    },
]


def seed_package_tiers():
    """
    Seed default package tiers.

    Creates Basic, Professional and Enterprise with their version 1
    snapshots. Skips tiers that already exist (idempotent).
    """
    print("Seeding package tiers...")

    created_count = 0
    skipped_count = 0

    for tier_data in DEFAULT_TIERS:
        existing = db.session.scalar(
            select(PackageTier).where(PackageTier.tier_slug == tier_data["tier_slug"])
        )
        if existing:
            print(f"  Skipped: {tier_data['tier_slug']} (already exists)")
            skipped_count += 1
            continue

        tier = PackageTier(**tier_data, version=1)
        db.session.add(tier)
        db.session.flush()
        db.session.add(PackageTierVersion.from_tier(tier, change_notes="Initial version", created_by="system"))
        created_count += 1
        print(f"  Created: {tier.tier_slug} - {tier.display_name}")

    db.session.commit()

    print(f"\nPackage tiers seeded: {created_count} created, {skipped_count} skipped")
    return created_count, skipped_count


if __name__ == "__main__":
    from leasehold import create_app

    app = create_app()
    with app.app_context():
        seed_package_tiers()

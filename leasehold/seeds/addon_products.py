"""Seed default add-on products."""

from sqlalchemy import select

from leasehold import db
from leasehold.models import AddonProduct, AddonType


DEFAULT_ADDON_PRODUCTS = [
    {
        "slug": "extra_business",
        "addon_type": AddonType.BUSINESS,
        "display_name": "Extra Business",
        "description": "Add one additional business entity",
        "monthly_price_cents": 1500,
    },
    {
        "slug": "extra_property",
        "addon_type": AddonType.PROPERTY,
        "display_name": "Extra Property",
        "description": "Add one additional property to your account",
        "monthly_price_cents": 1000,
    },
    {
        "slug": "extra_unit",
        "addon_type": AddonType.UNIT,
        "display_name": "Extra Unit",
        "description": "Add one additional rental unit",
        "monthly_price_cents": 300,
    },
    {
        "slug": "extra_tenant",
        "addon_type": AddonType.TENANT,
        "display_name": "Extra Tenant",
        "description": "Add one tenant portal account",
        "monthly_price_cents": 200,
    },
    {
        "slug": "extra_team_member",
        "addon_type": AddonType.TEAM_MEMBER,
        "display_name": "Extra Team Member",
        "description": "Add one staff member to your team",
        "monthly_price_cents": 800,
    },
]


def seed_addon_products():
    """Seed the extra_* add-on products. Skips existing slugs (idempotent)."""
    print("Seeding add-on products...")

    created_count = 0
    skipped_count = 0

    for product_data in DEFAULT_ADDON_PRODUCTS:
        existing = db.session.scalar(
            select(AddonProduct).where(AddonProduct.slug == product_data["slug"])
        )
        if existing:
            print(f"  Skipped: {product_data['slug']} (already exists)")
            skipped_count += 1
            continue

        db.session.add(AddonProduct(**product_data, units_per_addon=1, is_active=True))
        created_count += 1
        print(f"  Created: {product_data['slug']} - {product_data['display_name']}")

    db.session.commit()

    print(f"\nAdd-on products seeded: {created_count} created, {skipped_count} skipped")
    return created_count, skipped_count


if __name__ == "__main__":
    from leasehold import create_app

    app = create_app()
    with app.app_context():
        seed_addon_products()

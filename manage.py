"""Management CLI commands."""

import sys

from flask import Flask
from leasehold import create_app, db


def init_db(app: Flask) -> None:
    """Create all tables directly from the models (local development only)."""
    with app.app_context():
        db.create_all()
        app.logger.info("Database initialized successfully")


def drop_db(app: Flask, confirm: bool = False) -> None:
    """Drop all database tables."""
    if not confirm:
        response = input("Are you sure you want to drop all tables? [y/N]: ")
        if response.lower() != "y":
            print("Operation cancelled")
            return

    with app.app_context():
        db.drop_all()
        app.logger.info("Database dropped successfully")


def seed_tiers(app: Flask) -> None:
    """Seed default package tiers."""
    from leasehold.seeds.package_tiers import seed_package_tiers

    with app.app_context():
        seed_package_tiers()


def seed_addons(app: Flask) -> None:
    """Seed default add-on products."""
    from leasehold.seeds.addon_products import seed_addon_products

    with app.app_context():
        seed_addon_products()


def seed_all(app: Flask) -> None:
    """Seed package tiers and add-on products."""
    print("=" * 60)
    print("SEEDING ALL DATA")
    print("=" * 60)

    with app.app_context():
        print("\n1. Seeding package tiers...")
        from leasehold.seeds.package_tiers import seed_package_tiers
        seed_package_tiers()

        print("\n2. Seeding add-on products...")
        from leasehold.seeds.addon_products import seed_addon_products
        seed_addon_products()

        print("\n" + "=" * 60)
        print("ALL DATA SEEDED SUCCESSFULLY")
        print("=" * 60)


def migrate(app: Flask) -> None:
    """Run database migrations."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.upgrade(alembic_cfg, "head")
        print("Migrations completed successfully")


def create_migration(app: Flask, message: str) -> None:
    """Create a new migration."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.revision(alembic_cfg, autogenerate=True, message=message)
        print(f"Migration created with message: {message}")


def stamp_db(app: Flask, revision: str = "001") -> None:
    """Stamp database with a specific migration version without running it."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.stamp(alembic_cfg, revision)
        print(f"Database stamped with revision: {revision}")


def show_config(app: Flask) -> None:
    """Print the effective settings."""
    from config.settings import settings

    settings.display_config()


if __name__ == "__main__":
    app = create_app()

    commands = {
        "init": lambda: init_db(app),
        "drop": lambda: drop_db(app),
        "migrate": lambda: migrate(app),
        "create-migration": lambda: create_migration(app, sys.argv[2] if len(sys.argv) > 2 else "auto"),
        "stamp": lambda: stamp_db(app, sys.argv[2] if len(sys.argv) > 2 else "001"),
        "seed-tiers": lambda: seed_tiers(app),
        "seed-addons": lambda: seed_addons(app),
        "seed-all": lambda: seed_all(app),
        "config": lambda: show_config(app),
    }

    if len(sys.argv) < 2:
        print("Usage: python manage.py <command>")
        print("\nCommands:")
        print("  init                - Create tables from models (development only)")
        print("  drop                - Drop all tables")
        print("  migrate             - Run migrations")
        print("  create-migration    - Create new migration")
        print("  stamp               - Mark database as at specific revision")
        print("                        Usage: stamp [revision] (default: 001)")
        print("  config              - Show effective configuration")
        print("\nSeed Commands:")
        print("  seed-tiers          - Seed default package tiers")
        print("  seed-addons         - Seed default add-on products")
        print("  seed-all            - Seed tiers and add-on products")
        sys.exit(1)

    command = sys.argv[1]
    if command not in commands:
        print(f"Unknown command: {command}")
        sys.exit(1)

    commands[command]()

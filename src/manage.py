"""Storefront database management CLI.

Provides commands to create and drop the database schema and to seed the
default pricing settings.

Usage:
    python src/manage.py setup-db        # Create all tables
    python src/manage.py drop-db         # Drop all tables
    python src/manage.py seed-settings   # Store default tax/shipping/currency
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the storefront domain."""
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    """Drop the database schema for the storefront domain."""
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping database schema...")
    drop_db(storefront)
    print("Done.")


def seed_settings(overwrite=False):
    """Store the default pricing settings that are not already present."""
    from protean.exceptions import ObjectNotFoundError

    from storefront.domain import storefront
    from storefront.pricing.policy import DEFAULT_SETTINGS
    from storefront.setting.management import UpdateSetting
    from storefront.setting.setting import Setting

    storefront.init()
    with storefront.domain_context():
        repo = storefront.repository_for(Setting)
        for key, (value, value_type, group) in DEFAULT_SETTINGS.items():
            if not overwrite:
                try:
                    repo.get(key)
                    print(f"  {key} already set, skipping.")
                    continue
                except ObjectNotFoundError:
                    pass

            storefront.process(
                UpdateSetting(key=key, value=value, value_type=value_type, group=group),
                asynchronous=False,
            )
            print(f"  {key} = {value}")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-settings", help="Store default pricing settings")
    seed_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace settings that already exist",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-settings":
        seed_settings(overwrite=args.overwrite)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

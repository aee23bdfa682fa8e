"""Ratnaya storefront database management CLI.

Creates and drops the storefront tables and seeds the default delivery
options. Reuses the setup_db/drop_db utilities in ``storefront.utils.db``.

Usage:
    python src/manage.py setup-db        # Create all tables
    python src/manage.py drop-db         # Drop all tables
    python src/manage.py seed-delivery   # Insert default delivery options
"""

import argparse
import sys

from storefront.shared.money import to_paise

# ₹99 standard delivery, free above ₹2,000
DEFAULT_DELIVERY_OPTIONS = [
    {
        "name": "Standard Delivery",
        "charge": to_paise(99),
        "min_order_amount": None,
        "is_free": False,
        "is_active": True,
        "display_order": 1,
    },
    {
        "name": "Free Delivery",
        "charge": 0,
        "min_order_amount": to_paise(2000),
        "is_free": True,
        "is_active": True,
        "display_order": 2,
    },
]


def _storefront():
    from storefront.domain import storefront

    print("Initializing storefront domain...")
    storefront.init()
    return storefront


def setup_database():
    """Create the storefront database schema."""
    from storefront.utils.db import setup_db

    domain = _storefront()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the storefront database schema."""
    from storefront.utils.db import drop_db

    domain = _storefront()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def seed_delivery_options(force=False):
    """Insert the default delivery options unless some already exist."""
    from storefront.rowstore import get_row_store

    domain = _storefront()
    with domain.domain_context():
        row_store = get_row_store()
        existing = row_store.query("delivery_settings", limit=1)
        if existing and not force:
            print("Delivery options already configured; use --force to add the defaults anyway.")
            return

        rows = row_store.insert_many("delivery_settings", DEFAULT_DELIVERY_OPTIONS)
        for row in rows:
            print(f"  Added {row['name']} ({row['id']})")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Ratnaya storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-delivery", help="Insert the default delivery options")
    seed_parser.add_argument(
        "--force",
        action="store_true",
        help="Insert the defaults even when delivery options exist",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-delivery":
        seed_delivery_options(force=args.force)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

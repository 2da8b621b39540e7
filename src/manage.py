"""Storefront database management CLI.

Creates and drops the SQL schema of the storefront domain. Only meaningful
when the active config overlay points at a SQL database (PROTEAN_ENV=production).

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from storefront.domain import storefront
from storefront.utils.db import drop_db, setup_db


def setup_database():
    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

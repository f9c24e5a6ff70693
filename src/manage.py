"""Course Reviews database management CLI.

Creates or drops the database schema of the ``coursereviews`` domain for
the environment selected by ``PROTEAN_ENV``. In-memory providers need no
schema, so both commands are no-ops there.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the domain."""
    from coursereviews.domain import coursereviews
    from coursereviews.utils.db import setup_db

    print("Initializing coursereviews domain...")
    coursereviews.init()
    print("Creating coursereviews database schema...")
    tables = setup_db(coursereviews)
    if tables:
        print(f"Tables: {', '.join(tables)}")
    else:
        print("No SQL provider configured; nothing to create.")
    print("Done.")


def drop_database():
    """Drop the database schema of the domain."""
    from coursereviews.domain import coursereviews
    from coursereviews.utils.db import drop_db

    print("Initializing coursereviews domain...")
    coursereviews.init()
    print("Dropping coursereviews database schema...")
    drop_db(coursereviews)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Course Reviews database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

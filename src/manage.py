"""Ordering management CLI.

Provides commands to create and drop the database schema, and to repair
orders left pending after their payment was captured.

Usage:
    python src/manage.py setup-db             # Create all tables
    python src/manage.py drop-db              # Drop all tables
    python src/manage.py reconcile-payments   # Mark orders paid where a completed payment exists
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the ordering domain."""
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    for table in setup_db(ordering):
        print(f"  {table}")
    print("Done.")


def drop_database():
    """Drop the database schema for the ordering domain."""
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    drop_db(ordering)
    print("Done.")


def reconcile_payments():
    """Mark pending orders paid when a completed payment exists for them."""
    from ordering.domain import ordering
    from ordering.orchestration.service import OrderOrchestrationService
    from ordering.utils.logging import configure_logging, log_context

    configure_logging()
    ordering.init()
    with log_context(command="reconcile-payments"), ordering.domain_context():
        reconciled = OrderOrchestrationService().reconcile_payments()

    for order_id in reconciled:
        print(f"  reconciled order {order_id}")
    print(f"Done. {len(reconciled)} order(s) reconciled.")


def main():
    parser = argparse.ArgumentParser(description="Ordering management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser(
        "reconcile-payments",
        help="Mark pending orders paid when their payment already completed",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "reconcile-payments":
        reconcile_payments()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

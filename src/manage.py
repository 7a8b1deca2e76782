"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py issue-token <customer>   # Print a bearer token (development)
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping database schema...")
    drop_db(storefront)
    print("Done.")


def issue_token(customer_id, days):
    from datetime import timedelta

    from protean.exceptions import ObjectNotFoundError

    from storefront.domain import storefront
    from storefront.identity.api.auth import create_access_token
    from storefront.identity.customer.customer import Customer

    storefront.init()
    with storefront.domain_context():
        try:
            customer = storefront.repository_for(Customer).get(customer_id)
        except ObjectNotFoundError:
            print(f"No customer with id {customer_id}", file=sys.stderr)
            sys.exit(1)
        print(create_access_token(str(customer.id), expires_in=timedelta(days=days)))


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    token_parser = subparsers.add_parser("issue-token", help="Print a bearer token for a customer")
    token_parser.add_argument("customer_id", help="Id of an existing customer")
    token_parser.add_argument("--days", type=int, default=7, help="Token lifetime in days (default: 7)")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "issue-token":
        issue_token(args.customer_id, args.days)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

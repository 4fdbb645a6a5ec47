#!/usr/bin/env python
"""Create the travel expense tables in the database.

Usage:
    python scripts/create_schema.py
    python scripts/create_schema.py --database-url postgresql+asyncpg://...
    python scripts/create_schema.py --dry-run
"""

import argparse
import asyncio
import dataclasses
import sys

from sqlalchemy.exc import SQLAlchemyError

from travel_expense_engine.config import Settings, configure_logging, get_settings
from travel_expense_engine.database import create_schema, dispose_db, init_db
from travel_expense_engine.models import Base


async def run(settings: Settings) -> None:
    init_db(settings)
    try:
        await create_schema()
    finally:
        await dispose_db()


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create travel expense tables")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="Async database URL",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the tables without touching the database",
    )

    args = parser.parse_args()
    configure_logging(settings)

    print("Travel Expense Schema")
    print("=" * 50)
    print(f"Database: {args.database_url.split('@')[-1] if '@' in args.database_url else args.database_url}")
    print()

    tables = list(Base.metadata.sorted_tables)
    for table in tables:
        print(f"  {table.name}")
    print()

    if args.dry_run:
        print(f"[DRY RUN] Would create {len(tables)} tables")
        return 0

    try:
        asyncio.run(run(dataclasses.replace(settings, database_url=args.database_url)))
    except SQLAlchemyError as e:
        print(f"ERROR: Could not create schema: {e}")
        return 1

    print(f"Created {len(tables)} tables (existing tables left as they are)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

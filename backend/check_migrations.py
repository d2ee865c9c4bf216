#!/usr/bin/env python3
"""Quick script to check if the championship tables exist in the database"""

import sys
import traceback

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.database import engine

REQUIRED_TABLES = [
    "season",
    "seasonrounddate",
    "club",
    "team",
    "player",
    "fixture",
    "selection",
    "individualmatch",
    "scratchnotice",
]


def check_tables():
    """Check if required tables exist"""
    existing_tables = inspect(engine).get_table_names()

    print("Checking for required championship tables...")
    print(f"Database: {engine.url}")
    print()

    missing_tables = []
    for table in REQUIRED_TABLES:
        if table in existing_tables:
            print(f"✓ {table} exists")
        else:
            print(f"✗ {table} MISSING")
            missing_tables.append(table)

    print()
    if missing_tables:
        print("ERROR: Missing tables detected!")
        print("Run migrations with: alembic upgrade head")
        return False
    print("All required tables exist!")
    return True


if __name__ == "__main__":
    try:
        success = check_tables()
        sys.exit(0 if success else 1)
    except SQLAlchemyError as e:
        print(f"Error checking tables: {e}")
        traceback.print_exc()
        sys.exit(1)

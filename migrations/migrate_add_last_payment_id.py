#!/usr/bin/env python3
"""Migration script to add last_payment_id column to day_entries table.

This migration adds a last_payment_id column to the day_entries table:
- last_payment_id (INTEGER, default=0)

The column records the highest payment id ever issued for an entry, so ids
of removed payments are not handed out again. Existing entries are
backfilled with their highest payment_no.

Usage:
    python migrations/migrate_add_last_payment_id.py [--db-path PATH] [--dry-run]
"""

import sys
from pathlib import Path

# Add src to path so we can import tillbook modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from tillbook.database.factories import create_sqlite_database


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None, dry_run: bool = False) -> int:
    """Add last_payment_id to day_entries and backfill it.

    Args:
        database_path: Path to database file. If None, uses default location.
        dry_run: Count the entries that would be backfilled without changing anything

    Returns:
        Number of entries with payments that were (or would be) backfilled

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        engine = db.session_factory.kw["bind"]

        if "day_entries" not in inspect(engine).get_table_names():
            raise Exception("Table 'day_entries' does not exist. Please initialize the database schema first.")

        if column_exists(engine, "day_entries", "last_payment_id"):
            print("Migration already applied: last_payment_id column exists in day_entries table")
            return 0

        with engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(DISTINCT entry_id) FROM payments")).scalar_one()

        if dry_run:
            print(f"Would add last_payment_id and backfill {count} entr(y/ies) with payments")
            return count

        print("Starting migration: adding last_payment_id column...")
        with engine.begin() as conn:
            conn.execute(text(
                "ALTER TABLE day_entries ADD COLUMN last_payment_id INTEGER NOT NULL DEFAULT 0"
            ))
            print("  Added column: last_payment_id")
            conn.execute(text(
                "UPDATE day_entries SET last_payment_id = COALESCE("
                "(SELECT MAX(payment_no) FROM payments WHERE payments.entry_id = day_entries.id), 0)"
            ))
            print(f"  Backfilled {count} entr(y/ies) with payments")

        print("Migration completed successfully!")
        return count

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Add last_payment_id column to day_entries table"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides TILLBOOK_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, dry_run=args.dry_run)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

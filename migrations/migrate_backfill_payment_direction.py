#!/usr/bin/env python3
"""Migration script to tag legacy payments with a direction.

Payments recorded before cash movements carried a direction have a NULL
``direction`` column. Every such payment was a deduction from the till, so
this migration sets them to 'OUT'. Running it again changes nothing.

Reconciliation already reads NULL as OUT; the backfill makes the stored
data say so explicitly.

Usage:
    python migrations/migrate_backfill_payment_direction.py [--db-path PATH] [--dry-run]
"""

import sys
from pathlib import Path

# Add src to path so we can import tillbook modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect
from tillbook.database.factories import create_sqlite_database
from tillbook.database.models import Payment
from tillbook.domain.entities import PaymentDirection


def migrate_database(database_path: str | None = None, dry_run: bool = False) -> int:
    """Set direction='OUT' on payments that have none.

    Args:
        database_path: Path to database file. If None, uses default location.
        dry_run: Count the affected payments without changing them

    Returns:
        Number of payments updated (or that would be updated)

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")

            if "payments" not in inspect(engine).get_table_names():
                raise Exception("Table 'payments' does not exist. Please initialize the database schema first.")

            legacy = session.query(Payment).filter(Payment.direction.is_(None))
            count = legacy.count()
            if count == 0:
                print("Migration already applied: every payment has a direction")
                return 0

            if dry_run:
                print(f"Would set direction to OUT on {count} payment(s)")
                return count

            print(f"Starting migration: tagging {count} legacy payment(s) as OUT...")
            legacy.update({"direction": PaymentDirection.OUT.value}, synchronize_session=False)
            session.commit()
        finally:
            session.close()

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
        description="Backfill the direction of legacy payments as OUT"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides TILLBOOK_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report how many payments would change without writing",
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

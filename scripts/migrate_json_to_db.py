#!/usr/bin/env python3
"""
Migrate a JSON record store into a SQLite record store.

Usage:
    python scripts/migrate_json_to_db.py --json data/store.json --db data/store.db
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalysthr.database import SqlRecordStore
from catalysthr.errors import PersistenceError
from catalysthr.schema import validate_candidate
from catalysthr.storage import load_store


def migrate(json_path: Path, db_path: Path, dry_run: bool = False):
    """
    Copy every collection of a JSON store into a SQLite store.

    Candidate records are validated first; invalid ones are skipped so the
    pipeline can still hydrate from the database. Records already present in
    the database are left alone.

    Args:
        json_path: Path to JSON store file
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
    """
    print(f"Loading records from {json_path}...")
    collections = load_store(json_path)["collections"]
    total = sum(len(records) for records in collections.values())
    print(f"Found {total} records in {len(collections)} collections")

    if dry_run:
        print("\n[DRY RUN] Would migrate:")
        for name, records in collections.items():
            print(f"  {name}: {len(records)} records")
        return True

    print(f"\nInitializing database at {db_path}...")
    db = SqlRecordStore(db_path)

    migrated = 0
    skipped = 0
    errors = 0

    for name, records in collections.items():
        for record_id, record in records.items():
            if name == "candidates":
                problems = validate_candidate(record)
                if problems:
                    print(f"Skipping candidates/{record_id}: {'; '.join(problems)}")
                    skipped += 1
                    continue
            try:
                if db.get(name, record_id) is not None:
                    print(f"{name}/{record_id} already exists, skipping")
                    skipped += 1
                    continue
                db.put(name, record_id, record)
                migrated += 1
            except PersistenceError as e:
                print(f"Error migrating {name}/{record_id}: {e}")
                errors += 1

    print("\nMigration complete!")
    print(f"   Migrated: {migrated}")
    print(f"   Skipped:  {skipped}")
    print(f"   Errors:   {errors}")
    return errors == 0


def main():
    parser = argparse.ArgumentParser(description="Migrate a JSON record store to SQLite")
    parser.add_argument("--json", type=Path, default=Path("data/store.json"),
                        help="Path to JSON store file")
    parser.add_argument("--db", type=Path, default=Path("data/store.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be migrated without writing")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    try:
        ok = migrate(args.json, args.db, dry_run=args.dry_run)
    except PersistenceError as e:
        print(f"Migration failed: {e}")
        sys.exit(1)
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()

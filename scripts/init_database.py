#!/usr/bin/env python3
"""
Initialize the SQLite offline store with schema and seed data.

Usage:
    python scripts/init_database.py [--keep]

Output:
    aapda_mitra/data/aapda_mitra.db
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from aapda_mitra.database import Database, LATEST_SCHEMA_VERSION
from aapda_mitra.offline import seed_offline_data


def init_database(keep_existing: bool = False):
    """Initialize the database with schema."""
    print("Initializing database...")

    # Create database (defaults to the package data directory)
    db = Database()

    if not keep_existing:
        print("Dropping existing tables...")
        db.drop_tables()

    print(f"Upgrading schema to generation {LATEST_SCHEMA_VERSION}...")
    db.create_tables()

    seeded = seed_offline_data(db)

    print(f"\nDatabase initialized at: {db.db_url}")
    print("\nCollections:")
    print("  - personal_contacts (generation 1)")
    print("  - user_profile (generation 1)")
    print(f"  - alerts (generation 2, {seeded['alerts']} seeded)")
    print(f"  - shelters (generation 2, {seeded['shelters']} seeded)")
    print("  - survival_guides (generation 2)")

    db.close()
    return True


if __name__ == "__main__":
    success = init_database(keep_existing="--keep" in sys.argv)
    sys.exit(0 if success else 1)

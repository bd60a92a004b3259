#!/usr/bin/env python3
"""Seed a demo username store.

Usage:
    python scripts/seed_demo.py

This script:
1. Opens the embedded demo database (demo.db in the project root)
2. Adds a few annotated entries to both lists
3. Bulk-imports a batch of plain handles
4. Prints the resulting counts
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from userlists.config import Settings  # noqa: E402
from userlists.db.session import get_database  # noqa: E402
from userlists.lists import entries  # noqa: E402
from userlists.lists.errors import ConflictError  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"

DEMO_ENTRIES = [
    ("@PythonOrg", "following", "Python", "Language news"),
    ("@fastapi", "following", "FastAPI", None),
    ("@sqlalchemy", "following", "SQLAlchemy", "ORM and Core releases"),
    ("@Ada_Lovelace", "followers", "Ada", "Met at the meetup"),
    ("@grace_hopper", "followers", "Grace", None),
]

DEMO_BULK_FOLLOWERS = ["@alan_turing", "linus ", "@GUIDO", "", "@grace_hopper"]


def seed_database() -> None:
    """Seed the demo database with entries on both lists."""
    db = get_database(Settings(backend="embedded", db_path=DEMO_DB_PATH))

    print("Creating entries...")
    for username, list_type, display_name, notes in DEMO_ENTRIES:
        entry_input = entries.EntryInput(
            username=username,
            list_type=list_type,
            display_name=display_name,
            notes=notes,
        )
        try:
            entry = entries.create_entry(db, entry_input)
            print(f"  Created: @{entry.username} ({entry.list_type})")
        except ConflictError as e:
            print(f"  Skipped: {e.message}")

    print("Bulk importing followers...")
    result = entries.bulk_import(db, DEMO_BULK_FOLLOWERS, "followers")
    print(f"  Imported {result.imported} of {result.total}")

    stats = entries.stats(db)
    print(f"Following: {stats.following}")
    print(f"Followers: {stats.followers}")
    print(f"Total: {stats.total}")


def main():
    seed_database()
    print(f"Demo database ready: {DEMO_DB_PATH}")


if __name__ == "__main__":
    main()

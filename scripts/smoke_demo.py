#!/usr/bin/env python3
"""Smoke test for the demo username store.

Validates that the demo database was seeded and that the API serves it.

Usage:
    python scripts/seed_demo.py
    python scripts/smoke_demo.py

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from fastapi.testclient import TestClient  # noqa: E402

from userlists.api.app import create_app  # noqa: E402
from userlists.config import Settings  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"


def check_database_exists() -> bool:
    """Check that demo database exists."""
    if not DEMO_DB_PATH.exists():
        print(f"FAIL: Demo database not found: {DEMO_DB_PATH}")
        return False
    print(f"OK: Database exists: {DEMO_DB_PATH}")
    return True


def check_health(client: TestClient) -> bool:
    """Check that the health endpoint reports the embedded backend."""
    response = client.get("/api/health")
    body = response.json()
    if response.status_code != 200 or body["data"]["backend"] != "embedded":
        print(f"FAIL: Health check returned {response.status_code}: {body}")
        return False
    print("OK: Health check")
    return True


def check_stats(client: TestClient) -> bool:
    """Check that both lists are populated and the total adds up."""
    data = client.get("/api/stats").json()["data"]
    if data["following"] == 0 or data["followers"] == 0:
        print(f"FAIL: Empty list in stats: {data}")
        return False
    if data["total"] != data["following"] + data["followers"]:
        print(f"FAIL: Total does not add up: {data}")
        return False
    print(f"OK: Stats {data}")
    return True


def check_search(client: TestClient) -> bool:
    """Check that a case-insensitive search finds a seeded entry."""
    data = client.get("/api/search", params={"q": "PYTHON"}).json()["data"]
    if not any(e["username"] == "pythonorg" for e in data):
        print(f"FAIL: Search did not find pythonorg: {data}")
        return False
    print(f"OK: Search found {len(data)} entries")
    return True


def main() -> int:
    """Run all smoke checks."""
    print("Running smoke checks on demo database...")
    print("=" * 50)

    if not check_database_exists():
        return 1

    app = create_app(Settings(backend="embedded", db_path=DEMO_DB_PATH))
    client = TestClient(app)

    checks = [
        check_health(client),
        check_stats(client),
        check_search(client),
    ]

    print("=" * 50)
    if all(checks):
        print("All checks passed!")
        return 0
    print("Some checks failed.")
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Create the Command API tables.

The app does the same on startup; run this to prepare a database ahead of a deploy.
"""

import sys
from pathlib import Path

from sqlalchemy import inspect

# Make `commandapi.app` importable when run as a plain script.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from commandapi.app import database  # noqa: E402


def migrate() -> bool:
    print("Initializing database with all models...")
    database.init_db()
    print("✓ Database initialized successfully")

    inspector = inspect(database.engine)
    if "commands" not in inspector.get_table_names():
        print("✗ commands table not found")
        return False

    columns = {c["name"] for c in inspector.get_columns("commands")}
    missing = {"id", "how_to", "platform", "command_line"} - columns
    if missing:
        print(f"✗ commands table is missing columns: {', '.join(sorted(missing))}")
        return False

    print("✓ commands table ready")
    return True


if __name__ == "__main__":
    success = migrate()
    sys.exit(0 if success else 1)

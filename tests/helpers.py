"""Helper utilities for tests."""

from pathlib import Path
import sqlite3


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        with open(migration_file, "r") as f:
            conn.executescript(f.read())

    conn.commit()


def store_raw_slot(conn: sqlite3.Connection, name: str, payload: str) -> None:
    """Write a slot payload directly, bypassing JSON encoding."""
    conn.execute(
        "INSERT OR REPLACE INTO slots (name, payload) VALUES (?, ?)", (name, payload)
    )
    conn.commit()

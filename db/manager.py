"""Database manager for SQLite connections, paths and schema migrations."""

import sqlite3
from contextlib import contextmanager
from typing import List, Set
from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger("db")


class DatabaseManager:
    """Manages database connections, paths and the migration ledger.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        """Get the current database path."""
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path."""
        return get_migrations_dir()

    def available_migrations(self) -> List[str]:
        """List migration file names in apply order."""
        migrations_dir = self.get_migrations_dir()
        if not migrations_dir.exists():
            return []
        return sorted(path.name for path in migrations_dir.glob("*.sql"))

    def applied_migrations(self, conn) -> Set[str]:
        """Get the set of migration files already recorded in the database."""
        _init_schema_migrations_table(conn)
        cursor = conn.execute("SELECT migration_file FROM schema_migrations")
        return {row[0] for row in cursor.fetchall()}

    def migrate(self) -> List[str]:
        """Apply every pending migration.

        Returns:
            Names of the migrations applied by this call (empty if up to date).
        """
        with self.connect() as conn:
            applied = self.applied_migrations(conn)
            pending = [m for m in self.available_migrations() if m not in applied]

            for migration_file in pending:
                self._apply(conn, migration_file)

        return pending

    def _apply(self, conn, migration_file: str) -> None:
        with open(self.get_migrations_dir() / migration_file, "r") as f:
            sql = f.read()

        try:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                (migration_file,),
            )
            conn.commit()
            logger.info(f"Applied migration: {migration_file}")
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration_file}: {e}")
            raise


def _init_schema_migrations_table(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()

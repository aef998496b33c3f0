"""Slot storage: named, whole-collection records in a durable key-value table.

Each slot ("expenses", "categories", ...) holds one JSON array. Writes always
replace the full array; there are no incremental updates.
"""

import json
import sqlite3
from typing import Dict, List, Optional
from logger import get_logger

logger = get_logger("db")


class StorageError(Exception):
    """Raised when the durable store refuses a write or read."""


class SlotStore:
    """Reads and writes named slots through a database manager.

    Args:
        db_manager: Anything with a ``connect()`` context manager yielding a
            sqlite3 connection whose schema has the ``slots`` table.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def read(self, slot: str) -> Optional[str]:
        """Get the raw payload stored in a slot.

        Args:
            slot: Slot name.

        Returns:
            The stored JSON text, or None if the slot has never been written.

        Raises:
            StorageError: If the database cannot be read.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute(
                    "SELECT payload FROM slots WHERE name = ?", (slot,)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Could not read slot '{slot}': {e}") from e

        return row[0] if row else None

    def write(self, slot: str, records: List[dict]) -> None:
        """Replace the contents of a single slot."""
        self.write_many({slot: records})

    def write_many(self, slots: Dict[str, object]) -> None:
        """Replace several slots in one database transaction.

        Args:
            slots: Mapping of slot name to a JSON-serialisable value.

        Raises:
            StorageError: If the write fails. Nothing is committed in that case.
        """
        rows = [(name, json.dumps(value)) for name, value in slots.items()]

        try:
            with self.db_manager.connect() as conn:
                try:
                    conn.executemany(
                        """
                        INSERT INTO slots (name, payload, updated_at)
                        VALUES (?, ?, CURRENT_TIMESTAMP)
                        ON CONFLICT(name) DO UPDATE SET
                            payload = excluded.payload,
                            updated_at = excluded.updated_at
                        """,
                        rows,
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            logger.error(f"Failed to write slots {sorted(slots)}: {e}")
            raise StorageError(f"Could not save {', '.join(sorted(slots))}: {e}") from e

        logger.debug(f"Wrote slots: {', '.join(sorted(slots))}")

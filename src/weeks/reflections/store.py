"""SQLite storage for reflections."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from ..errors import StorageError
from .models import Reflection, ReflectionType, decode_reflection_type


def _encode_date(value: datetime) -> str:
    """Store dates as UTC ISO strings so they sort as text."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class ReflectionStore:
    """Persistent storage for reflections using SQLite.

    Every mutating call commits before returning. Rows are listed newest
    first; reflections written at the same instant keep insertion order.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(self.db_path)
            except (OSError, sqlite3.Error) as e:
                raise StorageError(f"Cannot open {self.db_path}: {e}") from e
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the reflections table if it doesn't exist."""
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS reflections (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    date        TEXT NOT NULL,
                    type        TEXT NOT NULL DEFAULT 'Spent Well',
                    explanation TEXT NOT NULL DEFAULT ''
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_reflections_date ON reflections(date)"
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize {self.db_path}: {e}") from e

    def create(
        self,
        type: ReflectionType = ReflectionType.SPENT_WELL,
        explanation: str = "",
        now: datetime | None = None,
    ) -> Reflection:
        """Store a new reflection dated now.

        Args:
            type: How the day was spent.
            explanation: Free text.
            now: Timestamp to use; the current time if None.

        Returns:
            The stored reflection with its id.
        """
        encoded_date = _encode_date(now or datetime.now(timezone.utc))
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO reflections (date, type, explanation) VALUES (?, ?, ?)",
                (encoded_date, type.label, explanation),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot save reflection: {e}") from e

        return Reflection(
            id=cursor.lastrowid,
            date=datetime.fromisoformat(encoded_date),
            type=type,
            explanation=explanation,
        )

    def list(self, limit: int | None = None) -> list[Reflection]:
        """Get reflections, newest first.

        Args:
            limit: Maximum number of reflections to return, all if None.

        Returns:
            Reflections sorted by date descending.
        """
        query = (
            "SELECT id, date, type, explanation FROM reflections "
            "ORDER BY date DESC, id ASC"
        )
        params: tuple[int, ...] = ()
        if limit is not None:
            if limit <= 0:
                return []
            query += " LIMIT ?"
            params = (limit,)

        conn = self._get_connection()
        cursor = conn.execute(query, params)
        return [self._row_to_reflection(row) for row in cursor.fetchall()]

    def get(self, reflection_id: int) -> Reflection | None:
        """Get a reflection by id, or None if it doesn't exist."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT id, date, type, explanation FROM reflections WHERE id = ?",
            (reflection_id,),
        )
        row = cursor.fetchone()
        return self._row_to_reflection(row) if row else None

    def count(self) -> int:
        """Number of stored reflections."""
        conn = self._get_connection()
        return conn.execute("SELECT COUNT(*) FROM reflections").fetchone()[0]

    def delete(self, reflection: Reflection | int) -> bool:
        """Delete a reflection.

        Args:
            reflection: The reflection or its id.

        Returns:
            True if a reflection was deleted, False if it was already gone.
        """
        reflection_id = reflection.id if isinstance(reflection, Reflection) else reflection
        if reflection_id is None:
            return False

        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM reflections WHERE id = ?", (reflection_id,)
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot delete reflection {reflection_id}: {e}") from e
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_reflection(self, row: sqlite3.Row) -> Reflection:
        """Convert a database row to a Reflection."""
        return Reflection(
            id=row["id"],
            date=datetime.fromisoformat(row["date"]),
            type=decode_reflection_type(row["type"]),
            explanation=row["explanation"],
        )

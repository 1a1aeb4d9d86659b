"""SQLite database utilities."""

from __future__ import annotations

import sqlite3
from pathlib import Path


class DatabaseManager:
    """Read-only database connection manager.

    Owns a single connection to an existing database file. Supports the
    context manager protocol for automatic connection cleanup.
    """

    def __init__(self, db_path: Path) -> None:
        """Open the database.

        Args:
            db_path: Absolute path or project-relative path to database file.

        Raises:
            FileNotFoundError: If the database file does not exist.
            sqlite3.Error: If the connection fails.
        """
        self.db_path = Path(db_path)
        self.conn: sqlite3.Connection | None = open_readonly(self.db_path)

    def get_connection(self) -> sqlite3.Connection:
        """Get the shared database connection.

        Returns:
            SQLite connection.

        Raises:
            RuntimeError: If the manager was already closed.
        """
        if self.conn is None:
            raise RuntimeError(f"Database connection already closed: {self.db_path}")
        return self.conn

    def close(self) -> None:
        """Close the database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> DatabaseManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_readonly(db_path: Path) -> sqlite3.Connection:
    """Open an existing database file in read-only mode.

    Args:
        db_path: Absolute path or project-relative path to database file.

    Returns:
        SQLite connection.

    Raises:
        FileNotFoundError: If the database file does not exist.
        sqlite3.Error: If database connection fails.
    """
    resolved = db_path.resolve()
    if not resolved.is_file():
        raise FileNotFoundError(f"Database file not found: {resolved}")
    return sqlite3.connect(f"{resolved.as_uri()}?mode=ro", uri=True)

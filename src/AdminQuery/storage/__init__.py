"""Storage layer for AdminQuery.

Provides read-only database access and persistent SQLite relations whose
named scopes back declared list queries.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from AdminQuery.storage.db import DatabaseManager
from AdminQuery.storage.relation import (
    SqliteRelation,
    TableModel,
    UnknownScopeError,
    order_scope,
    where_scope,
)
from AdminQuery.utils.log import log

if TYPE_CHECKING:
    from AdminQuery.config import AppConfig


def create_database(config: AppConfig) -> DatabaseManager:
    """Open the configured database.

    Args:
        config: Application configuration containing database settings.

    Returns:
        Database manager owning the read-only connection.
    """
    db_path = Path(config.database.path)
    log.info("Database: %s", db_path)
    return DatabaseManager(db_path)


__all__ = [
    "DatabaseManager",
    "SqliteRelation",
    "TableModel",
    "UnknownScopeError",
    "order_scope",
    "where_scope",
    "create_database",
]

"""Database domain configuration for the read-only backing store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from AdminQuery.config.common import (
    expect_str,
    get_required_value,
    get_section,
    optional_str,
)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database configuration.

    Attributes:
        path: SQLite database file, after applying ``path_env``.
        path_env: Optional environment variable overriding ``path``.
    """

    path: str
    path_env: str | None


def load_database(raw: Mapping[str, Any]) -> DatabaseConfig:
    """Load database domain config from raw mapping.

    When ``database.path_env`` names a set environment variable, its value
    replaces ``database.path``.
    """
    section = get_section(raw, "database", required=True)
    path = expect_str(get_required_value(section, "path", "database.path"), "database.path")
    path_env = optional_str(section, "path_env", "database.path_env")
    if path_env:
        path = os.getenv(path_env, "") or path
    return DatabaseConfig(path=path, path_env=path_env)


def check_database(config: DatabaseConfig) -> None:
    """Validate database domain constraints."""
    if not config.path.strip():
        raise ValueError("database.path must not be empty")

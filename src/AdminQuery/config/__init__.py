"""Public configuration API for AdminQuery."""

from __future__ import annotations

from AdminQuery.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from AdminQuery.config.database import DatabaseConfig
from AdminQuery.config.output import OutputConfig
from AdminQuery.config.queries import ColumnConfig, QueryConfig
from AdminQuery.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "DatabaseConfig",
    "OutputConfig",
    "QueryConfig",
    "ColumnConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]

"""Application config: domain sections plus YAML loading with default layering."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from AdminQuery.config.database import DatabaseConfig, check_database, load_database
from AdminQuery.config.output import OutputConfig, check_output, load_output
from AdminQuery.config.queries import QueryConfig, check_queries, load_queries
from AdminQuery.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Validated configuration for one CLI invocation."""

    runtime: RuntimeConfig
    database: DatabaseConfig
    output: OutputConfig
    queries: Mapping[str, QueryConfig]

    def query(self, name: str) -> QueryConfig:
        """Look up a declared list query.

        Raises:
            KeyError: If ``name`` is not declared under ``queries``.
        """
        if name not in self.queries:
            raise KeyError(f"Unknown query: {name} (declared: {', '.join(self.queries)})")
        return self.queries[name]


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Build an AppConfig from an already merged mapping.

    Each section is loaded first and checked afterwards, so type errors are
    reported before range errors.
    """
    config = AppConfig(
        runtime=load_runtime(raw),
        database=load_database(raw),
        output=load_output(raw),
        queries=load_queries(raw),
    )
    check_runtime(config.runtime)
    check_database(config.database)
    check_output(config.output)
    check_queries(config.queries)
    return config


def load_config(path: Path) -> AppConfig:
    """Load a single YAML file as the complete configuration."""
    return parse_config_dict(read_yaml(path))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load ``default_path`` and deep-merge ``config_path`` over it.

    Query declarations merge by name: an override may add queries or change
    keys of a default query.
    """
    raw = read_yaml(default_path)
    if Path(config_path).resolve() != Path(default_path).resolve():
        raw = merge_config_dicts(raw, read_yaml(config_path))
    return parse_config_dict(raw)


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document root is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    return parse_yaml(path.read_text(encoding="utf-8"))


def parse_yaml(text: str) -> dict[str, Any]:
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mappings; lists and scalars in ``override`` replace ``base``."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            value = merge_config_dicts(current, value)
        merged[key] = value
    return merged

"""Runtime domain configuration: the ``log`` section."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from AdminQuery.config.common import expect_bool, expect_str, get_optional_value, get_section


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Logging settings applied before each command runs.

    Attributes:
        level: Console log level name, upper-cased.
        to_file: Whether to mirror logs to ``{dir}/{action}/``.
        dir: Base directory for log files.
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "log"


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Read the ``log`` section; every key falls back to its default.

    Raises:
        TypeError: If a value has the wrong type.
    """
    section = get_section(raw, "log", required=False)
    defaults = RuntimeConfig()
    return RuntimeConfig(
        level=expect_str(get_optional_value(section, "level", defaults.level), "log.level").strip().upper(),
        to_file=expect_bool(get_optional_value(section, "to_file", defaults.to_file), "log.to_file"),
        dir=expect_str(get_optional_value(section, "dir", defaults.dir), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Reject unknown level names and an empty log directory.

    Raises:
        ValueError: If a value is out of range.
    """
    if not isinstance(logging.getLevelName(config.level), int):
        raise ValueError(f"log.level must be a logging level name, got {config.level!r}")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is enabled")

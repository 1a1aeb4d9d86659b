"""AdminQuery logging.

All modules log through the shared ``log`` logger. Records are formatted as
``mm-dd HH:MM:SS [LVL] message`` with a four-letter level tag.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

LOGGER_NAME: Final = "AdminQuery"

_LEVEL_TAGS: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}

log = logging.getLogger(LOGGER_NAME)


class _LevelTagFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib method name
        record.leveltag = _LEVEL_TAGS.get(record.levelno, record.levelname[:4])
        return super().format(record)


def _formatter() -> logging.Formatter:
    return _LevelTagFormatter(fmt="%(asctime)s [%(leveltag)s] %(message)s", datefmt="%m-%d %H:%M:%S")


def _file_handler(action: str, log_dir: str) -> logging.FileHandler:
    """Create ``{log_dir}/{action}/{action}_{mmddHHMMSS}.log`` at debug level."""
    action_dir = Path(log_dir or "log") / action
    action_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%m%d%H%M%S")
    handler = logging.FileHandler(action_dir / f"{action}_{stamp}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """(Re)configure the AdminQuery logger.

    Replaces any handlers installed by a previous call. The console handler
    uses ``level``; the file handler, when enabled, keeps debug records too,
    including search values and filters that were ignored.

    Args:
        level: Console level name (``DEBUG``, ``INFO`` ...); unknown names mean INFO.
        action: CLI action name; required for file logging.
        log_to_file: Whether to mirror logs to a file under ``log_dir``.
        log_dir: Base directory for log files.
    """
    console_level = logging.getLevelName((level or "INFO").upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO

    console = logging.StreamHandler()
    console.setLevel(console_level)
    handlers: list[logging.Handler] = [console]
    if log_to_file and action:
        handlers.append(_file_handler(action, log_dir))

    formatter = _formatter()
    log.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        log.addHandler(handler)
    log.setLevel(min(handler.level for handler in handlers))
    log.propagate = False

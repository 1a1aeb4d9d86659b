"""CLI package for AdminQuery command orchestration.

This package contains the modular CLI components for the list command,
factored into separate modules for better maintainability and testability.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from AdminQuery.cli.runner import CommandRunner
from AdminQuery.cli.ui import cli


def main() -> None:
    """Run AdminQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()

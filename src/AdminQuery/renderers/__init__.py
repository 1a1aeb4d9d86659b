"""Output renderers for list results.

Provides the OutputWriter abstraction with console and JSON implementations,
the table and toggle-link adapters they consume, and a factory function to
instantiate writers based on configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from AdminQuery.renderers.base import MultiOutputWriter, OutputWriter
from AdminQuery.renderers.console import ConsoleOutputWriter, render_text
from AdminQuery.renderers.json import JsonFileWriter, render_json
from AdminQuery.renderers.links import filter_toggle_params, sort_toggle_params, toggle_href
from AdminQuery.renderers.mapper import build_query_view
from AdminQuery.renderers.table import Column, build_table

if TYPE_CHECKING:
    from AdminQuery.config import AppConfig


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Args:
        config: Application configuration.

    Returns:
        OutputWriter delegating to every configured format.

    Raises:
        ValueError: If no known format is configured.
    """
    writers: list[OutputWriter] = []
    if "console" in config.output.formats:
        writers.append(ConsoleOutputWriter())
    if "json" in config.output.formats:
        writers.append(JsonFileWriter(config.output.base_dir))

    if not writers:
        raise ValueError("No output writers configured")
    return MultiOutputWriter(writers)


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonFileWriter",
    "MultiOutputWriter",
    "Column",
    "build_table",
    "build_query_view",
    "filter_toggle_params",
    "sort_toggle_params",
    "toggle_href",
    "render_json",
    "render_text",
    "create_output_writer",
]

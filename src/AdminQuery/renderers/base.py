"""Base classes for output writers.

Provides abstraction for writing list results to console or files.
Separates control flow from output logic for better testability.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from AdminQuery.renderers.view_models import QueryView, TableView


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_list_result(
        self,
        name: str,
        table: TableView,
        query: QueryView,
        total: int | None,
    ) -> None:
        """Write the result of one list query.

        Args:
            name: Declared query name.
            table: Rows of the current page.
            query: Introspected query state.
            total: Matching rows before pagination, if known.
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Finalize output (e.g., write accumulated results to file).

        Args:
            action: The CLI command name (e.g., 'list').
        """


@dataclass(slots=True)
class MultiOutputWriter(OutputWriter):
    """Delegate output to multiple writers."""

    writers: Sequence[OutputWriter]

    def write_list_result(
        self,
        name: str,
        table: TableView,
        query: QueryView,
        total: int | None,
    ) -> None:
        """Send list results to all writers."""
        for writer in self.writers:
            writer.write_list_result(name, table, query, total)

    def finalize(self, action: str) -> None:
        """Finalize all writers."""
        for writer in self.writers:
            writer.finalize(action)

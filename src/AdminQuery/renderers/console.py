"""Console text output renderers.

Renders a list result into a plain-text table preceded by the query state.
Provides ConsoleOutputWriter implementation for command output.
"""

from __future__ import annotations

from AdminQuery.renderers.base import OutputWriter
from AdminQuery.renderers.view_models import QueryView, TableView
from AdminQuery.utils.log import log


def render_state(query: QueryView) -> list[str]:
    """Render search values, filters and sorting as summary lines.

    Active filter and sort scopes are wrapped in brackets; an active sort
    scope also shows its direction.
    """
    lines: list[str] = []

    active_search = [f"{field.label}={field.value}" for field in query.search_fields if field.present]
    if active_search:
        lines.append("Search: " + ", ".join(active_search))

    for group in query.filter_groups:
        scopes = " ".join(f"[{link.label}]" if link.active else link.label for link in group.links)
        lines.append(f"{group.label}: {scopes}")

    if query.sort_links:
        sorts = " ".join(
            f"[{link.label} {link.direction}]" if link.active else link.label for link in query.sort_links
        )
        lines.append(f"Sort: {sorts}")

    if query.operations:
        lines.append("Scopes: " + " -> ".join(query.operations))
    return lines


def render_table(table: TableView) -> list[str]:
    """Render a table view as aligned text lines."""
    if not table.columns:
        return []
    widths = [len(col.label) for col in table.columns]
    for row in table.rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))

    def _line(cells: tuple[str, ...] | list[str]) -> str:
        return " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(cells)).rstrip()

    lines = [_line([col.label for col in table.columns])]
    lines.append("-+-".join("-" * width for width in widths))
    lines.extend(_line(row) for row in table.rows)
    return lines


def render_text(table: TableView, query: QueryView, total: int | None = None) -> str:
    """Render a list result into a human-readable text block.

    Args:
        table: Rows of the current page.
        query: Introspected query state.
        total: Matching rows before pagination, if known.

    Returns:
        A formatted string ready to be printed.
    """
    lines = render_state(query)
    if lines:
        lines.append("")
    lines.extend(render_table(table))
    if table.empty:
        lines.append("(no rows)")
    count = f"{len(table.rows)} rows"
    if total is not None and total != len(table.rows):
        count += f" of {total}"
    lines.append(count)
    return "\n".join(lines) + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_list_result(
        self,
        name: str,
        table: TableView,
        query: QueryView,
        total: int | None,
    ) -> None:
        """Write list result to console.

        Args:
            name: Declared query name.
            table: Rows of the current page.
            query: Introspected query state.
            total: Matching rows before pagination, if known.
        """
        log.info("=== %s ===", name)
        for line in render_text(table, query, total).splitlines():
            log.info(line)

    def finalize(self, action: str) -> None:
        """No-op for console output."""

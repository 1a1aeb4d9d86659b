"""Row/column table building from records and column descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Sequence

from AdminQuery.renderers.view_models import ColumnHeader, TableView


@dataclass(frozen=True, slots=True)
class Column:
    """Column descriptor.

    Attributes:
        name: Column key; also the record key or attribute read by default.
        label: Header label; defaults to the humanized name.
        value: Optional callable computing the cell from the whole record.
    """

    name: str
    label: str | None = None
    value: Callable[[Any], Any] | None = None

    @property
    def header(self) -> str:
        return self.label or humanize(self.name)

    def cell(self, record: Any) -> Any:
        if self.value is not None:
            return self.value(record)
        if isinstance(record, Mapping):
            return record.get(self.name)
        return getattr(record, self.name, None)


def build_table(records: Iterable[Any], columns: Sequence[Column]) -> TableView:
    """Build a table view.

    Records may be mappings or objects; cells are read per ``Column.cell`` and
    formatted with :func:`format_cell`.

    Args:
        records: Rows to display, in display order.
        columns: Column descriptors, in display order.

    Returns:
        Table view of display strings.
    """
    headers = tuple(ColumnHeader(name=col.name, label=col.header) for col in columns)
    rows = tuple(tuple(format_cell(col.cell(record)) for col in columns) for record in records)
    return TableView(columns=headers, rows=rows)


def format_cell(value: Any) -> str:
    """Format one cell value for display."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def humanize(name: str) -> str:
    """Turn ``by_due_date`` into ``By due date``."""
    text = name.replace("_", " ").strip()
    return text[:1].upper() + text[1:]

"""View models for output rendering.

Display-oriented structures built from a resolved list query and its rows.
Used by OutputWriter implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class ColumnHeader:
    name: str
    label: str


@dataclass(frozen=True, slots=True)
class TableView:
    """Rows of display strings under their column headers."""

    columns: tuple[ColumnHeader, ...]
    rows: tuple[tuple[str, ...], ...]

    @property
    def empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True, slots=True)
class SearchFieldView:
    name: str
    label: str
    value: str
    present: bool


@dataclass(frozen=True, slots=True)
class ToggleLinkView:
    """One clickable filter or sort control.

    Attributes:
        scope: Scope the control toggles.
        label: Display label.
        active: Whether the scope is currently active.
        params: Parameters of the request the link leads to.
        href: Link target built from ``params``.
        direction: Current direction for active sort links, else None.
    """

    scope: str
    label: str
    active: bool
    params: Mapping[str, Any]
    href: str
    direction: str | None = None


@dataclass(frozen=True, slots=True)
class FilterGroupView:
    name: str
    label: str
    links: tuple[ToggleLinkView, ...]


@dataclass(frozen=True, slots=True)
class QueryView:
    """Introspected query state ready for display."""

    search_fields: tuple[SearchFieldView, ...]
    filter_groups: tuple[FilterGroupView, ...]
    sort_links: tuple[ToggleLinkView, ...]
    operations: tuple[str, ...]

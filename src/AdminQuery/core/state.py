"""Resolved, read-only state of a list query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from AdminQuery.core.spec import ASC, DESC


@dataclass(frozen=True, slots=True)
class SearchFieldState:
    """One declared search field and what the request made of it.

    Attributes:
        name: Field name.
        raw: Raw request string, or None when not supplied.
        value: Coerced value; None when the field is inactive.
        present: Whether the field is active (non-blank and coerced).
    """

    name: str
    raw: str | None = None
    value: Any = None
    present: bool = False


@dataclass(frozen=True, slots=True)
class FilterGroupState:
    """A filter group with its declared scopes and the active one."""

    name: str
    scopes: tuple[str, ...]
    active: str | None = None

    def is_scope_active(self, scope: str) -> bool:
        return self.active is not None and self.active == scope

    @property
    def present(self) -> bool:
        return self.active is not None


@dataclass(frozen=True, slots=True)
class SortingState:
    """Sorting scopes, the active scope and its direction."""

    scopes: tuple[str, ...]
    active: str | None = None
    direction: str = ASC

    def is_scope_active(self, scope: str) -> bool:
        return self.active is not None and self.active == scope

    @property
    def ascending(self) -> bool:
        return self.direction == ASC

    @property
    def descending(self) -> bool:
        return self.direction == DESC

    @property
    def present(self) -> bool:
        return self.active is not None

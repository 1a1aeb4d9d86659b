"""Declarative list-query specifications.

A :class:`QuerySpec` is built once (usually at import time) through
:class:`QuerySpecBuilder` and shared read-only by every query resolved from
it. Declaration order of search fields and filter groups is kept because
both resolution and display follow it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence

from AdminQuery.core.coercion import CONSTANT, Coercion

ASC = "asc"
DESC = "desc"
SORT_DIRECTIONS = (ASC, DESC)

StartingScope = Callable[[], Any]
EndingScope = Callable[[Any, Any], Any]


class QueryDeclarationError(ValueError):
    """Raised when a query declaration is inconsistent."""


@dataclass(frozen=True, slots=True)
class SearchFieldSpec:
    """A request parameter applied as a scope of the same name.

    Attributes:
        name: Parameter key under ``query`` and scope name.
        coerce: Optional coercion applied to the raw value.
    """

    name: str
    coerce: Coercion | None = None


@dataclass(frozen=True, slots=True)
class FilterGroupSpec:
    """Mutually exclusive filter scopes sharing one parameter key."""

    name: str
    scopes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SortingSpec:
    """Ordering scopes plus the fallback used when none is requested."""

    scopes: tuple[str, ...]
    default_scope: str | None = None
    default_direction: str = ASC


@dataclass(frozen=True, slots=True)
class QuerySpec:
    """Immutable declaration of a list query.

    Attributes:
        search_fields: Search fields in declaration order.
        filter_groups: Filter groups in declaration order.
        sorting: Optional sorting declaration.
        starting_scope: Optional callable returning the base collection handle.
        ending_scope: Optional callable ``(handle, query) -> handle`` applied last.
    """

    search_fields: tuple[SearchFieldSpec, ...] = ()
    filter_groups: tuple[FilterGroupSpec, ...] = ()
    sorting: SortingSpec | None = None
    starting_scope: StartingScope | None = field(default=None, compare=False)
    ending_scope: EndingScope | None = field(default=None, compare=False)

    def search_field(self, name: str) -> SearchFieldSpec | None:
        return next((item for item in self.search_fields if item.name == name), None)

    def filter_group(self, name: str) -> FilterGroupSpec | None:
        return next((item for item in self.filter_groups if item.name == name), None)


class QuerySpecBuilder:
    """Accumulate declarations and produce a frozen :class:`QuerySpec`.

    Every method returns the builder so declarations can be chained::

        spec = (
            QuerySpecBuilder()
            .set_starting_scope(lambda: tasks.all())
            .add_search_field("title_matches")
            .add_filter_group("status", ["completed", "pending"])
            .set_sorting(["by_due_date", "by_title"])
            .build()
        )

    Reusing a search field or filter group name, repeating a scope inside one
    list, or pointing ``default_scope`` outside the sorting scopes raises
    :class:`QueryDeclarationError` immediately.
    """

    def __init__(self) -> None:
        self._search_fields: list[SearchFieldSpec] = []
        self._filter_groups: list[FilterGroupSpec] = []
        self._sorting: SortingSpec | None = None
        self._starting_scope: StartingScope | None = None
        self._ending_scope: EndingScope | None = None

    def set_starting_scope(self, fn: StartingScope) -> QuerySpecBuilder:
        if not callable(fn):
            raise QueryDeclarationError("starting scope must be callable")
        self._starting_scope = fn
        return self

    def set_ending_scope(self, fn: EndingScope) -> QuerySpecBuilder:
        if not callable(fn):
            raise QueryDeclarationError("ending scope must be callable")
        self._ending_scope = fn
        return self

    def add_search_field(
        self,
        name: str,
        coerce: str | Coercion | None = None,
        *,
        choices: Sequence[str] = (),
    ) -> QuerySpecBuilder:
        """Declare a search field.

        Args:
            name: Parameter key and scope name.
            coerce: Optional coercion kind (``"date"``, ``"to_date"``, ...).
            choices: Allowed values when ``coerce`` is ``constant``.

        Returns:
            The builder.

        Raises:
            QueryDeclarationError: If the name is taken or the coercion is incomplete.
        """
        name = _check_name(name, "search field")
        self._check_unused(name)
        coercion = Coercion.of(coerce, tuple(choices)) if coerce is not None else None
        if coercion is not None:
            if not coercion.kind:
                raise QueryDeclarationError(f"search field {name}: empty coercion kind")
            if coercion.kind == CONSTANT and not coercion.choices:
                raise QueryDeclarationError(f"search field {name}: constant coercion needs choices")
            _check_unique(coercion.choices, f"search field {name} choices")
        self._search_fields.append(SearchFieldSpec(name=name, coerce=coercion))
        return self

    def add_filter_group(self, name: str, scope_names: Iterable[str]) -> QuerySpecBuilder:
        name = _check_name(name, "filter group")
        self._check_unused(name)
        scopes = tuple(_check_name(scope, f"filter group {name} scope") for scope in scope_names)
        if not scopes:
            raise QueryDeclarationError(f"filter group {name} must declare at least one scope")
        _check_unique(scopes, f"filter group {name} scopes")
        self._filter_groups.append(FilterGroupSpec(name=name, scopes=scopes))
        return self

    def set_sorting(
        self,
        scope_names: Iterable[str],
        default_scope: str | None = None,
        default_direction: str = ASC,
    ) -> QuerySpecBuilder:
        """Declare sorting; calling it again replaces the previous declaration."""
        scopes = tuple(_check_name(scope, "sorting scope") for scope in scope_names)
        if not scopes:
            raise QueryDeclarationError("sorting must declare at least one scope")
        _check_unique(scopes, "sorting scopes")
        if default_scope is not None and default_scope not in scopes:
            raise QueryDeclarationError(f"sorting default scope {default_scope} is not a declared scope")
        if default_direction not in SORT_DIRECTIONS:
            raise QueryDeclarationError(f"sorting default direction must be one of {list(SORT_DIRECTIONS)}")
        self._sorting = SortingSpec(
            scopes=scopes,
            default_scope=default_scope,
            default_direction=default_direction,
        )
        return self

    def build(self) -> QuerySpec:
        return QuerySpec(
            search_fields=tuple(self._search_fields),
            filter_groups=tuple(self._filter_groups),
            sorting=self._sorting,
            starting_scope=self._starting_scope,
            ending_scope=self._ending_scope,
        )

    def _check_unused(self, name: str) -> None:
        taken = {item.name for item in self._search_fields} | {item.name for item in self._filter_groups}
        if name in taken:
            raise QueryDeclarationError(f"parameter name already declared: {name}")


def _check_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QueryDeclarationError(f"{what} name must be a non-empty string")
    return value.strip()


def _check_unique(values: Sequence[str], what: str) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise QueryDeclarationError(f"{what} contain duplicate: {value}")
        seen.add(value)

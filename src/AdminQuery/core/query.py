"""Scope-chain resolution for list queries.

A :class:`ListQuery` reads request parameters against a :class:`QuerySpec`
and folds the resulting named scopes over a collection handle:

1. base handle (caller override, else the declared starting scope)
2. search fields, in declaration order
3. filter groups, in declaration order
4. sorting
5. ending scope, called with the query itself

Bad user input never raises here: blank or uncoercible search values, unknown
filter values and unknown sort values simply leave that part inactive. Errors
raised by the collection handle while applying a scope are not caught.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Iterator, Mapping, Protocol, runtime_checkable

from AdminQuery.core.coercion import CoercionService, default_coercion_service
from AdminQuery.core.params import (
    SORT_ORDER_KEY,
    SORTING_KEY,
    is_blank,
    normalize_params,
    param_text,
    query_section,
)
from AdminQuery.core.spec import SORT_DIRECTIONS, FilterGroupSpec, QuerySpec, SearchFieldSpec
from AdminQuery.core.state import FilterGroupState, SearchFieldState, SortingState
from AdminQuery.utils.log import log


class QueryConfigurationError(RuntimeError):
    """Raised when a query cannot be resolved because of how it was declared."""


@runtime_checkable
class ScopeHandle(Protocol):
    """Collection handle exposing named, chainable scopes."""

    def apply_scope(self, name: str, *args: Any) -> Any:
        ...


def apply_scope(handle: Any, name: str, *args: Any) -> Any:
    """Apply one named scope to a handle.

    Handles implementing :class:`ScopeHandle` dispatch through
    ``apply_scope``; any other object is dispatched by attribute, the way
    ORM query sets expose their scopes as methods.

    Raises:
        AttributeError: If the handle has no scope of that name.
    """
    if isinstance(handle, ScopeHandle):
        return handle.apply_scope(name, *args)
    return getattr(handle, name)(*args)


@dataclass(frozen=True, slots=True)
class Operation:
    """One named scope application in the resolved chain."""

    name: str
    args: tuple[Any, ...] = ()

    def apply(self, handle: Any) -> Any:
        return apply_scope(handle, self.name, *self.args)


class ListQuery:
    """Parameter-driven list query.

    Subclasses declare ``spec`` as a class attribute; a spec can also be
    passed per instance. Resolution happens once, in the constructor.

    Attributes:
        spec: Declaration this query resolves against.
        search_fields: State of every declared search field.
        filter_groups: State of every declared filter group.
        sorting: Sorting state, or None when no sorting is declared.
        operations: Named scopes applied to the base handle, in order.
        results: Final collection handle.
    """

    spec: ClassVar[QuerySpec | None] = None

    def __init__(
        self,
        params: Mapping[str, Any] | None = None,
        base: Any = None,
        *,
        spec: QuerySpec | None = None,
        coercion: CoercionService | None = None,
    ) -> None:
        resolved_spec = spec if spec is not None else type(self).spec
        if resolved_spec is None:
            raise QueryConfigurationError(f"{type(self).__name__} has no query spec declared")
        self._spec = resolved_spec
        self._params = normalize_params(params)
        self._coercion = coercion or default_coercion_service
        self._check_coercions()

        handle = self._resolve_base(base)
        query = query_section(self._params)
        self._search_fields = tuple(self._resolve_search_field(item, query) for item in resolved_spec.search_fields)
        self._filter_groups = tuple(self._resolve_filter_group(item, query) for item in resolved_spec.filter_groups)
        self._sorting = self._resolve_sorting()
        self._operations = tuple(self._build_operations())
        self._results = self._fold(handle)

    @classmethod
    def for_spec(cls, spec: QuerySpec, name: str = "ConfiguredListQuery") -> type[ListQuery]:
        """Create a subclass bound to ``spec``."""
        return type(name, (cls,), {"spec": spec})

    @property
    def params(self) -> dict[str, Any]:
        """Copy of the normalized request parameters."""
        return normalize_params(self._params)

    @property
    def query_spec(self) -> QuerySpec:
        return self._spec

    @property
    def search_fields(self) -> tuple[SearchFieldState, ...]:
        return self._search_fields

    @property
    def filter_groups(self) -> tuple[FilterGroupState, ...]:
        return self._filter_groups

    @property
    def sorting(self) -> SortingState | None:
        return self._sorting

    @property
    def operations(self) -> tuple[Operation, ...]:
        return self._operations

    @property
    def results(self) -> Any:
        return self._results

    def search_field(self, name: str) -> SearchFieldState:
        for item in self._search_fields:
            if item.name == name:
                return item
        raise KeyError(f"Unknown search field: {name}")

    def search_value(self, name: str) -> Any:
        """Coerced value of a search field, or None when inactive."""
        return self.search_field(name).value

    def filter_group(self, name: str) -> FilterGroupState:
        for item in self._filter_groups:
            if item.name == name:
                return item
        raise KeyError(f"Unknown filter group: {name}")

    def __repr__(self) -> str:
        chain = ", ".join(op.name for op in self._operations)
        return f"<{type(self).__name__} operations=[{chain}]>"

    def _check_coercions(self) -> None:
        for item in self._spec.search_fields:
            if item.coerce is not None and not self._coercion.supports(item.coerce.kind):
                raise QueryConfigurationError(
                    f"search field {item.name}: unsupported coercion kind {item.coerce.kind}"
                )

    def _resolve_base(self, override: Any) -> Any:
        if override is not None:
            return override
        if self._spec.starting_scope is None:
            raise QueryConfigurationError(
                f"{type(self).__name__} has no starting scope and no base collection was given"
            )
        handle = self._spec.starting_scope()
        if handle is None:
            raise QueryConfigurationError(f"{type(self).__name__} starting scope returned None")
        return handle

    def _resolve_search_field(self, item: SearchFieldSpec, query: Mapping[str, Any]) -> SearchFieldState:
        raw = param_text(query.get(item.name))
        if is_blank(raw):
            return SearchFieldState(name=item.name, raw=raw)
        result = self._coercion.coerce(item.coerce, raw)
        if not result.ok:
            log.debug("Ignoring search field %s=%r: %s", item.name, raw, result.error)
            return SearchFieldState(name=item.name, raw=raw)
        return SearchFieldState(name=item.name, raw=raw, value=result.value, present=True)

    def _resolve_filter_group(self, item: FilterGroupSpec, query: Mapping[str, Any]) -> FilterGroupState:
        raw = param_text(query.get(item.name))
        active = raw if raw in item.scopes else None
        if raw is not None and active is None:
            log.debug("Ignoring unknown filter %s=%r", item.name, raw)
        return FilterGroupState(name=item.name, scopes=item.scopes, active=active)

    def _resolve_sorting(self) -> SortingState | None:
        sorting = self._spec.sorting
        if sorting is None:
            return None

        requested = param_text(self._params.get(SORTING_KEY))
        if requested in sorting.scopes:
            active = requested
        else:
            if requested is not None:
                log.debug("Ignoring unknown sorting=%r", requested)
            active = sorting.default_scope

        order = param_text(self._params.get(SORT_ORDER_KEY))
        direction = order if order in SORT_DIRECTIONS else sorting.default_direction
        return SortingState(scopes=sorting.scopes, active=active, direction=direction)

    def _build_operations(self) -> Iterator[Operation]:
        for field in self._search_fields:
            if field.present:
                yield Operation(field.name, (field.value,))
        for group in self._filter_groups:
            if group.active is not None:
                yield Operation(group.active)
        if self._sorting is not None and self._sorting.active is not None:
            yield Operation(self._sorting.active, (self._sorting.direction,))

    def _fold(self, handle: Any) -> Any:
        for operation in self._operations:
            handle = operation.apply(handle)
        if self._spec.ending_scope is not None:
            handle = self._spec.ending_scope(handle, self)
        return handle

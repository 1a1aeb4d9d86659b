"""List query domain configuration.

Each entry under ``queries`` declares one list view over a table::

    queries:
      tasks:
        table: tasks
        per_page: 25
        columns:
          - {name: title, label: Title}
          - name: due_date
        search:
          - name: title_matches
            where: "title LIKE '%' || ? || '%'"
          - name: due_date_from
            coerce: date
            where: "due_date >= ?"
        filters:
          - name: status
            scopes:
              completed: "completed = 1"
              pending: "completed = 0"
        sorting:
          scopes:
            by_due_date: due_date
            by_title: title
          default_scope: by_due_date
          default_direction: asc
        labels:
          by_due_date: Due date

Search and filter entries compile into ``where`` scopes, sorting entries into
``order`` scopes; the declaration itself compiles into a ``QuerySpec``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from AdminQuery.config.common import (
    expect_list,
    expect_mapping,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_required_value,
    optional_int,
    optional_str,
)
from AdminQuery.core.pagination import paginate
from AdminQuery.core.spec import ASC, QueryDeclarationError, QuerySpec, QuerySpecBuilder
from AdminQuery.storage.relation import ScopeFn, TableModel, order_scope, where_scope


@dataclass(frozen=True, slots=True)
class ColumnConfig:
    """Table column shown for a list query."""

    name: str
    label: str | None = None


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """One declared list query.

    Attributes:
        name: Query name (key under ``queries``).
        spec: Compiled query declaration.
        model: Table model holding the compiled scopes.
        columns: Columns to display, in order.
        per_page: Page size, or None when results are not paginated.
        labels: Display labels keyed by field, group or scope name.
    """

    name: str
    spec: QuerySpec
    model: TableModel
    columns: tuple[ColumnConfig, ...]
    per_page: int | None
    labels: Mapping[str, str] = field(default_factory=dict)


def load_queries(raw: Mapping[str, Any]) -> Mapping[str, QueryConfig]:
    """Load list query declarations from raw mapping.

    Args:
        raw: Root configuration mapping.

    Returns:
        Read-only mapping of query name to parsed declaration, in file order.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing or declarations conflict.
    """
    section = raw.get("queries")
    if section is None:
        raise ValueError("Missing required config: queries")
    section = expect_mapping(section, "queries")

    queries: dict[str, QueryConfig] = {}
    for name, value in section.items():
        if not isinstance(name, str):
            raise TypeError("queries names must be strings")
        queries[name] = parse_query(name, value, f"queries.{name}")
    return MappingProxyType(queries)


def check_queries(queries: Mapping[str, QueryConfig]) -> None:
    """Validate query domain constraints.

    Raises:
        ValueError: If no query is declared or a page size is not positive.
    """
    if not queries:
        raise ValueError("queries must include at least one query")
    for name, query in queries.items():
        if query.per_page is not None and query.per_page <= 0:
            raise ValueError(f"queries.{name}.per_page must be positive")


def parse_query(name: str, value: Any, config_key: str) -> QueryConfig:
    """Parse one list query declaration.

    Args:
        name: Query name.
        value: Declaration mapping.
        config_key: Full key path used in error messages.

    Returns:
        Parsed query configuration.

    Raises:
        TypeError: If declaration shape/types are invalid.
        ValueError: If scope names collide or required keys are missing.
    """
    section = expect_mapping(value, config_key)
    table = expect_str(get_required_value(section, "table", f"{config_key}.table"), f"{config_key}.table")

    per_page = optional_int(section, "per_page", f"{config_key}.per_page")

    builder = QuerySpecBuilder()
    scopes: dict[str, ScopeFn] = {}

    try:
        for idx, item in enumerate(expect_list(get_optional_value(section, "search", []), f"{config_key}.search")):
            _parse_search_field(builder, scopes, item, f"{config_key}.search[{idx}]")

        for idx, item in enumerate(expect_list(get_optional_value(section, "filters", []), f"{config_key}.filters")):
            _parse_filter_group(builder, scopes, item, f"{config_key}.filters[{idx}]")

        sorting = get_optional_value(section, "sorting", None)
        if sorting is not None:
            _parse_sorting(builder, scopes, sorting, f"{config_key}.sorting")

        if per_page is not None and per_page > 0:
            builder.set_ending_scope(paginate(per_page))
    except QueryDeclarationError as exc:
        raise ValueError(f"{config_key}: {exc}") from exc

    try:
        model = TableModel(table=table, scopes=MappingProxyType(scopes))
    except ValueError as exc:
        raise ValueError(f"{config_key}.table: {exc}") from exc

    columns = tuple(
        _parse_column(item, f"{config_key}.columns[{idx}]")
        for idx, item in enumerate(expect_list(get_optional_value(section, "columns", []), f"{config_key}.columns"))
    )
    labels = {
        str(key): expect_str(label, f"{config_key}.labels.{key}")
        for key, label in expect_mapping(get_optional_value(section, "labels", {}), f"{config_key}.labels").items()
    }
    return QueryConfig(
        name=name,
        spec=builder.build(),
        model=model,
        columns=columns,
        per_page=per_page,
        labels=MappingProxyType(labels),
    )


def _parse_search_field(builder: QuerySpecBuilder, scopes: dict[str, ScopeFn], value: Any, config_key: str) -> None:
    section = expect_mapping(value, config_key)
    name = expect_str(get_required_value(section, "name", f"{config_key}.name"), f"{config_key}.name").strip()
    where = expect_str(get_required_value(section, "where", f"{config_key}.where"), f"{config_key}.where")

    coerce = optional_str(section, "coerce", f"{config_key}.coerce")
    choices = expect_str_list(get_optional_value(section, "choices", []), f"{config_key}.choices")

    builder.add_search_field(name, coerce, choices=choices)
    _register_scope(scopes, name, where_scope(where), config_key)


def _parse_filter_group(builder: QuerySpecBuilder, scopes: dict[str, ScopeFn], value: Any, config_key: str) -> None:
    section = expect_mapping(value, config_key)
    name = expect_str(get_required_value(section, "name", f"{config_key}.name"), f"{config_key}.name").strip()
    group_scopes = expect_mapping(
        get_required_value(section, "scopes", f"{config_key}.scopes"),
        f"{config_key}.scopes",
    )

    for scope_name, clause in group_scopes.items():
        scope_key = f"{config_key}.scopes.{scope_name}"
        _register_scope(scopes, str(scope_name), where_scope(expect_str(clause, scope_key)), scope_key)
    builder.add_filter_group(name, [str(scope_name) for scope_name in group_scopes])


def _parse_sorting(builder: QuerySpecBuilder, scopes: dict[str, ScopeFn], value: Any, config_key: str) -> None:
    section = expect_mapping(value, config_key)
    sort_scopes = expect_mapping(
        get_required_value(section, "scopes", f"{config_key}.scopes"),
        f"{config_key}.scopes",
    )

    for scope_name, column in sort_scopes.items():
        scope_key = f"{config_key}.scopes.{scope_name}"
        try:
            scope = order_scope(expect_str(column, scope_key))
        except ValueError as exc:
            raise ValueError(f"{scope_key}: {exc}") from exc
        _register_scope(scopes, str(scope_name), scope, scope_key)

    default_scope = optional_str(section, "default_scope", f"{config_key}.default_scope")
    default_direction = expect_str(
        get_optional_value(section, "default_direction", ASC),
        f"{config_key}.default_direction",
    ).lower()
    builder.set_sorting(
        [str(scope_name) for scope_name in sort_scopes],
        default_scope=default_scope,
        default_direction=default_direction,
    )


def _parse_column(value: Any, config_key: str) -> ColumnConfig:
    if isinstance(value, str):
        return ColumnConfig(name=value)
    section = expect_mapping(value, config_key)
    name = expect_str(get_required_value(section, "name", f"{config_key}.name"), f"{config_key}.name")
    return ColumnConfig(name=name, label=optional_str(section, "label", f"{config_key}.label"))


def _register_scope(scopes: dict[str, ScopeFn], name: str, scope: ScopeFn, config_key: str) -> None:
    if name in scopes:
        raise ValueError(f"{config_key}: scope name already declared: {name}")
    scopes[name] = scope

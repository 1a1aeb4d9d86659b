"""Persistent SQLite relations with named scopes.

A :class:`SqliteRelation` is an immutable description of a ``SELECT`` over
one table. Every scope returns a new relation; SQL only runs when rows are
requested (``all``, ``count``, iteration). Named scopes come from a
:class:`TableModel`, which maps scope names to SQL fragments declared in
configuration or code.
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Iterator, Mapping

from AdminQuery.core.spec import ASC, SORT_DIRECTIONS
from AdminQuery.utils.log import log

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SQLITE_INT_MIN = -(2**63)
_SQLITE_INT_MAX = 2**63 - 1

ScopeFn = Callable[..., "SqliteRelation"]


class UnknownScopeError(AttributeError):
    """Raised when a relation is asked for a scope its model does not define."""


@dataclass(frozen=True, slots=True)
class TableModel:
    """Table name plus the named scopes available on its relations.

    Attributes:
        table: Table (or view) name.
        scopes: Scope name to ``fn(relation, *args) -> relation``.
        columns: Selected columns; empty selects every column.
    """

    table: str
    scopes: Mapping[str, ScopeFn] = field(default_factory=dict)
    columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        quote_identifier(self.table)
        for column in self.columns:
            quote_identifier(column)

    def relation(self, conn: sqlite3.Connection) -> SqliteRelation:
        """Return the unscoped relation over this table."""
        return SqliteRelation(conn=conn, model=self)


@dataclass(frozen=True, slots=True)
class SqliteRelation:
    """Immutable, lazily executed query over one table."""

    conn: sqlite3.Connection = field(compare=False, repr=False)
    model: TableModel
    wheres: tuple[tuple[str, tuple[Any, ...]], ...] = ()
    orders: tuple[str, ...] = ()
    limit_value: int | None = None
    offset_value: int | None = None

    def apply_scope(self, name: str, *args: Any) -> SqliteRelation:
        """Apply a named scope declared on the model.

        Raises:
            UnknownScopeError: If neither the model nor the built-ins define ``name``.
        """
        scope = self.model.scopes.get(name) or _BUILTIN_SCOPES.get(name)
        if scope is None:
            raise UnknownScopeError(f"{self.model.table} has no scope named {name}")
        return scope(self, *args)

    def where(self, clause: str, *params: Any) -> SqliteRelation:
        values = tuple(sql_value(value) for value in params)
        return replace(self, wheres=self.wheres + ((clause, values),))

    def order(self, column: str, direction: str = ASC) -> SqliteRelation:
        if direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unsupported sort direction: {direction}")
        term = f"{quote_identifier(column)} {direction.upper()}"
        return replace(self, orders=self.orders + (term,))

    def limit(self, count: int) -> SqliteRelation:
        return replace(self, limit_value=max(0, int(count)))

    def offset(self, count: int) -> SqliteRelation:
        return replace(self, offset_value=max(0, int(count)))

    def paginate(self, page: int, per_page: int) -> SqliteRelation:
        page = max(1, int(page))
        return self.limit(per_page).offset((page - 1) * per_page)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Compile the relation into SQL text and bound parameters."""
        sql, params = self._base_sql()
        if self.orders:
            sql += " ORDER BY " + ", ".join(self.orders)
        if self.limit_value is not None:
            sql += " LIMIT ?"
            params.append(self.limit_value)
            if self.offset_value:
                sql += " OFFSET ?"
                params.append(self.offset_value)
        elif self.offset_value:
            sql += " LIMIT -1 OFFSET ?"
            params.append(self.offset_value)
        return sql, params

    def all(self) -> list[dict[str, Any]]:
        """Execute the relation and return rows as dicts."""
        sql, params = self.to_sql()
        log.debug("SQL %s %s", sql, params)
        cursor = self.conn.execute(sql, params)
        names = [item[0] for item in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def count(self) -> int:
        """Count matching rows, ignoring ordering and pagination."""
        sql, params = self._base_sql()
        row = self.conn.execute(f"SELECT COUNT(*) FROM ({sql})", params).fetchone()
        return int(row[0])

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.all())

    def _base_sql(self) -> tuple[str, list[Any]]:
        columns = ", ".join(quote_identifier(col) for col in self.model.columns) or "*"
        sql = f"SELECT {columns} FROM {quote_identifier(self.model.table)}"
        params: list[Any] = []
        if self.wheres:
            sql += " WHERE " + " AND ".join(f"({clause})" for clause, _ in self.wheres)
            for _, values in self.wheres:
                params.extend(values)
        return sql, params


def where_scope(clause: str) -> ScopeFn:
    """Build a scope adding ``clause`` to the WHERE conditions.

    A single scope argument fills every ``?`` placeholder in the clause, so a
    search value can be matched against several columns at once.
    """
    placeholders = clause.count("?")

    def _scope(relation: SqliteRelation, *args: Any) -> SqliteRelation:
        if not placeholders:
            return relation.where(clause)
        if len(args) == 1:
            return relation.where(clause, *(args * placeholders))
        if len(args) != placeholders:
            raise TypeError(f"Scope clause expects {placeholders} values, got {len(args)}")
        return relation.where(clause, *args)

    return _scope


def order_scope(column: str) -> ScopeFn:
    """Build a scope ordering by ``column`` in the requested direction."""
    quote_identifier(column)

    def _scope(relation: SqliteRelation, direction: str = ASC) -> SqliteRelation:
        return relation.order(column, direction)

    return _scope


def quote_identifier(name: str) -> str:
    """Quote a table or column name, rejecting anything but plain identifiers."""
    if not _IDENTIFIER_RE.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f'"{name}"'


def sql_value(value: Any) -> Any:
    """Convert a coerced value into something sqlite3 binds natively.

    Raises:
        ValueError: If an integer falls outside SQLite's 64-bit range.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and not _SQLITE_INT_MIN <= value <= _SQLITE_INT_MAX:
        raise ValueError(f"Integer out of SQLite range: {value}")
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


_BUILTIN_SCOPES: Mapping[str, ScopeFn] = {
    "paginate": SqliteRelation.paginate,
    "limit": SqliteRelation.limit,
    "offset": SqliteRelation.offset,
}

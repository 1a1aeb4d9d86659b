"""Coercion of raw request strings into typed values.

Every routine raises on bad input; :class:`CoercionService` turns that into a
failed :class:`CoercionResult` so that callers only ever see a value or a
reason, never an exception.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Mapping

from dateutil.parser import isoparse, isoparser

BOOLEAN = "boolean"
SYMBOL = "symbol"
INTEGER = "integer"
FLOAT = "float"
DECIMAL = "decimal"
DATE = "date"
DATETIME = "datetime"
TIME = "time"
CONSTANT = "constant"

COERCION_KINDS = (BOOLEAN, SYMBOL, INTEGER, FLOAT, DECIMAL, DATE, DATETIME, TIME, CONSTANT)

# Rails-style names used by existing query declarations.
_KIND_ALIASES = {
    "to_boolean": BOOLEAN,
    "to_bool": BOOLEAN,
    "to_sym": SYMBOL,
    "to_symbol": SYMBOL,
    "to_i": INTEGER,
    "to_integer": INTEGER,
    "to_f": FLOAT,
    "to_float": FLOAT,
    "to_d": DECIMAL,
    "to_decimal": DECIMAL,
    "to_date": DATE,
    "to_datetime": DATETIME,
    "to_time": TIME,
    "to_constant": CONSTANT,
}

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_ISO_PARSER = isoparser()


class CoercionError(ValueError):
    """Raised by a coercion routine when the input cannot be converted."""


def normalize_kind(kind: str) -> str:
    """Resolve a coercion kind name, accepting the ``to_*`` aliases.

    Args:
        kind: Kind name as declared.

    Returns:
        Canonical lower-case kind name.
    """
    name = kind.strip().lower()
    return _KIND_ALIASES.get(name, name)


@dataclass(frozen=True, slots=True)
class Coercion:
    """Declared coercion of a search field.

    Attributes:
        kind: Canonical kind name (see ``COERCION_KINDS``).
        choices: Allowed values for the ``constant`` kind.
    """

    kind: str
    choices: tuple[str, ...] = ()

    @classmethod
    def of(cls, value: str | Coercion, choices: tuple[str, ...] | list[str] = ()) -> Coercion:
        """Build a coercion from a kind name or return an existing one."""
        if isinstance(value, Coercion):
            return value
        return cls(kind=normalize_kind(value), choices=tuple(choices))


@dataclass(frozen=True, slots=True)
class CoercionResult:
    """Outcome of one coercion: a value, or the reason it failed."""

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> CoercionResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> CoercionResult:
        return cls(error=error or "invalid value")


Routine = Callable[[str, Coercion], Any]


def to_boolean(raw: str, coercion: Coercion) -> bool:
    del coercion
    text = raw.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise CoercionError(f"not a boolean: {raw!r}")


def to_symbol(raw: str, coercion: Coercion) -> str:
    del coercion
    text = raw.strip()
    if not text:
        raise CoercionError("empty symbol")
    return text


def to_integer(raw: str, coercion: Coercion) -> int:
    del coercion
    text = raw.strip()
    if not _INTEGER_RE.match(text):
        raise CoercionError(f"not an integer: {raw!r}")
    return int(text)


def to_float(raw: str, coercion: Coercion) -> float:
    del coercion
    value = float(_plain_number(raw))
    if not math.isfinite(value):
        raise CoercionError(f"not a finite number: {raw!r}")
    return value


def to_decimal(raw: str, coercion: Coercion) -> Decimal:
    del coercion
    value = Decimal(_plain_number(raw))
    if not value.is_finite():
        raise CoercionError(f"not a finite decimal: {raw!r}")
    return value


def _plain_number(raw: str) -> str:
    # float() and Decimal() accept digit-group underscores; integers do not.
    text = raw.strip()
    if "_" in text:
        raise CoercionError(f"not a plain number: {raw!r}")
    return text


def to_date(raw: str, coercion: Coercion) -> date:
    del coercion
    return isoparse(raw.strip()).date()


def to_datetime(raw: str, coercion: Coercion) -> datetime:
    del coercion
    return isoparse(raw.strip())


def to_time(raw: str, coercion: Coercion) -> time:
    del coercion
    return _ISO_PARSER.parse_isotime(raw.strip())


def to_constant(raw: str, coercion: Coercion) -> str:
    text = raw.strip()
    if text not in coercion.choices:
        raise CoercionError(f"{raw!r} is not one of {list(coercion.choices)}")
    return text


DEFAULT_ROUTINES: Mapping[str, Routine] = {
    BOOLEAN: to_boolean,
    SYMBOL: to_symbol,
    INTEGER: to_integer,
    FLOAT: to_float,
    DECIMAL: to_decimal,
    DATE: to_date,
    DATETIME: to_datetime,
    TIME: to_time,
    CONSTANT: to_constant,
}


class CoercionService:
    """Dispatch raw strings to coercion routines by kind.

    The routine table is copied per service; registering a routine on one
    service never affects another.
    """

    def __init__(self, routines: Mapping[str, Routine] | None = None) -> None:
        self._routines: dict[str, Routine] = dict(DEFAULT_ROUTINES if routines is None else routines)

    def register(self, kind: str, routine: Routine) -> None:
        """Add or replace the routine for ``kind``."""
        self._routines[normalize_kind(kind)] = routine

    def supports(self, kind: str) -> bool:
        return normalize_kind(kind) in self._routines

    def coerce(self, coercion: Coercion | None, raw: str) -> CoercionResult:
        """Coerce one raw string.

        Args:
            coercion: Declared coercion, or None for identity pass-through.
            raw: Raw request value.

        Returns:
            A successful result holding the typed value, or a failed result
            holding the reason. Never raises for bad input.
        """
        if coercion is None:
            return CoercionResult.success(raw)
        routine = self._routines.get(coercion.kind)
        if routine is None:
            return CoercionResult.failure(f"unsupported coercion kind: {coercion.kind}")
        try:
            return CoercionResult.success(routine(raw, coercion))
        except Exception as exc:  # noqa: BLE001 - registered routines may raise anything
            return CoercionResult.failure(str(exc))


default_coercion_service = CoercionService()

"""Request parameter helpers.

Raw parameters are nested mappings mirroring web query strings, e.g.
``{"query": {"status": "completed"}, "sorting": "by_title", "sort_order": "desc"}``.
This module converts between that shape and Rack-style query strings
(``query[status]=completed&sorting=by_title``) and reads scalar values safely.
"""

from __future__ import annotations

import re
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlencode

QUERY_KEY = "query"
SORTING_KEY = "sorting"
SORT_ORDER_KEY = "sort_order"
PAGE_KEY = "page"

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def param_text(value: Any) -> str | None:
    """Return a scalar parameter as text, or None for missing/nested values."""
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def query_section(params: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the ``query`` sub-mapping, or an empty mapping when absent or malformed."""
    section = params.get(QUERY_KEY)
    if isinstance(section, Mapping):
        return section
    return {}


def normalize_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-copy a parameter mapping into plain dicts with string keys."""
    if params is None:
        return {}
    out: dict[str, Any] = {}
    for key, value in params.items():
        name = str(key)
        if isinstance(value, Mapping):
            out[name] = normalize_params(value)
        elif isinstance(value, (list, tuple)):
            out[name] = list(value)
        else:
            out[name] = value
    return out


def parse_query_string(query_string: str) -> dict[str, Any]:
    """Parse a Rack-style query string into nested parameters.

    ``a[b][c]=1`` nests mappings, ``a[]=1&a[]=2`` collects a list, and a
    repeated scalar key keeps the last value.

    Args:
        query_string: Raw query string, with or without a leading ``?``.

    Returns:
        Nested parameter mapping.
    """
    params: dict[str, Any] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        match = _KEY_RE.match(key)
        if not match:
            continue
        path = [match.group(1)] + _SEGMENT_RE.findall(match.group(2))
        _assign(params, path, value)
    return params


def build_query_string(params: Mapping[str, Any]) -> str:
    """Flatten nested parameters back into a Rack-style query string.

    None values are dropped; key order follows the mapping order.
    """
    pairs: list[tuple[str, str]] = []
    _flatten(params, "", pairs)
    return urlencode(pairs)


def _assign(target: dict[str, Any], path: list[str], value: str) -> None:
    head, rest = path[0], path[1:]
    if not rest:
        target[head] = value
        return
    if rest == [""]:
        existing = target.get(head)
        if not isinstance(existing, list):
            existing = []
            target[head] = existing
        existing.append(value)
        return
    child = target.get(head)
    if not isinstance(child, dict):
        child = {}
        target[head] = child
    _assign(child, rest, value)


def _flatten(params: Mapping[str, Any], prefix: str, pairs: list[tuple[str, str]]) -> None:
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            _flatten(value, name, pairs)
        elif isinstance(value, (list, tuple)):
            for item in value:
                text = param_text(item)
                if text is not None:
                    pairs.append((f"{name}[]", text))
        else:
            text = param_text(value)
            if text is not None:
                pairs.append((name, text))

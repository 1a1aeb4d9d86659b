"""Toggle-link parameters for filter and sort controls.

Each helper returns a fresh parameter mapping describing the request that
follows a click on the control, starting from the query's own parameters:

- filter scope: inactive → activate it; active → remove the filter
- sort scope: inactive → sort by it ascending; active ascending → descending;
  active descending → ascending

Toggling always drops ``page`` so the new result set starts at its first page.
"""

from __future__ import annotations

from typing import Any

from AdminQuery.core.params import (
    PAGE_KEY,
    QUERY_KEY,
    SORT_ORDER_KEY,
    SORTING_KEY,
    build_query_string,
)
from AdminQuery.core.query import ListQuery
from AdminQuery.core.spec import ASC, DESC


def filter_toggle_params(query: ListQuery, group: str, scope: str) -> dict[str, Any]:
    """Parameters for clicking ``scope`` of filter group ``group``.

    Args:
        query: Resolved list query.
        group: Filter group name.
        scope: Scope within the group.

    Returns:
        New parameter mapping.

    Raises:
        KeyError: If the group is not declared.
        ValueError: If the scope is not declared in the group.
    """
    state = query.filter_group(group)
    if scope not in state.scopes:
        raise ValueError(f"Filter group {group} has no scope {scope}")

    params = query.params
    section = params.get(QUERY_KEY)
    if not isinstance(section, dict):
        section = {}
    if state.is_scope_active(scope):
        section.pop(group, None)
    else:
        section[group] = scope

    if section:
        params[QUERY_KEY] = section
    else:
        params.pop(QUERY_KEY, None)
    params.pop(PAGE_KEY, None)
    return params


def sort_toggle_params(query: ListQuery, scope: str) -> dict[str, Any]:
    """Parameters for clicking the sort control of ``scope``.

    Raises:
        ValueError: If the query declares no sorting or not this scope.
    """
    sorting = query.sorting
    if sorting is None:
        raise ValueError(f"{type(query).__name__} declares no sorting")
    if scope not in sorting.scopes:
        raise ValueError(f"Sorting has no scope {scope}")

    direction = ASC
    if sorting.is_scope_active(scope) and sorting.ascending:
        direction = DESC

    params = query.params
    params[SORTING_KEY] = scope
    params[SORT_ORDER_KEY] = direction
    params.pop(PAGE_KEY, None)
    return params


def toggle_href(path: str, params: dict[str, Any]) -> str:
    """Join a path and parameters into a link target."""
    query_string = build_query_string(params)
    if not query_string:
        return path
    return f"{path}?{query_string}"

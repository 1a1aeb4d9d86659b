"""Mapper from a resolved ListQuery to display view models.

Pure functions: reading a query never changes it.
"""

from __future__ import annotations

from typing import Mapping

from AdminQuery.core.query import ListQuery
from AdminQuery.renderers.links import filter_toggle_params, sort_toggle_params, toggle_href
from AdminQuery.renderers.table import humanize
from AdminQuery.renderers.view_models import (
    FilterGroupView,
    QueryView,
    SearchFieldView,
    ToggleLinkView,
)


def build_query_view(
    query: ListQuery,
    path: str = "",
    labels: Mapping[str, str] | None = None,
) -> QueryView:
    """Map query state to display view models.

    Args:
        query: Resolved list query.
        path: Path prefixed to every link target.
        labels: Optional display labels keyed by field, group or scope name.

    Returns:
        QueryView with search values, filter links and sort links.
    """
    labels = labels or {}

    def label(name: str) -> str:
        return labels.get(name) or humanize(name)

    search_fields = tuple(
        SearchFieldView(
            name=field.name,
            label=label(field.name),
            value=field.raw or "",
            present=field.present,
        )
        for field in query.search_fields
    )

    filter_groups: list[FilterGroupView] = []
    for group in query.filter_groups:
        links: list[ToggleLinkView] = []
        for scope in group.scopes:
            params = filter_toggle_params(query, group.name, scope)
            links.append(
                ToggleLinkView(
                    scope=scope,
                    label=label(scope),
                    active=group.is_scope_active(scope),
                    params=params,
                    href=toggle_href(path, params),
                )
            )
        filter_groups.append(FilterGroupView(name=group.name, label=label(group.name), links=tuple(links)))

    sort_links: list[ToggleLinkView] = []
    if query.sorting is not None:
        for scope in query.sorting.scopes:
            active = query.sorting.is_scope_active(scope)
            params = sort_toggle_params(query, scope)
            sort_links.append(
                ToggleLinkView(
                    scope=scope,
                    label=label(scope),
                    active=active,
                    params=params,
                    href=toggle_href(path, params),
                    direction=query.sorting.direction if active else None,
                )
            )

    return QueryView(
        search_fields=search_fields,
        filter_groups=tuple(filter_groups),
        sort_links=tuple(sort_links),
        operations=tuple(op.name for op in query.operations),
    )

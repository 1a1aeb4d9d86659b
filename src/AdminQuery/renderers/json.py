"""JSON output renderers.

Renders a list result into JSON-serializable objects.
Provides JsonFileWriter implementation for command output.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from AdminQuery.renderers.base import OutputWriter
from AdminQuery.renderers.view_models import QueryView, TableView, ToggleLinkView
from AdminQuery.utils.log import log


def render_json(table: TableView, query: QueryView, total: int | None = None) -> dict[str, Any]:
    """Render a list result into JSON-serializable Python objects.

    Args:
        table: Rows of the current page.
        query: Introspected query state.
        total: Matching rows before pagination, if known.

    Returns:
        A dict with ``state`` (search/filters/sorting) and ``rows`` keyed by column name.
    """
    names = [col.name for col in table.columns]
    return {
        "state": {
            "search": {field.name: field.value for field in query.search_fields if field.present},
            "filters": {
                group.name: [_link_payload(link) for link in group.links] for group in query.filter_groups
            },
            "sorting": [_link_payload(link) for link in query.sort_links],
            "scopes": list(query.operations),
        },
        "columns": [{"name": col.name, "label": col.label} for col in table.columns],
        "rows": [dict(zip(names, row)) for row in table.rows],
        "total": total,
    }


def _link_payload(link: ToggleLinkView) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "scope": link.scope,
        "label": link.label,
        "active": link.active,
        "href": link.href,
    }
    if link.direction is not None:
        payload["direction"] = link.direction
    return payload


class JsonFileWriter(OutputWriter):
    """Accumulate results and write to JSON file on finalize."""

    def __init__(self, base_dir: str) -> None:
        """Initialize JSON writer.

        Args:
            base_dir: Base output directory.
        """
        self.output_dir = Path(base_dir) / "json"
        self.all_results: list[dict[str, Any]] = []

    def write_list_result(
        self,
        name: str,
        table: TableView,
        query: QueryView,
        total: int | None,
    ) -> None:
        """Accumulate list result for later writing."""
        payload = render_json(table, query, total)
        payload["name"] = name
        self.all_results.append(payload)

    def finalize(self, action: str) -> None:
        """Write accumulated results to JSON file.

        Args:
            action: The CLI command name (used in filename).
        """
        if not self.all_results:
            log.debug("No JSON results to write")
            return
        payload = json.dumps(self.all_results, ensure_ascii=False, indent=2)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.json"
        output_path.write_text(payload, encoding="utf-8")
        log.info("JSON saved to %s", output_path)

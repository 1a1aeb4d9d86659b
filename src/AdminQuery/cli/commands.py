"""Command implementations for AdminQuery CLI.

Encapsulates business logic for commands like list, separated from
CLI parameter handling and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from AdminQuery.config import QueryConfig
from AdminQuery.core.query import ListQuery
from AdminQuery.renderers import OutputWriter
from AdminQuery.renderers.mapper import build_query_view
from AdminQuery.renderers.table import Column, build_table
from AdminQuery.storage.db import DatabaseManager
from AdminQuery.utils.log import log


@dataclass(slots=True)
class ListCommand:
    """Encapsulates list command business logic.

    Resolves one declared query against its table, fetches the current page
    and delegates output to the OutputWriter.
    """

    query_config: QueryConfig
    params: Mapping[str, Any]
    db_manager: DatabaseManager
    output_writer: OutputWriter
    link_path: str = ""

    def execute(self) -> ListQuery:
        """Run the query and write its result.

        Returns:
            The resolved query, for callers that want to inspect its state.
        """
        config = self.query_config
        query_cls = ListQuery.for_spec(config.spec, name=f"{config.name.title().replace('_', '')}Query")
        base = config.model.relation(self.db_manager.get_connection())

        query = query_cls(self.params, base=base)
        log.debug("Resolved %r", query)
        log.info("Scopes: %s", ", ".join(op.name for op in query.operations) or "(none)")

        records = query.results.all()
        total = query.results.count()
        log.info("Fetched %d of %d rows", len(records), total)

        columns = [Column(name=col.name, label=col.label) for col in config.columns]
        if not columns and records:
            columns = [Column(name=key) for key in records[0]]

        self.output_writer.write_list_result(
            config.name,
            build_table(records, columns),
            build_query_view(query, path=f"{self.link_path}/{config.name}", labels=config.labels),
            total,
        )
        return query

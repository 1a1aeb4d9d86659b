"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import Any, Mapping

import click

from AdminQuery.cli.commands import ListCommand
from AdminQuery.config import AppConfig
from AdminQuery.renderers import create_output_writer
from AdminQuery.storage import create_database
from AdminQuery.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, database context
    management, and error handling for CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_list(self, action: str, query_name: str, params: Mapping[str, Any]) -> None:
        """Execute the list command with full resource management.

        Args:
            action: The CLI command name (e.g., 'list').
            query_name: Declared query to run.
            params: Request parameters for the query.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            query_config = self.config.query(query_name)
            output_writer = create_output_writer(self.config)

            with create_database(self.config) as db_manager:
                command = ListCommand(
                    query_config=query_config,
                    params=params,
                    db_manager=db_manager,
                    output_writer=output_writer,
                    link_path=self.config.output.link_path,
                )
                command.execute()
            output_writer.finalize(action)

        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("List failed: %s", e)
            raise click.Abort from e

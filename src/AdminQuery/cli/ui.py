"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import click
from dotenv import load_dotenv

from AdminQuery.cli.runner import CommandRunner
from AdminQuery.config import load_config
from AdminQuery.core.params import parse_query_string
from AdminQuery.renderers.table import humanize


@click.group(help="AdminQuery: run declared list queries against a SQLite database.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()

    cfg = load_config(config_path)
    ctx.obj = cfg


@cli.command("list")
@click.argument("query_name")
@click.option(
    "--param",
    "-p",
    "param_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Request parameter, e.g. 'query[status]=completed' or 'sorting=by_title'.",
)
@click.option("--qs", "query_string", default="", help="Raw query string, e.g. 'query[status]=completed&page=2'.")
@click.pass_context
def list_cmd(ctx: click.Context, query_name: str, param_pairs: tuple[str, ...], query_string: str) -> None:
    """Run one declared list query and write the resulting table.

    Args:
        ctx: Click context.
        query_name: Name of the query under ``queries`` in the config.
        param_pairs: ``KEY=VALUE`` parameters; applied after ``--qs``.
        query_string: Rack-style query string.

    Raises:
        click.Abort: When the query fails.
    """
    params = build_params(query_string, param_pairs)
    runner = CommandRunner(ctx.obj)
    runner.run_list(action=ctx.command.name, query_name=query_name, params=params)


@cli.command("queries")
@click.pass_context
def queries_cmd(ctx: click.Context) -> None:
    """Print declared queries with their search fields, filters and sorting."""
    for name, query in ctx.obj.queries.items():
        spec = query.spec
        click.echo(f"{name} (table {query.model.table})")
        for field in spec.search_fields:
            kind = f" [{field.coerce.kind}]" if field.coerce else ""
            click.echo(f"  search  {field.name}{kind}")
        for group in spec.filter_groups:
            click.echo(f"  filter  {group.name}: {', '.join(group.scopes)}")
        if spec.sorting:
            default = spec.sorting.default_scope or "-"
            click.echo(
                f"  sorting {', '.join(spec.sorting.scopes)} "
                f"(default {default} {spec.sorting.default_direction})"
            )
        if query.columns:
            click.echo("  columns " + ", ".join(col.label or humanize(col.name) for col in query.columns))


def build_params(query_string: str, param_pairs: tuple[str, ...]) -> dict[str, Any]:
    """Merge a query string and ``KEY=VALUE`` pairs into nested parameters.

    Raises:
        click.BadParameter: If a pair has no ``=``.
    """
    pairs: list[tuple[str, str]] = []
    for item in param_pairs:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--param")
        pairs.append((key, value))

    combined = "&".join(part for part in (query_string.lstrip("?"), urlencode(pairs)) if part)
    return parse_query_string(combined)

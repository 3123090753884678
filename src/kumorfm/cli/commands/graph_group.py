"""Graph commands - build, validate, show."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from kumorfm.cli.decorators import handle_errors, with_graph_file, with_output_file
from kumorfm.cli.handlers import GraphHandler
from kumorfm.cli.output import OutputFormatter
from kumorfm.utils.config import get_config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)
out = OutputFormatter()


@click.group(name="graph")
def graph_group():
    """Build, validate and inspect table graphs."""
    pass


@graph_group.command(name="build")
@click.argument(
    "source_type",
    type=click.Choice(["csv", "json", "database", "db"], case_sensitive=False),
)
@click.argument("source_path")
@click.option(
    "--table",
    "-t",
    "tables",
    multiple=True,
    help="Table to load (database sources only, repeatable)",
)
@click.option(
    "--no-infer",
    is_flag=True,
    help="Skip metadata and link inference",
)
@click.option(
    "--save/--no-save",
    default=True,
    help="Save the graph JSON (default: data.graphs_dir/graph.json)",
)
@with_output_file
@handle_errors
def build_cmd(source_type, source_path, tables, no_infer, save, output):
    """Build a graph from CSV files, a JSON file or a database.

    SOURCE_TYPE: csv, json, database or db

    SOURCE_PATH: CSV directory, JSON file or SQLAlchemy connection string

    \b
    Examples:
        kumorfm graph build csv ./data/csv -o graph.json
        kumorfm graph build json ./data/shop.json
        kumorfm graph build db "sqlite:///shop.db" -t users -t orders
    """
    handler = GraphHandler(get_config())

    out.progress_start(f"Loading tables from {source_type}: {source_path}")
    rows = handler.load_rows(source_type, source_path, list(tables) or None)

    graph = handler.build_graph(rows, infer_metadata=False if no_infer else None)

    out.success(f"Loaded {len(graph.tables)} tables:")
    for table in graph.tables:
        out.table_summary(
            table.name,
            table.row_count,
            len(table.columns),
            table.primary_key,
            table.time_column,
        )
    out.links(graph.links)

    if save:
        path = Path(output) if output else handler.default_output_path("graph")
        handler.save(graph, path)
        out.success(f"Saved graph to {path}")


@graph_group.command(name="validate")
@with_graph_file
@handle_errors
def validate_cmd(graph_file):
    """Validate a saved graph; exits with status 1 if it is invalid.

    \b
    Examples:
        kumorfm graph validate data/graphs/graph.json
    """
    handler = GraphHandler(get_config())
    graph = handler.load(graph_file)

    out.section(f"🔍 Validating {graph_file}...")
    out.stats(handler.get_graph_summary(graph))

    result = handler.validate(graph)
    out.validation_report(result)

    if not result.valid:
        sys.exit(1)


@graph_group.command(name="show")
@with_graph_file
@handle_errors
def show_cmd(graph_file):
    """Print metadata, links and a text rendering of a saved graph."""
    graph = GraphHandler(get_config()).load(graph_file)
    click.echo(graph.format_metadata())
    click.echo(graph.format_links())
    click.echo(graph.visualize())

"""CLI entry point for kumorfm."""

from __future__ import annotations

import click

from kumorfm import __version__
from kumorfm.cli.commands import graph_group, pql_group, predict, serve
from kumorfm.utils.config import load_config
from kumorfm.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to config.yml file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@click.pass_context
def cli(ctx, config, log_level):
    """kumorfm - build table graphs and predictive queries.

    \b
    Examples:
        # Build a graph from CSV files
        kumorfm graph build csv ./data/csv -o graph.json

        # Validate it
        kumorfm graph validate graph.json

        # Build a query
        kumorfm pql build -p "SUM(orders.amount)" -f user_id

        # Run it on the hosted service
        kumorfm predict graph.json "PREDICT SUM(orders.amount) FOR user_id"
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level)

    if config:
        ctx.obj["config"] = load_config(config)


cli.add_command(graph_group.graph_group)
cli.add_command(pql_group.pql_group)
cli.add_command(predict.predict_cmd)
cli.add_command(serve.serve_cmd)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()

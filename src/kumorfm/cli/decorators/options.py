"""Common CLI option decorators."""

from __future__ import annotations

import click


def with_output_file(f):
    """Add --output option to command.

    Example:
        @click.command()
        @with_output_file
        def my_command(output):
            pass
    """
    return click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False),
        help="Output file path",
    )(f)


def with_graph_file(f):
    """Add a GRAPH_FILE argument pointing at a serialized graph JSON file."""
    return click.argument(
        "graph_file",
        type=click.Path(exists=True, dir_okay=False),
    )(f)

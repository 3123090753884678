"""PQL commands - build and parse query strings."""

from __future__ import annotations

import click

from kumorfm.cli.decorators import handle_errors
from kumorfm.query import PQLBuilder


@click.group(name="pql")
def pql_group():
    """Build and inspect predictive query strings."""
    pass


@pql_group.command(name="build")
@click.option("--predict", "-p", "target", required=True, help="PREDICT target")
@click.option("--for", "-f", "entities", multiple=True, help="FOR entity (repeatable)")
@click.option("--where", "-w", "conditions", multiple=True, help="WHERE condition (repeatable, ANDed)")
@click.option("--group-by", "group_by", multiple=True, help="GROUP BY field (repeatable)")
@click.option("--order-by", "order_by", multiple=True, help="ORDER BY field (repeatable)")
@click.option("--limit", "-n", type=int, help="LIMIT value")
@handle_errors
def build_cmd(target, entities, conditions, group_by, order_by, limit):
    """Assemble a query string from fragments.

    \b
    Examples:
        kumorfm pql build -p "SUM(orders.amount)" -f user_id
        kumorfm pql build -p "COUNT(orders.order_id)" -f user_id \\
            -w 'orders.created_at > "2024-01-01"' --limit 10
    """
    builder = PQLBuilder().predict(target)
    if entities:
        builder.for_(*entities)
    for condition in conditions:
        builder.where(condition)
    if group_by:
        builder.group_by(*group_by)
    if order_by:
        builder.order_by(*order_by)
    if limit is not None:
        builder.limit(limit)

    click.echo(builder.build())


@pql_group.command(name="parse")
@click.argument("query")
def parse_cmd(query):
    """Show the PREDICT target recovered from QUERY.

    Only the target is recovered; other clauses are ignored.
    """
    target = PQLBuilder.parse(query).predict_target
    if target is None:
        click.echo("❌ No PREDICT clause found", err=True)
        raise click.Abort()
    click.echo(target)

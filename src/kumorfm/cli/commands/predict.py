"""Predict command - run a query on the hosted service."""

from __future__ import annotations

import json

import click

from kumorfm.cli.decorators import handle_errors, with_graph_file
from kumorfm.cli.handlers import GraphHandler
from kumorfm.client import KumoRFM, RFMConfig
from kumorfm.utils.config import get_config


@click.command(name="predict")
@with_graph_file
@click.argument("query")
@click.option("--api-key", envvar="KUMO_API_KEY", help="API key (default: KUMO_API_KEY)")
@handle_errors
def predict_cmd(graph_file, query, api_key):
    """Run QUERY against the graph saved in GRAPH_FILE.

    \b
    Examples:
        kumorfm predict graph.json "PREDICT SUM(orders.amount) FOR user_id"
    """
    config = get_config()
    if api_key:
        config.set("client.api_key", api_key)

    graph = GraphHandler(config).load(graph_file)
    model = KumoRFM(graph, RFMConfig.from_config(config))
    try:
        result = model.predict(query)
    finally:
        model.client.close()

    click.echo(json.dumps(result.to_dict(), indent=2, default=str))

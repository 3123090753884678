"""CLI command modules."""

from . import graph_group, pql_group, predict, serve

__all__ = ["graph_group", "pql_group", "predict", "serve"]

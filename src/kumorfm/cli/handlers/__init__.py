"""CLI command handlers containing business logic."""

from kumorfm.cli.handlers.graph_handler import GraphHandler

__all__ = ["GraphHandler"]

"""CLI output helpers."""

from kumorfm.cli.output.formatters import OutputFormatter

__all__ = ["OutputFormatter"]

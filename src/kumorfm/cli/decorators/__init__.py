"""CLI decorators for common options and error handling."""

from kumorfm.cli.decorators.error_handling import handle_errors
from kumorfm.cli.decorators.options import with_graph_file, with_output_file

__all__ = ["handle_errors", "with_graph_file", "with_output_file"]

"""Error handling decorators for CLI commands."""

from __future__ import annotations

import json
import os
import signal
import sys
from functools import wraps
from typing import Optional

import click

from kumorfm.cli.output import OutputFormatter
from kumorfm.core.errors import APIError, RFMError, ValidationError
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

# Handle SIGPIPE gracefully (prevent BrokenPipeError when piping to head, etc.)
try:
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
except AttributeError:
    # Windows doesn't have SIGPIPE
    pass


def api_error_hint(error: APIError) -> Optional[str]:
    """Suggest a fix for a failed prediction service call.

    Args:
        error: The error raised by the HTTP client

    Returns:
        A one-line suggestion, or None when the status gives no clue
    """
    if error.status_code in (401, 403):
        return "Check client.api_key in config.yml or the KUMO_API_KEY environment variable"
    if error.status_code is None:
        return "Check that client.base_url is reachable"
    if error.status_code == 400:
        return "Run `kumorfm graph validate` on the graph and check the PQL query"
    return None


def _fail(message: str, hint: Optional[str] = None) -> None:
    OutputFormatter.error(message)
    if hint:
        OutputFormatter.hint(hint)
    raise click.Abort()


def handle_errors(f):
    """Decorator to report failures of a CLI command and abort it.

    Library errors keep their error code in the message; prediction service
    failures and broken graph files also get a follow-up hint on stderr.
    Click's own exceptions pass through untouched.

    Example:
        @click.command()
        @handle_errors
        def validate_cmd(graph_file):
            ...
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (click.Abort, click.exceptions.Exit, click.ClickException):
            raise
        except BrokenPipeError:
            devnull = open(os.devnull, "w")
            sys.stdout = devnull
            sys.stderr = devnull
            sys.exit(0)
        except FileNotFoundError as e:
            _fail(f"File not found: {e}")
        except json.JSONDecodeError as e:
            _fail(
                f"Not a JSON file: {e}",
                "Graph files are written by `kumorfm graph build`",
            )
        except APIError as e:
            status = f" (HTTP {e.status_code})" if e.status_code else ""
            _fail(f"Prediction service error{status}: {e}", api_error_hint(e))
        except ValidationError as e:
            logger.debug("ValidationError details: %s", e.details)
            _fail(
                f"{e.code}: {e}",
                "Run `kumorfm graph show` to list the tables, columns and links",
            )
        except RFMError as e:
            logger.debug("RFMError details", exc_info=True)
            _fail(f"{e.code}: {e}")
        except ValueError as e:
            logger.debug("ValueError details", exc_info=True)
            _fail(f"Invalid value: {e}")
        except Exception as e:
            logger.exception("Unexpected error in command")
            _fail(f"Unexpected error: {e}")

    return wrapper

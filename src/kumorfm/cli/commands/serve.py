"""Serve command for starting API server."""

from __future__ import annotations

import click

from kumorfm.utils.config import get_config


@click.command(name="serve")
@click.option("--host", help="Host to bind to (default: api.host from config)")
@click.option("--port", "-p", type=int, help="Port to bind to (default: api.port from config)")
@click.option("--reload", is_flag=True, help="Enable auto-reload (development mode)")
def serve_cmd(host, port, reload):
    """Start the FastAPI server.

    \b
    Examples:
        kumorfm serve
        kumorfm serve --host localhost --port 8080
    """
    config = get_config()
    host = host or config.get("api.host", "0.0.0.0")
    port = port or config.get("api.port", 8000)

    click.echo("🚀 Starting kumorfm API server...")
    click.echo(f"   Host: {host}")
    click.echo(f"   Port: {port}")

    import uvicorn

    uvicorn.run(
        "kumorfm.api.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )

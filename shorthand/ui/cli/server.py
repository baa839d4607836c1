"""
CLI commands for the RPC server.

Thin wrapper over ``shorthand.ui.web.server``.
"""

from __future__ import annotations

import sys

import click


@click.group()
def server() -> None:
    """RPC server — live GitHub details for completions."""


@server.command("run")
@click.option("--host", default=None, help="Bind address (default: server_host from config).")
@click.option("--port", default=None, type=int, help="Port (default: server_port from config).")
@click.pass_context
def run(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the RPC server in the foreground."""
    from shorthand.core.config.loader import ConfigError, load_config
    from shorthand.ui.web.server import create_app, run_server

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if not config.api_token:
        click.secho("❌ api_token is required to run the RPC server", fg="red", err=True)
        sys.exit(1)

    host = host or config.server_host
    port = port or config.server_port
    debug = ctx.obj.get("debug", False)

    app = create_app(config)

    click.echo()
    click.secho("⚡ gh-shorthand — RPC server", bold=True)
    click.echo(f"   Listening: http://{host}:{port}")
    if debug:
        click.secho("   Logging: DEBUG (all output)", fg="yellow")
    click.echo()

    run_server(app, host=host, port=port, debug=debug)

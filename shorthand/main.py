"""
gh-shorthand — CLI entrypoint.

Usage:
    gh-shorthand complete " df 12"
    gh-shorthand server run
    gh-shorthand markdown-link -d https://github.com/owner/name/issues/1
    gh-shorthand config check
"""

from __future__ import annotations

import json
import os
import sys
import time
from pathlib import Path

import click

from shorthand import __version__
from shorthand.core.observability.logging_config import setup_logging

# Pretend the session started this long ago with --include-rpc
FORCED_RPC_ELAPSED = 60.0


@click.group()
@click.version_option(version=__version__, prog_name="gh-shorthand")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to the config file (default: ~/.gh-shorthand.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """gh-shorthand — GitHub shorthand completion for launchers."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("GH_SHORTHAND_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("GH_SHORTHAND_LOG_FILE"),
        log_file_level=os.environ.get("GH_SHORTHAND_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
        server=ctx.invoked_subcommand == "server",
    )


# ── Completion ──────────────────────────────────────────────────


@cli.command()
@click.option(
    "--include-rpc", "-r", is_flag=True,
    help="Skip the typing delay and query the RPC service right away.",
)
@click.argument("words", nargs=-1)
@click.pass_context
def complete(ctx: click.Context, include_rpc: bool, words: tuple[str, ...]) -> None:
    """Print launcher items for a raw query, e.g. " df 12" or "i df bug"."""
    from shorthand.adapters.rpc_client import RPCClient
    from shorthand.core.completion.completion import complete as build_result
    from shorthand.core.completion.continuation import load_continuation, recover_start
    from shorthand.core.completion.items import error_item
    from shorthand.core.config.loader import ConfigError, load_config
    from shorthand.core.models.items import FilterResult

    query = " ".join(words)
    now = time.time()

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        # the launcher only understands JSON, so errors become an item
        result = FilterResult()
        if query:
            result.append(error_item("Could not load gh-shorthand config", str(e)))
        click.echo(json.dumps(result.to_dict()))
        return

    start = recover_start(query, load_continuation(), now)
    if include_rpc:
        start = now - FORCED_RPC_ELAPSED

    client = RPCClient(config.rpc_url) if config.rpc_enabled else None
    result = build_result(config, query, start, client)
    click.echo(json.dumps(result.to_dict()))


# ── Snippets ────────────────────────────────────────────────────


@cli.command("markdown-link")
@click.option(
    "--description", "-d", is_flag=True,
    help="Include the issue title or repo description. Requires the RPC server.",
)
@click.argument("words", nargs=-1)
@click.pass_context
def markdown_link(ctx: click.Context, description: bool, words: tuple[str, ...]) -> None:
    """Convert a GitHub URL or owner/name#N into a markdown link."""
    from shorthand.adapters.rpc_client import RPCClient
    from shorthand.core.config.loader import ConfigError, load_config
    from shorthand.core.services.snippets import markdown_link as build_link

    text = " ".join(words)

    client = None
    if description:
        try:
            config = load_config(ctx.obj.get("config_path"))
        except ConfigError as e:
            click.echo(f"{text} (error: {e})", nl=False)
            return
        client = RPCClient(config.rpc_url)

    click.echo(build_link(client, text, include_description=description), nl=False)


cli.add_command(markdown_link, name="ml")


@cli.command("issue-reference")
@click.argument("words", nargs=-1)
def issue_reference(words: tuple[str, ...]) -> None:
    """Convert a GitHub issue or PR URL into owner/name#N."""
    from shorthand.core.services.snippets import issue_reference as build_reference

    click.echo(build_reference(" ".join(words)), nl=False)


# ── Config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the gh-shorthand configuration."""
    from shorthand.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   File: {result.config_path}")
        click.echo(f"   Repo shorthands: {len(result.config.repos)}")
        click.echo(f"   User shorthands: {len(result.config.users)}")
        if result.config.default_repo:
            click.echo(f"   Default repo: {result.config.default_repo}")
        click.echo(f"   RPC: {'enabled' if result.config.rpc_enabled else 'disabled'}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register sub-command groups from shorthand/ui/cli/ ──────────

from shorthand.ui.cli.server import server

cli.add_command(server)


if __name__ == "__main__":
    cli()

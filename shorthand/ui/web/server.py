"""
RPC server — Flask app factory.

Creates the long-running companion service that the completion client
polls. The app owns one ``FetchCache`` shared by every request thread and
the fetchers that fill it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from flask import Flask

from shorthand.core.models.config import ShorthandConfig
from shorthand.core.models.rpc import FetchResult
from shorthand.core.services.fetch_cache import FetchCache

logger = logging.getLogger(__name__)


def create_app(
    config: ShorthandConfig | None = None,
    fetchers: Mapping[str, Callable[[str], FetchResult]] | None = None,
    cache: FetchCache | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Shorthand configuration (token and bind address).
        fetchers: Fetch kind → fetch function. Defaults to a GitHub
            client built from ``config.api_token``.
        cache: Fetch cache. Defaults to a fresh one.

    Returns:
        Configured Flask application.
    """
    config = config or ShorthandConfig()

    app = Flask(__name__)
    app.config["SERVER_HOST"] = config.server_host
    app.config["SERVER_PORT"] = config.server_port

    if fetchers is None:
        from shorthand.adapters.github import GitHubClient

        fetchers = GitHubClient(config.api_token).fetchers()

    app.extensions["fetch_cache"] = cache or FetchCache()
    app.extensions["fetchers"] = dict(fetchers)

    from shorthand.ui.web.routes_rpc import rpc_bp

    app.register_blueprint(rpc_bp)

    logger.info("RPC app created (kinds=%s)", ", ".join(sorted(fetchers)))
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 7347,
    debug: bool = False,
) -> None:
    """Run the threaded Flask server until interrupted."""
    logger.info("Starting RPC server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)

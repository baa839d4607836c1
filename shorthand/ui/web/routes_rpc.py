"""
RPC routes — one endpoint per fetch kind, all backed by the fetch cache.

GET /repo?q=owner/name            → repository description
GET /issue?q=owner/name#123       → issue or pull request
GET /issues?q=<search>            → issue search results
GET /project?q=owner[/name]/123   → a single project
GET /projects?q=owner[/name]      → recent projects
GET /health                       → pending and cached entry counts

Every fetch endpoint answers immediately with a ``FetchResult``; an
incomplete result without an error means "poll again".
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from shorthand.core.services.fetch_cache import FetchCache

logger = logging.getLogger(__name__)

rpc_bp = Blueprint("rpc", __name__)


def _cache() -> FetchCache:
    return current_app.extensions["fetch_cache"]


def _serve(kind: str):  # type: ignore[no-untyped-def]
    """Look up or start the ``kind`` fetch for the request's ``q``."""
    query = request.args.get("q", "")
    if not query:
        return jsonify({"complete": True, "error": "Missing 'q' parameter"}), 400

    fetcher = current_app.extensions["fetchers"][kind]
    result = _cache().fetch(kind, query, fetcher)
    return jsonify(result.model_dump())


@rpc_bp.route("/repo")
def rpc_repo():  # type: ignore[no-untyped-def]
    """Repository description."""
    return _serve("repo")


@rpc_bp.route("/issue")
def rpc_issue():  # type: ignore[no-untyped-def]
    """Single issue or pull request."""
    return _serve("issue")


@rpc_bp.route("/issues")
def rpc_issues():  # type: ignore[no-untyped-def]
    """Issue search."""
    return _serve("issues")


@rpc_bp.route("/project")
def rpc_project():  # type: ignore[no-untyped-def]
    """Single repo or org project."""
    return _serve("project")


@rpc_bp.route("/projects")
def rpc_projects():  # type: ignore[no-untyped-def]
    """Recently updated projects for a repo or org."""
    return _serve("projects")


@rpc_bp.route("/health")
def rpc_health():  # type: ignore[no-untyped-def]
    """Liveness plus cache occupancy."""
    return jsonify({"status": "ok", **_cache().stats()})

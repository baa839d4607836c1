"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from shorthand.core.models.config import ShorthandConfig
from shorthand.core.models.rpc import FetchResult

REPOS = {
    "df": "zerowidth/dotfiles",
    "df2": "zerowidth/dotfiles2",
    "dupe": "dupe-repo/stuff",
}

USERS = {
    "zw": "zerowidth",
    "dupe": "dupe-user",
}


class FakeClient:
    """Fetch-protocol client returning canned results and recording calls."""

    def __init__(self, results: dict[str, FetchResult] | None = None, default: FetchResult | None = None):
        self.results = results or {}
        self.default = default or FetchResult(complete=False)
        self.calls: list[tuple[str, str]] = []

    def query(self, endpoint: str, query: str) -> FetchResult:
        self.calls.append((endpoint, query))
        return self.results.get(f"{endpoint}:{query}", self.default)


@pytest.fixture
def config() -> ShorthandConfig:
    """Config with repo/user shorthands and a default repo."""
    return ShorthandConfig(
        repos=REPOS,
        users=USERS,
        default_repo="zerowidth/default",
        api_token="secret",
    )


@pytest.fixture
def empty_config() -> ShorthandConfig:
    return ShorthandConfig()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A valid config file on disk."""
    path = tmp_path / "gh-shorthand.yml"
    path.write_text(textwrap.dedent("""\
        repos:
          df: zerowidth/dotfiles
        users:
          zw: zerowidth
        default_repo: zerowidth/default
        api_token: secret
    """))
    return path


@pytest.fixture
def make_client():
    """Factory for ``FakeClient`` instances."""
    return FakeClient

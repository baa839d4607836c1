"""
Tests for the enrichment client — debounce, pending, and degraded states.
"""

from __future__ import annotations

import pytest

from shorthand.adapters.rpc_client import RPCUnavailableError
from shorthand.core.completion.continuation import ContinuationState
from shorthand.core.completion.enrichment import (
    DELAY,
    RERUN_AFTER,
    SEARCH_DELAY,
    Enricher,
    ellipsis,
)
from shorthand.core.models.items import FilterResult
from shorthand.core.models.rpc import FetchResult, Repo

START = 1000.0


def _enricher(client, elapsed: float, query: str = " df") -> Enricher:
    return Enricher(client, query, START, clock=lambda: START + elapsed)


class _DownClient:
    """A client whose service is not running."""

    def __init__(self):
        self.calls = 0

    def query(self, endpoint: str, query: str) -> FetchResult:
        self.calls += 1
        raise RPCUnavailableError("connection refused")


class TestRequest:
    """The per-request state machine."""

    def test_below_threshold_does_not_contact_service(self, make_client):
        client = make_client()
        enricher = _enricher(client, elapsed=0.05)

        result = enricher.request("/repo", "zerowidth/dotfiles", DELAY)

        assert result is None
        assert enricher.pending
        assert client.calls == []

    def test_first_attempt_pending(self, make_client):
        client = make_client(default=FetchResult(complete=False))
        enricher = _enricher(client, elapsed=0.2)

        result = enricher.request("/repo", "zerowidth/dotfiles", DELAY)

        assert result is not None and not result.complete
        assert enricher.pending
        assert client.calls == [("/repo", "zerowidth/dotfiles")]
        assert enricher.continuation() == ContinuationState(query=" df", start=START)

    def test_completed_payload(self, make_client):
        payload = FetchResult(complete=True, repos=[Repo(description="dotfiles")])
        client = make_client({"/repo:zerowidth/dotfiles": payload})
        enricher = _enricher(client, elapsed=0.5)

        result = enricher.request("/repo", "zerowidth/dotfiles", DELAY)

        assert result == payload
        assert not enricher.pending
        assert enricher.continuation() is None

    def test_error_is_resolved(self, make_client):
        client = make_client(default=FetchResult(complete=True, error="boom"))
        enricher = _enricher(client, elapsed=0.5)

        result = enricher.request("/repo", "x/y", DELAY)

        assert result is not None
        assert result.error == "boom"
        assert not enricher.pending

    def test_search_uses_longer_delay(self, make_client):
        client = make_client()
        enricher = _enricher(client, elapsed=0.3)

        enricher.request("/issues", "bug", SEARCH_DELAY)

        assert client.calls == []
        assert enricher.pending

    def test_unavailable_disables_enrichment(self):
        client = _DownClient()
        enricher = _enricher(client, elapsed=0.5)

        assert enricher.request("/repo", "x/y", DELAY) is None
        assert enricher.disabled
        assert not enricher.pending

        # no further attempts this run
        assert enricher.request("/issue", "x/y#1", DELAY) is None
        assert client.calls == 1

    def test_no_client(self):
        enricher = _enricher(None, elapsed=5.0)
        assert enricher.disabled
        assert enricher.request("/repo", "x/y", DELAY) is None
        assert not enricher.pending

    def test_negative_elapsed_clamped(self, make_client):
        enricher = Enricher(make_client(), " df", START, clock=lambda: START - 3)
        assert enricher.elapsed == 0.0


class TestEllipsis:
    """Placeholder animation."""

    @pytest.mark.parametrize(
        ("elapsed", "expected"),
        [(0.0, "Loading"), (0.3, "Loading."), (0.6, "Loading.."), (0.9, "Loading..."), (1.1, "Loading")],
    )
    def test_phases(self, elapsed: float, expected: str):
        assert ellipsis("Loading", elapsed) == expected

    def test_placeholder_uses_elapsed(self, make_client):
        assert _enricher(make_client(), elapsed=0.6).placeholder("Retrieving") == "Retrieving.."


class TestFinalize:
    """Continuation variables and rerun hint."""

    def test_nothing_pending(self, make_client):
        result = FilterResult()
        _enricher(make_client(), elapsed=0.0).finalize(result)
        assert result.rerun is None
        assert result.variables is None

    def test_pending_emits_continuation(self, make_client):
        enricher = _enricher(make_client(), elapsed=0.05)
        enricher.request("/repo", "x/y", DELAY)

        result = FilterResult()
        enricher.finalize(result)

        assert result.rerun == RERUN_AFTER
        assert result.variables == {"query": " df", "s": "1000", "ns": "0"}

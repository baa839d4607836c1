"""
Enrichment client — live GitHub data for completion items, without blocking.

Per item the outcome is either resolved (final text, nothing more to do) or
pending (placeholder text, ask the launcher to run us again). Decisions
depend only on ``elapsed``, the time since the session started, as
recovered from the continuation state:

    elapsed < delay             pending, RPC service not contacted
    service: still fetching     pending, animated placeholder
    service: error              resolved, error shown as subtitle
    service: payload            resolved, payload folded into the item
    service unreachable         enrichment disabled for this run

The delay tiers debounce typing: nothing is fetched for a query until it
has been stable for that long.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from shorthand.adapters.rpc_client import FetchClient, RPCUnavailableError
from shorthand.core.completion.continuation import ContinuationState
from shorthand.core.models.items import FilterResult
from shorthand.core.models.rpc import FetchResult

logger = logging.getLogger(__name__)

# How soon the launcher should re-invoke us while anything is pending.
# An ideal; the true delay is measured through the continuation.
RERUN_AFTER = 0.1

# Seconds of a stable query before each kind of fetch
DELAY = 0.1             # single repo, issue, or project
SEARCH_DELAY = 0.5      # issue search
ISSUE_LIST_DELAY = 1.0  # recent issues in a repo

# Placeholder animation: one more dot every quarter second, four phases
_ELLIPSIS_PERIOD = 0.25
_ELLIPSIS_PHASES = 4


def ellipsis(prefix: str, elapsed: float) -> str:
    """``prefix`` followed by 0–3 dots, cycling with ``elapsed``."""
    dots = int(elapsed / _ELLIPSIS_PERIOD) % _ELLIPSIS_PHASES
    return prefix + "." * dots


class Enricher:
    """Tracks elapsed time and pending state for one completion run.

    Args:
        client: Fetch-protocol client, or None when RPC is not configured.
        query: The full launcher query (the continuation key).
        start: Session start, epoch seconds.
        clock: Wall clock, injectable for tests.
    """

    def __init__(
        self,
        client: FetchClient | None,
        query: str,
        start: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.query = query
        self.start = start
        self.elapsed = max(0.0, clock() - start)
        self.pending = False
        self.disabled = client is None

    def request(self, endpoint: str, query: str, delay: float) -> FetchResult | None:
        """Ask the RPC service for ``endpoint``/``query`` once ``delay`` has passed.

        Returns:
            The service's result, or None when the item keeps its static
            text: enrichment is disabled, or the delay has not passed yet
            (the latter still marks the run pending).
        """
        if self.disabled:
            return None

        if self.elapsed < delay:
            self.pending = True
            return None

        try:
            result = self.client.query(endpoint, query)  # type: ignore[union-attr]
        except RPCUnavailableError as e:
            logger.info("RPC unavailable, enrichment disabled: %s", e)
            self.disabled = True
            return None

        if not result.complete and not result.error:
            self.pending = True
        return result

    def placeholder(self, prefix: str) -> str:
        return ellipsis(prefix, self.elapsed)

    def continuation(self) -> ContinuationState | None:
        """State for the next invocation, only while something is pending."""
        if not self.pending:
            return None
        return ContinuationState(query=self.query, start=self.start)

    def finalize(self, result: FilterResult) -> None:
        """Attach continuation variables and the rerun hint, if pending."""
        state = self.continuation()
        if state is None:
            return
        for key, value in state.to_variables().items():
            result.set_variable(key, value)
        result.rerun = RERUN_AFTER

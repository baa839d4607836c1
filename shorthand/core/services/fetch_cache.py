"""
Fetch cache — single-flight request coalescing with TTL expiry.

Every RPC endpoint funnels through ``FetchCache.fetch``, which always
returns immediately:

    key pending            → incomplete result, nothing dispatched
    live cache entry       → the stored result (success or error)
    otherwise              → mark pending, dispatch the fetch, incomplete result

The dispatched fetch runs on its own daemon thread. When it finishes, the
result is stored (long TTL on success, short TTL on error) and the key
leaves the pending set in one critical section.

Thread safety:
    A single lock guards both the pending set and the entries. The
    check-and-set in ``fetch`` is atomic, which is what makes N concurrent
    pollers trigger exactly one upstream call. The lock is never held
    across the fetch itself, so a slow GitHub call does not block lookups
    for other keys.

No cancellation: once dispatched, a fetch runs to completion or timeout
whether or not anyone is still polling. Expired entries are swept lazily.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from shorthand.core.models.rpc import FetchResult

logger = logging.getLogger(__name__)

RESULT_TTL = 600.0      # successful results, seconds
ERROR_TTL = 10.0        # errors, seconds
SWEEP_INTERVAL = 600.0  # expired-entry sweep, seconds

Fetcher = Callable[[str], FetchResult]
Dispatch = Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class CacheEntry:
    """A completed fetch and the monotonic time it stops being served."""

    result: FetchResult
    expires_at: float

    def live(self, now: float) -> bool:
        return now < self.expires_at


def cache_key(kind: str, query: str) -> str:
    return f"{kind}:{query}"


def _thread_dispatch(run: Callable[[], None]) -> None:
    threading.Thread(target=run, name="fetch", daemon=True).start()


class FetchCache:
    """Single-flight cache in front of the remote fetchers.

    Args:
        result_ttl: Seconds a successful result is served.
        error_ttl: Seconds an error is served before the next fetch.
        sweep_interval: Minimum seconds between expired-entry sweeps.
        clock: Monotonic clock, injectable for tests.
        dispatch: Runs a fetch independently of the caller. Defaults to a
            daemon thread per fetch.
    """

    def __init__(
        self,
        result_ttl: float = RESULT_TTL,
        error_ttl: float = ERROR_TTL,
        sweep_interval: float = SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        dispatch: Dispatch = _thread_dispatch,
    ) -> None:
        self.result_ttl = result_ttl
        self.error_ttl = error_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._dispatch = dispatch

        self._lock = threading.Lock()
        self._pending: set[str] = set()
        self._entries: dict[str, CacheEntry] = {}
        self._last_sweep = clock()

    def fetch(self, kind: str, query: str, fetcher: Fetcher) -> FetchResult:
        """Serve ``kind:query`` from cache, or start fetching it.

        Never blocks on the fetch; an incomplete result means "ask again".
        """
        key = cache_key(kind, query)

        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            if key in self._pending:
                return FetchResult(complete=False)

            entry = self._entries.get(key)
            if entry is not None and entry.live(now):
                return entry.result

            self._pending.add(key)

        logger.info("RPC request: %s", key)
        try:
            self._dispatch(lambda: self._run(key, query, fetcher))
        except Exception:
            with self._lock:
                self._pending.discard(key)
            raise
        return FetchResult(complete=False)

    def _run(self, key: str, query: str, fetcher: Fetcher) -> None:
        """Perform one fetch and publish its result."""
        try:
            result = fetcher(query)
            result = result.model_copy(update={"complete": True, "error": ""})
            ttl = self.result_ttl
            logger.info("RPC result: %s", key)
        except Exception as e:
            # any fetch failure becomes a short-lived cached error
            result = FetchResult(complete=True, error=str(e) or type(e).__name__)
            ttl = self.error_ttl
            logger.info("RPC error: %s: %s", key, result.error)

        with self._lock:
            self._pending.discard(key)
            self._entries[key] = CacheEntry(result=result, expires_at=self._clock() + ttl)

    def _maybe_sweep(self, now: float) -> None:
        """Drop expired entries. Caller holds the lock."""
        if now - self._last_sweep < self.sweep_interval:
            return
        expired = [k for k, e in self._entries.items() if not e.live(now)]
        for k in expired:
            del self._entries[k]
        self._last_sweep = now
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))

    # ── Introspection ───────────────────────────────────────────

    def is_pending(self, kind: str, query: str) -> bool:
        with self._lock:
            return cache_key(kind, query) in self._pending

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"pending": len(self._pending), "entries": len(self._entries)}

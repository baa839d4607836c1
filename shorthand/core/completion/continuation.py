"""
Continuation state — elapsed time across stateless invocations.

The launcher runs ``complete`` as a fresh process on every keystroke and,
when asked, again after a short ``rerun`` interval. Variables set on a
response are handed back to the next invocation as environment
variables, so the session start time survives by round-tripping it:

    query   the exact query text being timed
    s       start time, whole seconds since the epoch
    ns      start time, nanosecond remainder

A continuation is honored only when ``query`` equals the current query
byte for byte. Any edit restarts the clock.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_NS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class ContinuationState:
    """The (query, start) pair handed from one invocation to the next."""

    query: str
    start: float    # epoch seconds

    def to_variables(self) -> dict[str, str]:
        """Encode as the launcher's response variables."""
        total_ns = round(self.start * _NS_PER_SECOND)
        seconds, nanos = divmod(total_ns, _NS_PER_SECOND)
        return {"query": self.query, "s": str(seconds), "ns": str(nanos)}

    @classmethod
    def from_variables(cls, variables: Mapping[str, str]) -> ContinuationState | None:
        """Decode launcher variables; None when any is missing or malformed."""
        query = variables.get("query")
        seconds = variables.get("s")
        nanos = variables.get("ns")
        if query is None or seconds is None or nanos is None:
            return None
        try:
            start = int(seconds) + int(nanos) / _NS_PER_SECOND
        except ValueError:
            return None
        return cls(query=query, start=start)


def recover_start(query: str, previous: ContinuationState | None, now: float) -> float:
    """Start time for this invocation's session.

    The previous start is reused only for the identical query; otherwise
    the session starts now.
    """
    if previous is not None and previous.query == query:
        return previous.start
    return now


def load_continuation(environ: Mapping[str, str] | None = None) -> ContinuationState | None:
    """Read a continuation from the process environment."""
    return ContinuationState.from_variables(os.environ if environ is None else environ)

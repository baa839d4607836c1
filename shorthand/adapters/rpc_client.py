"""
RPC client — the completion side of the fetch protocol.

Sends ``GET <base>/<kind>?q=<query>`` to the local RPC service and decodes
the ``FetchResult``. The timeout is deliberately tiny: a wedged or absent
service must never stall the launcher.

Failure mapping:
    service unreachable / timed out   → RPCUnavailableError
    HTTP status >= 400                → complete result with an error
    undecodable body                  → complete result with an error
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Protocol

from pydantic import ValidationError

from shorthand.core.models.rpc import FetchResult

logger = logging.getLogger(__name__)

# Client → service transport timeout, seconds
SOCKET_TIMEOUT = 0.1


class RPCUnavailableError(Exception):
    """The RPC service could not be reached."""


class FetchClient(Protocol):
    """Anything that can answer fetch-protocol queries."""

    def query(self, endpoint: str, query: str) -> FetchResult: ...


class RPCClient:
    """HTTP client for the local RPC service.

    Args:
        base_url: e.g. ``http://127.0.0.1:7347``. Empty disables RPC.
        timeout: Transport timeout in seconds.
    """

    def __init__(self, base_url: str, timeout: float = SOCKET_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def query(self, endpoint: str, query: str) -> FetchResult:
        """Run one fetch-protocol request.

        Args:
            endpoint: ``/repo``, ``/issue``, ``/issues``, ``/project`` or ``/projects``.
            query: Free-text query for the endpoint.

        Raises:
            RPCUnavailableError: If RPC is disabled or the service is unreachable.
        """
        if not self.enabled:
            raise RPCUnavailableError("RPC is not configured")

        url = f"{self.base_url}{endpoint}?{urllib.parse.urlencode({'q': query})}"
        req = urllib.request.Request(url, headers={"Accept": "application/json"})

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as e:
            return FetchResult(complete=True, error=f"RPC service error: {e.code} {e.reason}")
        except (urllib.error.URLError, OSError) as e:
            # URLError wraps refused connections; socket timeouts arrive as OSError
            logger.debug("RPC service unavailable at %s: %s", self.base_url, e)
            raise RPCUnavailableError(str(e)) from e

        try:
            return FetchResult.model_validate(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            return FetchResult(complete=True, error=f"unmarshal error: {e}")

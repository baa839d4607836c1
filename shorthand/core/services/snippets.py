"""
Snippets — convert GitHub URLs and references into pasteable text.

    markdown_link     URL or owner/name#N  → [owner/name#N](url)
    issue_reference   issue or PR URL      → owner/name#N

With a description, ``markdown_link`` polls the RPC service until the
fetch completes (or gives up) and puts the title or description into the
link text.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable

from shorthand.adapters.rpc_client import FetchClient, RPCUnavailableError
from shorthand.core.models.rpc import FetchResult
from shorthand.core.parser.parser import issue_reference_parser

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds between polls
POLL_TIMEOUT = 5.0   # give up after this many seconds

_REPO_URL_RE = re.compile(r"(https://github\.com/([^/]+)/([^/]+)\b)(.?)")
_ISSUE_URL_RE = re.compile(r"(https://github\.com/([^/]+)/([^/]+)/(issues|pull)/(\d+))#?")
_DISCUSSION_URL_RE = re.compile(r"(https://github\.com/orgs/([^/]+)/teams/([^/]+)/discussions/(\d+))#?")


class _Poller:
    """Repeats one RPC query until it completes or the timeout passes."""

    def __init__(
        self,
        client: FetchClient,
        interval: float = POLL_INTERVAL,
        timeout: float = POLL_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.interval = interval
        self.timeout = timeout
        self.clock = clock
        self.sleep = sleep

    def poll(self, endpoint: str, query: str) -> FetchResult | None:
        """The completed result, or None on timeout.

        Raises:
            RPCUnavailableError: If the service cannot be reached.
        """
        deadline = self.clock() + self.timeout
        while True:
            result = self.client.query(endpoint, query)
            if result.complete:
                return result
            if self.clock() >= deadline:
                return None
            self.sleep(self.interval)


def friendlier_markdown(text: str) -> str:
    """Make a title safe inside markdown link text.

    Brackets become parens; a repeated ``::`` becomes ``|`` (a single one
    renders fine).
    """
    text = text.replace("[", "(").replace("]", ")")
    if text.count("::") > 1:
        text = text.replace("::", "|")
    return text


def _describe(link: str, ref: str, url: str, poller: _Poller | None, endpoint: str, query: str) -> str:
    if poller is None:
        return link

    try:
        result = poller.poll(endpoint, query)
    except RPCUnavailableError as e:
        return f"{link} (rpc error: {e})"

    if result is None:
        logger.info("Timed out waiting for %s %s", endpoint, query)
        return f"{link} (rpc timed out)"
    if result.error:
        return f"{link} (rpc error: {result.error})"

    if endpoint == "/issue" and result.issues:
        description = result.issues[0].title
    elif endpoint == "/repo" and result.repos:
        description = result.repos[0].description
    else:
        return f"{link} (rpc error: no data returned)"

    return f"[{ref}: {friendlier_markdown(description)}]({url})"


def markdown_link(
    client: FetchClient | None,
    text: str,
    include_description: bool = False,
    poll_interval: float = POLL_INTERVAL,
    poll_timeout: float = POLL_TIMEOUT,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Markdown link for the first GitHub reference found in ``text``.

    Args:
        client: RPC client used for descriptions.
        text: A URL or an ``owner/name#N`` reference, possibly among other words.
        include_description: Fetch the title/description into the link text.

    Returns:
        The link, or ``text`` unchanged when nothing recognizable was found.
    """
    poller = None
    if include_description and client is not None:
        poller = _Poller(client, interval=poll_interval, timeout=poll_timeout, sleep=sleep)

    reference = issue_reference_parser().parse(text)
    if reference.has_issue:
        ref = f"{reference.repo}#{reference.issue}"
        url = f"https://github.com/{reference.repo}/issues/{reference.issue}"
        return _describe(f"[{ref}]({url})", ref, url, poller, "/issue", ref)

    m = _ISSUE_URL_RE.search(text)
    if m:
        url, repo, number = m.group(1), f"{m.group(2)}/{m.group(3)}", m.group(5)
        ref = f"{repo}#{number}"
        return _describe(f"[{ref}]({url})", ref, url, poller, "/issue", ref)

    m = _DISCUSSION_URL_RE.search(text)
    if m:
        return f"[@{m.group(2)}/{m.group(3)}#{m.group(4)}]({m.group(1)})"

    # a repo URL only when nothing deeper follows it
    m = _REPO_URL_RE.search(text)
    if m and m.group(4) != "/":
        url, repo = m.group(1), f"{m.group(2)}/{m.group(3)}"
        return _describe(f"[{repo}]({url})", repo, url, poller, "/repo", repo)

    return text


def issue_reference(text: str) -> str:
    """``owner/name#N`` for the first issue or PR URL in ``text``, else ``text``."""
    m = _ISSUE_URL_RE.search(text)
    if m is None:
        return text
    return f"{m.group(2)}/{m.group(3)}#{m.group(5)}"

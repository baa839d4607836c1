"""
Completion — one launcher invocation, from raw query to result items.

The raw query is ``<mode><space><input>``:

    ""          default items, one per mode
    " <input>"  open a repo, issue or path
    "i <input>" list or search issues in a repo
    "p <input>" list or open projects for a repo or an org
    "n <input>" new issue in a repo
    "s <input>" search issues everywhere

Each mode parses its input with its own parser options, builds the static
items, then asks the ``Enricher`` for live data to fold into them. Nothing
here blocks: unresolved enrichment leaves a placeholder and the result
asks the launcher to run us again.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from shorthand.adapters.rpc_client import FetchClient
from shorthand.core.completion import icons
from shorthand.core.completion import items as builders
from shorthand.core.completion.enrichment import (
    DELAY,
    ISSUE_LIST_DELAY,
    SEARCH_DELAY,
    Enricher,
)
from shorthand.core.completion.items import AutocompleteStyle
from shorthand.core.models.config import ShorthandConfig
from shorthand.core.models.items import FilterResult, Item, Text
from shorthand.core.models.rpc import FetchResult
from shorthand.core.parser.parser import ParseOption, Parser
from shorthand.core.parser.result import ParseResult

logger = logging.getLogger(__name__)

OPEN_OPTIONS = ParseOption.REQUIRE_REPO | ParseOption.ISSUE | ParseOption.PATH
ISSUE_OPTIONS = ParseOption.REQUIRE_REPO | ParseOption.QUERY
PROJECT_OPTIONS = ParseOption.BARE_USER | ParseOption.ISSUE
NEW_ISSUE_OPTIONS = ParseOption.REQUIRE_REPO | ParseOption.QUERY

# Autocompletion only needs to know which shorthand the input names so far.
_PREFIX_OPTIONS = ParseOption.REPO | ParseOption.QUERY


def extract_mode(query: str) -> tuple[str, str] | None:
    """Split a raw launcher query into ``(mode, input)``.

    Returns:
        None when the query is not a mode followed by a space, e.g. ``"ix"``.
    """
    if not query:
        return "", ""
    if len(query) == 1:
        return query, ""
    mode = query[0]
    if mode == " ":
        return mode, query[1:]
    if query[1] != " ":
        return None
    return mode, query[2:]


def complete(
    config: ShorthandConfig,
    query: str,
    start: float,
    client: FetchClient | None = None,
    clock: Callable[[], float] = time.time,
) -> FilterResult:
    """Build the launcher result for one invocation.

    Args:
        config: Shorthand dictionaries and default repo.
        query: The full raw launcher query.
        start: Session start (epoch seconds) from the continuation state.
        client: RPC client, or None to skip enrichment entirely.
        clock: Wall clock, injectable for tests.
    """
    split = extract_mode(query)
    if split is None:
        logger.debug("No mode in query %r", query)
        return FilterResult()

    mode, text = split
    enricher = Enricher(client, query, start, clock=clock)
    completion = Completion(config, query, text, enricher)
    completion.run(mode)
    return completion.finalize()


class Completion:
    """Collects items for a single mode and input."""

    def __init__(self, config: ShorthandConfig, query: str, text: str, enricher: Enricher) -> None:
        self.config = config
        self.query = query
        self.text = text
        self.enricher = enricher
        self.result = FilterResult()

    def parser(self, options: ParseOption, default_repo: bool = True) -> Parser:
        return Parser(
            self.config.repos,
            self.config.users,
            self.config.default_repo if default_repo else "",
            options,
        )

    def run(self, mode: str) -> None:
        handler = self._MODES.get(mode)
        if handler is None:
            logger.debug("Unknown mode %r", mode)
            return
        handler(self)

    def finalize(self) -> FilterResult:
        """Copy text for every URL item, then attach continuation state."""
        for item in self.result.items:
            if item.arg and item.arg.startswith("open "):
                url = item.arg[len("open "):]
                item.text = Text(copy_text=url, large_type=url)
        self.enricher.finalize(self.result)
        return self.result

    # ── Modes ───────────────────────────────────────────────────

    def default_mode(self) -> None:
        self.result.append(*builders.default_items())

    def open_mode(self) -> None:
        parsed = self.parser(OPEN_OPTIONS).parse(self.text)
        if parsed.has_repo:
            item = builders.open_repo_item(parsed)
            if parsed.has_issue:
                self.retrieve_issue(item, parsed)
            else:
                self.retrieve_repo(item, parsed)
            self.result.append(item)
        else:
            bare = Parser(options=ParseOption.PATH).parse(self.text)
            if bare.has_path:
                self.result.append(builders.open_path_item(bare.path))

        self.autocomplete(builders.OPEN_STYLE)

    def issues_mode(self) -> None:
        parsed = self.parser(ISSUE_OPTIONS).parse(self.text)
        if parsed.has_repo:
            if parsed.empty_query:
                issues_item = builders.open_issues_item(parsed)
                matches = self.search_issues(
                    issues_item,
                    f"repo:{parsed.repo} sort:updated-desc",
                    include_repo=False,
                    delay=ISSUE_LIST_DELAY,
                )
                self.result.append(issues_item, builders.search_issues_item(parsed, self.query))
                self.result.append(*matches)
            else:
                search_item = builders.search_issues_item(parsed, self.query)
                matches = self.search_issues(
                    search_item,
                    f"{parsed.query} repo:{parsed.repo}",
                    include_repo=False,
                    delay=SEARCH_DELAY,
                )
                self.result.append(search_item, *matches)

        self.autocomplete(builders.ISSUES_STYLE)

    def projects_mode(self) -> None:
        parsed = self.parser(PROJECT_OPTIONS).parse(self.text)
        if parsed.has_owner:
            if parsed.has_repo:
                item = builders.repo_projects_item(parsed)
                target, description = parsed.repo, f"in {parsed.repo}"
            else:
                item = builders.org_projects_item(parsed)
                target, description = parsed.owner, f"for {parsed.owner}"

            if parsed.has_issue:
                self.retrieve_project(item, f"{target}/{parsed.issue}")
                self.result.append(item)
            else:
                projects = self.retrieve_projects(item, target, description)
                self.result.append(item, *projects)

        if " " in self.text:
            return
        prefix = self.parser(_PREFIX_OPTIONS, default_repo=False).parse(self.text)
        for key, repo in self._extending(self.config.repos):
            self.result.append(builders.PROJECTS_STYLE.repo_item(key, repo))
        for key, user in self._extending(self.config.users):
            self.result.append(builders.org_project_autocomplete_item(key, user))
        if not self.text or prefix.repo != self.text:
            self.result.append(builders.open_ended_project_item(self.text))

    def new_issue_mode(self) -> None:
        parsed = self.parser(NEW_ISSUE_OPTIONS).parse(self.text)
        if parsed.has_repo:
            self.result.append(builders.new_issue_item(parsed))
        self.autocomplete(builders.NEW_ISSUE_STYLE)

    def search_mode(self) -> None:
        item = builders.global_issue_search_item(self.text)
        matches = self.search_issues(item, self.text, include_repo=True, delay=SEARCH_DELAY)
        self.result.append(item, *matches)

    _MODES: dict[str, Callable[[Completion], None]] = {
        "": default_mode,
        " ": open_mode,
        "i": issues_mode,
        "p": projects_mode,
        "n": new_issue_mode,
        "s": search_mode,
    }

    # ── Autocompletion ──────────────────────────────────────────

    def _extending(self, mapping: dict[str, str]) -> list[tuple[str, str]]:
        """Entries whose key strictly extends the typed text."""
        if not self.text:
            return []
        return sorted(
            (key, value) for key, value in mapping.items()
            if key.startswith(self.text) and len(key) > len(self.text)
        )

    def autocomplete(self, style: AutocompleteStyle) -> None:
        """Shorthand completions plus an open-ended item, for single-word input."""
        if " " in self.text:
            return
        prefix = self.parser(_PREFIX_OPTIONS, default_repo=False).parse(self.text)

        for key, repo in self._extending(self.config.repos):
            self.result.append(style.repo_item(key, repo))

        if self.text:
            for key, user in sorted(self.config.users.items()):
                extends = key.startswith(self.text) and len(key) > len(self.text)
                matched = key == prefix.user_shorthand and not prefix.has_repo
                if extends or matched:
                    self.result.append(style.user_item(key, user))

        if not self.text or prefix.repo != self.text:
            self.result.append(style.open_ended_item(self.text))

    # ── Enrichment ──────────────────────────────────────────────

    def _request(self, item: Item, endpoint: str, query: str, delay: float, waiting: str) -> FetchResult | None:
        """Resolved payload, or None.

        On None the item keeps its static text while debouncing or disabled,
        or shows the error or the waiting placeholder.
        """
        result = self.enricher.request(endpoint, query, delay)
        if result is None:
            return None
        if result.error:
            item.subtitle = result.error
            return None
        if not result.complete:
            item.subtitle = self.enricher.placeholder(waiting)
            return None
        return result

    def retrieve_repo(self, item: Item, parsed: ParseResult) -> None:
        result = self._request(item, "/repo", parsed.repo, DELAY, "Retrieving description")
        if result is None:
            return
        if not result.repos:
            item.subtitle = "rpc error: missing repo in result"
            return

        description = result.repos[0].description
        item.subtitle = description
        if item.mods is not None:
            item.mods.ctrl = builders.described_link_mod(
                parsed.repo, description, f"{builders.GITHUB}/{parsed.repo}",
            )

    def retrieve_issue(self, item: Item, parsed: ParseResult) -> None:
        ref = f"{parsed.repo}#{parsed.issue}"
        result = self._request(item, "/issue", ref, DELAY, "Retrieving issue title")
        if result is None:
            return
        if not result.issues:
            item.subtitle = "rpc error: missing issue in result"
            return

        issue = result.issues[0]
        item.subtitle = item.title
        item.title = issue.title
        item.icon = icons.issue_state_icon(issue.type, issue.state)
        if item.mods is not None:
            item.mods.ctrl = builders.described_link_mod(
                ref, issue.title, f"{builders.GITHUB}/{parsed.repo}/issues/{parsed.issue}",
            )

    def retrieve_project(self, item: Item, query: str) -> None:
        result = self._request(item, "/project", query, DELAY, "Retrieving project name")
        if result is None:
            return
        if not result.projects:
            item.subtitle = "rpc error: missing project in result"
            return

        project = result.projects[0]
        item.subtitle = item.title
        item.title = project.name
        item.icon = icons.project_state_icon(project.state)

    def retrieve_projects(self, item: Item, query: str, description: str) -> list[Item]:
        result = self._request(item, "/projects", query, DELAY, "Retrieving projects")
        if result is None:
            return []
        if not result.projects:
            item.subtitle = "No projects found"
            return []
        return builders.project_items(result.projects, description)

    def search_issues(self, item: Item, query: str, include_repo: bool, delay: float) -> list[Item]:
        # an unfinished search item has nothing to search for yet
        if not item.valid:
            return []
        result = self._request(item, "/issues", query, delay, "Searching issues")
        if result is None:
            return []
        if not result.issues:
            item.subtitle = "No issues found"
            return []
        return builders.issue_items(result.issues, include_repo)

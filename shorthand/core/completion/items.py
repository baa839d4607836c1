"""
Item builders — launcher rows for parsed shorthand.

Every actionable item's ``arg`` is ``open <url>`` or ``paste <text>``; the
launcher workflow dispatches on the first word.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote

from shorthand.core.completion import icons
from shorthand.core.models.items import Icon, Item, ModItem, Mods
from shorthand.core.models.rpc import Issue, Project
from shorthand.core.parser.result import ParseResult

GITHUB = "https://github.com"


def _escape(text: str) -> str:
    return quote(text, safe="")


# ── Default items (no mode yet) ─────────────────────────────────

DEFAULT_ITEMS: tuple[Item, ...] = (
    Item(title="Open repositories and issues on GitHub", autocomplete=" ", icon=icons.REPO),
    Item(title="List and search issues in a GitHub repository", autocomplete="i ", icon=icons.ISSUE_LIST),
    Item(
        title="List and open projects on GitHub repositories or organizations",
        autocomplete="p ",
        icon=icons.PROJECT,
    ),
    Item(title="Search issues across GitHub", autocomplete="s ", icon=icons.SEARCH),
    Item(title="New issue in a GitHub repository", autocomplete="n ", icon=icons.NEW_ISSUE),
)


def default_items() -> list[Item]:
    return [item.model_copy(deep=True) for item in DEFAULT_ITEMS]


# ── Modifier keys ───────────────────────────────────────────────


def repo_mods(repo: str) -> Mods:
    return Mods(
        cmd=ModItem(
            arg=f"paste [{repo}]({GITHUB}/{repo})",
            subtitle=f"Insert Markdown link to {repo}",
            icon=icons.MARKDOWN,
        ),
    )


def issue_mods(repo: str, number: str, title: str = "") -> Mods:
    url = f"{GITHUB}/{repo}/issues/{number}"
    mods = Mods(
        cmd=ModItem(
            arg=f"paste [{repo}#{number}]({url})",
            subtitle=f"Insert Markdown link to {repo}#{number}",
            icon=icons.MARKDOWN,
        ),
        alt=ModItem(
            arg=f"paste {repo}#{number}",
            subtitle=f"Insert issue reference to {repo}#{number}",
            icon=icons.ISSUE,
        ),
    )
    if title:
        mods.ctrl = described_link_mod(f"{repo}#{number}", title, url)
    return mods


def described_link_mod(ref: str, description: str, url: str) -> ModItem:
    """Ctrl modifier: markdown link whose text includes a fetched description."""
    return ModItem(
        arg=f"paste [{ref}: {description}]({url})",
        subtitle=f"Insert Markdown link with description to {ref}",
        icon=icons.MARKDOWN,
    )


# ── Parsed-input items ──────────────────────────────────────────


def open_repo_item(parsed: ParseResult) -> Item:
    """Open a repo, one of its issues, or a path within it."""
    repo = parsed.repo
    uid = f"gh:{repo}"
    title = f"Open {repo}"
    url = f"{GITHUB}/{repo}"
    icon = icons.REPO
    mods: Mods | None = None

    if parsed.has_issue:
        uid += f"#{parsed.issue}"
        title += f"#{parsed.issue}"
        url += f"/issues/{parsed.issue}"
        icon = icons.ISSUE
        mods = issue_mods(repo, parsed.issue)
    elif parsed.has_path:
        uid += parsed.path
        title += parsed.path
        url += parsed.path
        icon = icons.PATH
    else:
        mods = repo_mods(repo)

    return Item(
        uid=uid,
        title=title + parsed.annotation(),
        arg=f"open {url}",
        valid=True,
        icon=icon,
        mods=mods,
    )


def open_path_item(path: str) -> Item:
    return Item(uid=f"gh:{path}", title=f"Open {path}", arg=f"open {GITHUB}{path}", valid=True, icon=icons.PATH)


def open_issues_item(parsed: ParseResult) -> Item:
    return Item(
        uid=f"ghi:{parsed.repo}",
        title=f"List issues for {parsed.repo}{parsed.annotation()}",
        arg=f"open {GITHUB}/{parsed.repo}/issues",
        valid=True,
        icon=icons.ISSUE_LIST,
    )


def search_issues_item(parsed: ParseResult, full_input: str) -> Item:
    """Search issues in the parsed repo; not actionable until there's a query."""
    annotation = parsed.annotation()
    if parsed.query:
        return Item(
            uid=f"ghis:{parsed.repo}",
            title=f"Search issues in {parsed.repo}{annotation} for {parsed.query}",
            arg=f"open {GITHUB}/{parsed.repo}/search?utf8=✓&type=Issues&q={_escape(parsed.query)}",
            valid=True,
            icon=icons.SEARCH,
        )
    return Item(
        title=f"Search issues in {parsed.repo}{annotation} for...",
        autocomplete=full_input + " ",
        icon=icons.SEARCH,
    )


def repo_projects_item(parsed: ParseResult) -> Item:
    repo = parsed.repo
    if parsed.has_issue:
        return Item(
            uid=f"ghp:{repo}/{parsed.issue}",
            title=f"Open project #{parsed.issue} in {repo}{parsed.annotation()}",
            arg=f"open {GITHUB}/{repo}/projects/{parsed.issue}",
            valid=True,
            icon=icons.PROJECT,
        )
    return Item(
        uid=f"ghp:{repo}",
        title=f"List projects in {repo}{parsed.annotation()}",
        arg=f"open {GITHUB}/{repo}/projects",
        valid=True,
        icon=icons.PROJECT,
    )


def org_projects_item(parsed: ParseResult) -> Item:
    owner = parsed.owner
    if parsed.has_issue:
        return Item(
            uid=f"ghp:{owner}/{parsed.issue}",
            title=f"Open project #{parsed.issue} for {owner}{parsed.annotation()}",
            arg=f"open {GITHUB}/orgs/{owner}/projects/{parsed.issue}",
            valid=True,
            icon=icons.PROJECT,
        )
    return Item(
        uid=f"ghp:{owner}",
        title=f"List projects for {owner}{parsed.annotation()}",
        arg=f"open {GITHUB}/orgs/{owner}/projects",
        valid=True,
        icon=icons.PROJECT,
    )


def new_issue_item(parsed: ParseResult) -> Item:
    title = f"New issue in {parsed.repo}{parsed.annotation()}"
    url = f"{GITHUB}/{parsed.repo}/issues/new"
    if parsed.query:
        title += f": {parsed.query}"
        url += f"?title={_escape(parsed.query)}"
    return Item(uid=f"ghn:{parsed.repo}", title=title, arg=f"open {url}", valid=True, icon=icons.NEW_ISSUE)


def global_issue_search_item(text: str) -> Item:
    if text:
        return Item(
            uid="ghs:",
            title=f"Search issues for {text}",
            arg=f"open {GITHUB}/search?utf8=✓&type=Issues&q={_escape(text)}",
            valid=True,
            icon=icons.SEARCH,
        )
    return Item(title="Search issues for...", autocomplete="s ", icon=icons.SEARCH)


def error_item(title: str, subtitle: str) -> Item:
    return Item(title=title, subtitle=subtitle, icon=icons.ALERT)


# ── Fetched records ─────────────────────────────────────────────


def issue_items(issues: Iterable[Issue], include_repo: bool) -> list[Item]:
    items = []
    for issue in issues:
        title = f"#{issue.number} {issue.title}"
        if include_repo:
            title = issue.repo + title
        kind = "issues" if issue.type == "Issue" else "pull"
        # no uid, so the launcher doesn't learn these
        items.append(Item(
            title=title,
            subtitle=f"Open {issue.repo}#{issue.number}",
            arg=f"open {GITHUB}/{issue.repo}/{kind}/{issue.number}",
            valid=True,
            icon=icons.issue_state_icon(issue.type, issue.state),
            mods=issue_mods(issue.repo, issue.number, issue.title),
        ))
    return items


def project_items(projects: Iterable[Project], description: str) -> list[Item]:
    return [
        Item(
            title=project.name,
            subtitle=f"Open project #{project.number} {description}",
            arg=f"open {project.url}",
            valid=True,
            icon=icons.project_state_icon(project.state),
        )
        for project in projects
    ]


# ── Autocompletion ──────────────────────────────────────────────


@dataclass(frozen=True)
class AutocompleteStyle:
    """How one mode renders shorthand autocompletions.

    ``prefix`` is the mode prefix typed before the shorthand, e.g. ``"i "``.
    """

    prefix: str
    uid_prefix: str
    verb: str
    url_suffix: str
    icon: Icon

    def repo_item(self, key: str, repo: str) -> Item:
        return Item(
            uid=f"{self.uid_prefix}:{repo}",
            title=f"{self.verb} {repo} ({key})",
            arg=f"open {GITHUB}/{repo}{self.url_suffix}",
            valid=True,
            autocomplete=self.prefix + key,
            icon=self.icon,
        )

    def user_item(self, key: str, user: str) -> Item:
        return Item(title=f"{self.verb} {user}/... ({key})", autocomplete=f"{self.prefix}{key}/", icon=self.icon)

    def open_ended_item(self, text: str) -> Item:
        return Item(title=f"{self.verb} {text}...", autocomplete=self.prefix + text, icon=self.icon)


OPEN_STYLE = AutocompleteStyle(" ", "gh", "Open", "", icons.REPO)
ISSUES_STYLE = AutocompleteStyle("i ", "ghi", "List issues for", "/issues", icons.ISSUE_LIST)
NEW_ISSUE_STYLE = AutocompleteStyle("n ", "ghn", "New issue in", "/issues/new", icons.NEW_ISSUE)
PROJECTS_STYLE = AutocompleteStyle("p ", "ghp", "List projects in", "/projects", icons.PROJECT)


def org_project_autocomplete_item(key: str, user: str) -> Item:
    return Item(
        uid=f"ghp:{user}",
        title=f"List projects for {user} ({key})",
        arg=f"open {GITHUB}/orgs/{user}/projects",
        valid=True,
        autocomplete=f"p {key}",
        icon=icons.PROJECT,
    )


def open_ended_project_item(text: str) -> Item:
    return Item(title=f"List projects for {text}...", autocomplete=f"p {text}", icon=icons.PROJECT)

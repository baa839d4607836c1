"""Octicon icons, resolved relative to the launcher workflow directory."""

from __future__ import annotations

from shorthand.core.models.items import Icon


def octicon(name: str) -> Icon:
    return Icon(path=f"octicons-{name}.png")


REPO = octicon("repo")
ISSUE_LIST = octicon("list-ordered")
PATH = octicon("browser")
ISSUE = octicon("issue-opened")
PROJECT = octicon("project")
NEW_ISSUE = octicon("bug")
MARKDOWN = octicon("markdown")
SEARCH = octicon("search")
ALERT = octicon("alert")

_ISSUE_OPEN = octicon("issue-opened_open")
_ISSUE_CLOSED = octicon("issue-closed_closed")
_PULL_OPEN = octicon("git-pull-request_open")
_PULL_CLOSED = octicon("git-pull-request_closed")
_PULL_MERGED = octicon("git-merge_merged")
_PROJECT_OPEN = octicon("project_open")
_PROJECT_CLOSED = octicon("project_closed")


def issue_state_icon(kind: str, state: str) -> Icon:
    """Icon for an issue or pull request in the given state."""
    if kind == "Issue":
        return _ISSUE_OPEN if state == "OPEN" else _ISSUE_CLOSED
    if kind == "PullRequest":
        return {
            "OPEN": _PULL_OPEN,
            "CLOSED": _PULL_CLOSED,
            "MERGED": _PULL_MERGED,
        }.get(state, ISSUE)
    return ISSUE


def project_state_icon(state: str) -> Icon:
    return _PROJECT_OPEN if state == "OPEN" else _PROJECT_CLOSED

"""
GitHub GraphQL client — the remote fetches behind the RPC service.

One method per fetch kind. Each takes the raw query string the completion
client sent and returns a ``FetchResult`` payload, or raises
``GitHubError``:

    repo       owner/name
    issue      owner/name#123
    issues     free-text issue search (GitHub search syntax)
    project    owner/123  or  owner/name/123
    projects   owner      or  owner/name

Channel-independent: no Flask dependency. Runs on the server's fetch
threads, never on a request thread.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any

from shorthand.core.models.rpc import FetchResult, Issue, Project, Repo

logger = logging.getLogger(__name__)

GRAPHQL_ENDPOINT = "https://api.github.com/graphql"

# Service → GitHub timeout, seconds
GRAPHQL_TIMEOUT = 10.0


class GitHubError(Exception):
    """A GitHub API call failed or returned an unusable response."""


# ── Queries ─────────────────────────────────────────────────────

_ISSUE_FRAGMENTS = """
fragment issueFields on Issue {
  number title state
  repository { name owner { login } }
}
fragment pullFields on PullRequest {
  number title state
  repository { name owner { login } }
}
"""

_ISSUE_NODE = "__typename ...issueFields ...pullFields"

_PROJECT_FIELDS = "number name state url"

_REPO_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { description }
}
"""

_ISSUE_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    issueOrPullRequest(number: $number) { %s }
  }
}
""" % _ISSUE_NODE + _ISSUE_FRAGMENTS

_SEARCH_QUERY = """
query($query: String!) {
  search(query: $query, type: ISSUE, first: 20) {
    nodes { %s }
  }
}
""" % _ISSUE_NODE + _ISSUE_FRAGMENTS

_ORG_PROJECT_QUERY = """
query($login: String!, $number: Int!) {
  organization(login: $login) { project(number: $number) { %s } }
}
""" % _PROJECT_FIELDS

_REPO_PROJECT_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) { project(number: $number) { %s } }
}
""" % _PROJECT_FIELDS

_ORG_PROJECTS_QUERY = """
query($login: String!) {
  organization(login: $login) {
    projects(first: 20, orderBy: {field: UPDATED_AT, direction: DESC}) { nodes { %s } }
  }
}
""" % _PROJECT_FIELDS

_REPO_PROJECTS_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    projects(first: 20, orderBy: {field: UPDATED_AT, direction: DESC}) { nodes { %s } }
  }
}
""" % _PROJECT_FIELDS


# ── Query string parsing ────────────────────────────────────────


def split_repo(name_with_owner: str) -> tuple[str, str]:
    """``owner/name`` → (owner, name)."""
    owner, sep, name = name_with_owner.partition("/")
    if not sep or not owner or not name:
        raise GitHubError(f"incomplete repo owner/name: {name_with_owner}")
    return owner, name


def split_issue(issue: str) -> tuple[str, str, int]:
    """``owner/name#123`` → (owner, name, 123)."""
    owner, rest = split_repo(issue)
    name, sep, number = rest.partition("#")
    if not sep or not number:
        raise GitHubError(f"incomplete issue owner/name#issue: {issue}")
    return owner, name, _to_number(number)


def split_project(project: str) -> tuple[str, str, int]:
    """``owner/123`` or ``owner/name/123`` → (owner, name-or-empty, 123)."""
    parts = project.split("/", 2)
    if len(parts) < 2:
        raise GitHubError(f"incomplete project owner/<repo>/number: {project}")
    if len(parts) == 2:
        return parts[0], "", _to_number(parts[1])
    return parts[0], parts[1], _to_number(parts[2])


def _to_number(value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise GitHubError(f"invalid number: {value!r}") from e


# ── Response mapping ────────────────────────────────────────────


def _to_issue(node: dict[str, Any] | None) -> Issue:
    node = node or {}
    repo = node.get("repository") or {}
    owner = (repo.get("owner") or {}).get("login", "")
    return Issue(
        type=node.get("__typename", ""),
        state=node.get("state", ""),
        title=node.get("title", ""),
        repo=f"{owner}/{repo.get('name', '')}",
        number=str(node.get("number", "")),
    )


def _to_project(node: dict[str, Any] | None) -> Project:
    node = node or {}
    return Project(
        number=node.get("number") or 0,
        name=node.get("name") or "",
        state=node.get("state") or "",
        url=node.get("url") or "",
    )


class GitHubClient:
    """Minimal GitHub GraphQL v4 client.

    Args:
        token: API token, sent as a bearer token.
        endpoint: GraphQL endpoint URL.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        endpoint: str = GRAPHQL_ENDPOINT,
        timeout: float = GRAPHQL_TIMEOUT,
    ) -> None:
        self.token = token
        self.endpoint = endpoint
        self.timeout = timeout

    def fetchers(self) -> dict[str, Callable[[str], FetchResult]]:
        """Fetch kind → fetch function, as mounted by the RPC service."""
        return {
            "repo": self.get_repo,
            "issue": self.get_issue,
            "issues": self.get_issues,
            "project": self.get_project,
            "projects": self.get_projects,
        }

    def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST one GraphQL query and return its ``data`` object.

        Raises:
            GitHubError: On transport, HTTP, decode or GraphQL errors.
        """
        payload = json.dumps({"query": query, "variables": variables}).encode("utf-8")
        req = urllib.request.Request(
            self.endpoint,
            data=payload,
            method="POST",
            headers={
                "Authorization": f"bearer {self.token}",
                "Content-Type": "application/json",
                "User-Agent": "gh-shorthand",
            },
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise GitHubError(f"GitHub API error: {e.code} {e.reason}") from e
        except (urllib.error.URLError, OSError) as e:
            raise GitHubError(f"GitHub API request failed: {e}") from e

        try:
            doc = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise GitHubError(f"GitHub API response could not be decoded: {e}") from e

        if not isinstance(doc, dict):
            raise GitHubError("GitHub API response was not an object")

        errors = doc.get("errors")
        if errors:
            message = errors[0].get("message", "unknown error") if isinstance(errors[0], dict) else str(errors[0])
            raise GitHubError(message)

        return doc.get("data") or {}

    # ── Fetch kinds ─────────────────────────────────────────────

    def get_repo(self, query: str) -> FetchResult:
        owner, name = split_repo(query)
        data = self.execute(_REPO_QUERY, {"owner": owner, "name": name})
        repo = data.get("repository") or {}
        return FetchResult(repos=[Repo(description=repo.get("description") or "")])

    def get_issue(self, query: str) -> FetchResult:
        owner, name, number = split_issue(query)
        data = self.execute(_ISSUE_QUERY, {"owner": owner, "name": name, "number": number})
        node = (data.get("repository") or {}).get("issueOrPullRequest")
        return FetchResult(issues=[_to_issue(node)])

    def get_issues(self, query: str) -> FetchResult:
        data = self.execute(_SEARCH_QUERY, {"query": query})
        nodes = (data.get("search") or {}).get("nodes") or []
        return FetchResult(issues=[_to_issue(n) for n in nodes])

    def get_project(self, query: str) -> FetchResult:
        owner, name, number = split_project(query)
        if not name:
            data = self.execute(_ORG_PROJECT_QUERY, {"login": owner, "number": number})
            node = (data.get("organization") or {}).get("project")
        else:
            data = self.execute(
                _REPO_PROJECT_QUERY, {"owner": owner, "name": name, "number": number},
            )
            node = (data.get("repository") or {}).get("project")
        if not node or not node.get("number"):
            raise GitHubError(f"could not resolve to a project with the number {number}")
        return FetchResult(projects=[_to_project(node)])

    def get_projects(self, query: str) -> FetchResult:
        owner, _, name = query.partition("/")
        if not name:
            data = self.execute(_ORG_PROJECTS_QUERY, {"login": owner})
            container = data.get("organization") or {}
        else:
            data = self.execute(_REPO_PROJECTS_QUERY, {"owner": owner, "name": name})
            container = data.get("repository") or {}
        nodes = (container.get("projects") or {}).get("nodes") or []
        return FetchResult(projects=[_to_project(n) for n in nodes])

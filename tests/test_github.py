"""
Tests for the GitHub GraphQL client — query parsing and response mapping.
"""

from __future__ import annotations

import io
import json
import urllib.error

import pytest

from shorthand.adapters.github import (
    GitHubClient,
    GitHubError,
    split_issue,
    split_project,
    split_repo,
)


class _Recorder(GitHubClient):
    """GitHubClient with ``execute`` answered from canned data."""

    def __init__(self, data: dict):
        super().__init__("token")
        self.data = data
        self.executed: list[dict] = []

    def execute(self, query: str, variables: dict) -> dict:
        self.executed.append(variables)
        return self.data


class TestQueryParsing:
    def test_split_repo(self):
        assert split_repo("a/b") == ("a", "b")

    @pytest.mark.parametrize("bad", ["a", "a/", "/b"])
    def test_split_repo_incomplete(self, bad: str):
        with pytest.raises(GitHubError):
            split_repo(bad)

    def test_split_issue(self):
        assert split_issue("a/b#12") == ("a", "b", 12)

    @pytest.mark.parametrize("bad", ["a/b", "a/b#", "a/b#x"])
    def test_split_issue_invalid(self, bad: str):
        with pytest.raises(GitHubError):
            split_issue(bad)

    def test_split_org_project(self):
        assert split_project("org/3") == ("org", "", 3)

    def test_split_repo_project(self):
        assert split_project("a/b/3") == ("a", "b", 3)

    def test_split_project_incomplete(self):
        with pytest.raises(GitHubError):
            split_project("org")


class TestFetchKinds:
    def test_fetchers(self):
        assert set(GitHubClient("t").fetchers()) == {"repo", "issue", "issues", "project", "projects"}

    def test_repo(self):
        client = _Recorder({"repository": {"description": "dotfiles"}})
        result = client.get_repo("zerowidth/dotfiles")
        assert result.repos[0].description == "dotfiles"
        assert client.executed == [{"owner": "zerowidth", "name": "dotfiles"}]

    def test_repo_without_description(self):
        result = _Recorder({"repository": {"description": None}}).get_repo("a/b")
        assert result.repos[0].description == ""

    def test_issue(self):
        node = {
            "__typename": "PullRequest",
            "number": 7,
            "title": "Add things",
            "state": "MERGED",
            "repository": {"name": "b", "owner": {"login": "a"}},
        }
        client = _Recorder({"repository": {"issueOrPullRequest": node}})
        issue = client.get_issue("a/b#7").issues[0]
        assert (issue.type, issue.state, issue.title, issue.repo, issue.number) == (
            "PullRequest", "MERGED", "Add things", "a/b", "7",
        )
        assert client.executed == [{"owner": "a", "name": "b", "number": 7}]

    def test_issue_search(self):
        nodes = [
            {"__typename": "Issue", "number": 1, "title": "one", "state": "OPEN",
             "repository": {"name": "b", "owner": {"login": "a"}}},
            {"__typename": "Issue", "number": 2, "title": "two", "state": "CLOSED",
             "repository": {"name": "d", "owner": {"login": "c"}}},
        ]
        client = _Recorder({"search": {"nodes": nodes}})
        result = client.get_issues("bug repo:a/b")
        assert [i.repo for i in result.issues] == ["a/b", "c/d"]
        assert client.executed == [{"query": "bug repo:a/b"}]

    def test_org_project(self):
        node = {"number": 3, "name": "Roadmap", "state": "OPEN", "url": "https://github.com/orgs/o/projects/3"}
        client = _Recorder({"organization": {"project": node}})
        project = client.get_project("o/3").projects[0]
        assert project.name == "Roadmap"
        assert client.executed == [{"login": "o", "number": 3}]

    def test_repo_project(self):
        node = {"number": 4, "name": "Board", "state": "CLOSED", "url": "u"}
        client = _Recorder({"repository": {"project": node}})
        assert client.get_project("a/b/4").projects[0].number == 4
        assert client.executed == [{"owner": "a", "name": "b", "number": 4}]

    def test_missing_project(self):
        client = _Recorder({"organization": {"project": None}})
        with pytest.raises(GitHubError, match="could not resolve"):
            client.get_project("o/9")

    def test_org_projects(self):
        nodes = [{"number": 1, "name": "x", "state": "OPEN", "url": "u1"}]
        client = _Recorder({"organization": {"projects": {"nodes": nodes}}})
        assert [p.name for p in client.get_projects("o").projects] == ["x"]
        assert client.executed == [{"login": "o"}]

    def test_repo_projects(self):
        client = _Recorder({"repository": {"projects": {"nodes": []}}})
        assert client.get_projects("a/b").projects == []
        assert client.executed == [{"owner": "a", "name": "b"}]


class _Response(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class TestExecute:
    def test_returns_data(self, monkeypatch):
        seen = {}

        def fake_urlopen(req, timeout):
            seen["auth"] = req.get_header("Authorization")
            seen["body"] = json.loads(req.data)
            seen["timeout"] = timeout
            return _Response(json.dumps({"data": {"viewer": {"login": "me"}}}).encode())

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        data = GitHubClient("tok", timeout=3).execute("query { viewer { login } }", {})

        assert data == {"viewer": {"login": "me"}}
        assert seen["auth"] == "bearer tok"
        assert seen["body"]["query"].startswith("query")
        assert seen["timeout"] == 3

    def test_graphql_errors(self, monkeypatch):
        body = {"errors": [{"message": "Could not resolve to a Repository"}]}
        monkeypatch.setattr("urllib.request.urlopen", lambda req, timeout: _Response(json.dumps(body).encode()))
        with pytest.raises(GitHubError, match="Could not resolve"):
            GitHubClient("tok").execute("q", {})

    def test_http_error(self, monkeypatch):
        def fake_urlopen(req, timeout):
            raise urllib.error.HTTPError(req.full_url, 401, "Unauthorized", {}, None)

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        with pytest.raises(GitHubError, match="401"):
            GitHubClient("bad").execute("q", {})

    def test_network_error(self, monkeypatch):
        def fake_urlopen(req, timeout):
            raise urllib.error.URLError("unreachable")

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        with pytest.raises(GitHubError, match="request failed"):
            GitHubClient("tok").execute("q", {})

    def test_undecodable(self, monkeypatch):
        monkeypatch.setattr("urllib.request.urlopen", lambda req, timeout: _Response(b"<html>"))
        with pytest.raises(GitHubError, match="decoded"):
            GitHubClient("tok").execute("q", {})

"""
Fetch protocol models — the JSON exchanged between the completion
client and the RPC service.

``complete=False`` with no error means "still working, ask again".
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Repo(BaseModel):
    """Repository details."""

    description: str = ""


class Issue(BaseModel):
    """An issue or pull request."""

    type: str = ""      # Issue, PullRequest
    state: str = ""     # OPEN, CLOSED, MERGED
    title: str = ""
    repo: str = ""      # owner/name
    number: str = ""


class Project(BaseModel):
    """A repository or organization project board."""

    number: int = 0
    name: str = ""
    state: str = ""     # OPEN, CLOSED
    url: str = ""


class FetchResult(BaseModel):
    """Response payload for every RPC endpoint."""

    complete: bool = False
    error: str = ""

    repos: list[Repo] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

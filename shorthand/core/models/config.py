"""
Shorthand configuration model — loaded from ``~/.gh-shorthand.yml``.

The two shorthand dictionaries and the default repo feed the parser
verbatim; the token and server address configure the RPC service.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 7347


def valid_repo_format(value: str) -> bool:
    """True for ``owner/name`` with both parts non-empty."""
    parts = value.split("/")
    return len(parts) == 2 and all(parts)


class ShorthandConfig(BaseModel):
    """Root configuration document."""

    repos: dict[str, str] = Field(default_factory=dict)   # shorthand → owner/name
    users: dict[str, str] = Field(default_factory=dict)   # shorthand → owner
    default_repo: str = ""

    api_token: str = ""
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = DEFAULT_SERVER_PORT

    @field_validator("repos")
    @classmethod
    def _check_repos(cls, repos: dict[str, str]) -> dict[str, str]:
        for key, repo in repos.items():
            if not valid_repo_format(repo):
                raise ValueError(f"repo shorthand {key!r}: {repo!r} not in owner/name format")
        return repos

    @field_validator("default_repo")
    @classmethod
    def _check_default_repo(cls, repo: str) -> str:
        if repo and not valid_repo_format(repo):
            raise ValueError(f"default repo {repo!r} not in owner/name format")
        return repo

    @property
    def rpc_enabled(self) -> bool:
        """RPC enrichment needs a token; the server refuses to start without one."""
        return bool(self.api_token)

    @property
    def rpc_url(self) -> str:
        """Base URL of the RPC service, or an empty string when disabled."""
        if not self.rpc_enabled:
            return ""
        return f"http://{self.server_host}:{self.server_port}"

    def shorthand_collisions(self) -> list[str]:
        """Keys defined in both the repo and the user map."""
        return sorted(set(self.repos) & set(self.users))

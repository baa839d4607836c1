"""Adapters — bindings to the GitHub API and the local RPC service.

Public re-exports for convenient access.
"""

from shorthand.adapters.github import GitHubClient, GitHubError
from shorthand.adapters.rpc_client import FetchClient, RPCClient, RPCUnavailableError

__all__ = [
    "FetchClient",
    "GitHubClient",
    "GitHubError",
    "RPCClient",
    "RPCUnavailableError",
]

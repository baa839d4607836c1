"""
Parse result — the structured match produced by the shorthand parser.

A result is either well-formed (every requested sub-grammar matched and
nothing was left over) or empty. Callers treat the empty result as
"nothing to suggest", never as an error.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParseResult:
    """Owner/name reference with optional issue, path, or free-text query."""

    owner: str = ""
    name: str = ""
    repo_shorthand: str = ""    # repo map key that was expanded
    user_shorthand: str = ""    # user map key that was expanded
    issue: str = ""
    path: str = ""
    query: str = ""

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_RESULT

    @property
    def has_owner(self) -> bool:
        return bool(self.owner)

    @property
    def has_repo(self) -> bool:
        return bool(self.owner) and bool(self.name)

    @property
    def repo(self) -> str:
        """``owner/name``, or an empty string without a full reference."""
        if self.has_repo:
            return f"{self.owner}/{self.name}"
        return ""

    @property
    def has_issue(self) -> bool:
        return bool(self.issue)

    @property
    def has_path(self) -> bool:
        return bool(self.path)

    @property
    def empty_query(self) -> bool:
        return not self.query

    def annotation(self) -> str:
        """Display suffix naming the expanded shorthand, e.g. `` (df#12)``."""
        if self.repo_shorthand:
            issue = f"#{self.issue}" if self.issue else ""
            return f" ({self.repo_shorthand}{issue})"
        if self.user_shorthand:
            return f" ({self.user_shorthand})"
        return ""

    def repo_annotation(self) -> str:
        """Like :meth:`annotation`, without the issue number."""
        shorthand = self.repo_shorthand or self.user_shorthand
        return f" ({shorthand})" if shorthand else ""


EMPTY_RESULT = ParseResult()

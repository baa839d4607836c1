"""
Shorthand parser — turns typed text into a ``ParseResult``.

Grammar, in order:

    1. owner rules (first hit wins)
         owner/name        explicit reference, owner may be a user shorthand
         bare word         repo shorthand > user shorthand > literal owner
       then the default repo, when nothing named an owner
    2. tail rules on the whole remainder
         issue             ` #123`, `#123`, ` 123`, `123`
         path              ` /pulls`, `/pulls`
    3. query capture, or rejection of leftover text

Precedence lives in the ``_OWNER_RULES`` / ``_TAIL_RULES`` tables so each
tie-break can be tested on its own. Parsing never raises: input that
fails a required sub-grammar yields ``EMPTY_RESULT``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Flag, auto

from shorthand.core.parser.result import EMPTY_RESULT, ParseResult


class ParseOption(Flag):
    """Sub-grammars a parser applies."""

    NONE = 0
    REPO = auto()           # resolve owner/name at all
    REQUIRE_REPO = auto()   # fail without a full owner/name
    BARE_USER = auto()      # a bare unknown word is an owner
    ISSUE = auto()
    PATH = auto()
    QUERY = auto()


# \b and \w are ASCII-only, matching GitHub's own login/name rules.
_OWNER_NAME_RE = re.compile(r"([A-Za-z0-9][-A-Za-z0-9]*)/([\w.\-]*\Z|[\w.\-]*\w)", re.ASCII)
_WORD_RE = re.compile(r"[A-Za-z0-9][-A-Za-z0-9]*\b", re.ASCII)
_ISSUE_RE = re.compile(r" ?#?([1-9][0-9]*)", re.ASCII)
_PATH_RE = re.compile(r" ?(/\S*)")


@dataclass(frozen=True)
class _OwnerMatch:
    consumed: int
    owner: str = ""
    name: str = ""
    repo_shorthand: str = ""
    user_shorthand: str = ""


def split_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/name`` into its two parts (name may be empty)."""
    owner, _, name = repo.partition("/")
    return owner, name


class Parser:
    """Shorthand parser bound to a pair of dictionaries and a default repo.

    Args:
        repo_map: Shorthand → ``owner/name``.
        user_map: Shorthand → owner.
        default_repo: ``owner/name`` used when the input names no owner.
        options: Which sub-grammars to apply.
    """

    def __init__(
        self,
        repo_map: Mapping[str, str] | None = None,
        user_map: Mapping[str, str] | None = None,
        default_repo: str = "",
        options: ParseOption = ParseOption.NONE,
    ) -> None:
        self.repo_map = dict(repo_map or {})
        self.user_map = dict(user_map or {})
        self.default_repo = default_repo
        if options & (ParseOption.REQUIRE_REPO | ParseOption.BARE_USER):
            options |= ParseOption.REPO
        self.options = options

    def parse(self, text: str) -> ParseResult:
        owner = name = repo_shorthand = user_shorthand = ""
        remainder = text

        if ParseOption.REPO in self.options:
            for rule in _OWNER_RULES:
                match = rule(self, text)
                if match is not None:
                    owner, name = match.owner, match.name
                    repo_shorthand = match.repo_shorthand
                    user_shorthand = match.user_shorthand
                    remainder = text[match.consumed:]
                    break

            if not owner and self.default_repo:
                owner, name = split_repo(self.default_repo)

            if ParseOption.REQUIRE_REPO in self.options and not (owner and name):
                return EMPTY_RESULT

        tail: dict[str, str] = {}
        for option, field, pattern in _TAIL_RULES:
            if option in self.options:
                m = pattern.fullmatch(remainder.rstrip(" "))
                if m:
                    tail[field] = m.group(1)
                    remainder = ""
                    break

        query = ""
        if ParseOption.QUERY in self.options:
            query = remainder.rstrip(" ").removeprefix(" ")
        elif remainder.rstrip(" "):
            return EMPTY_RESULT

        return ParseResult(
            owner=owner,
            name=name,
            repo_shorthand=repo_shorthand,
            user_shorthand=user_shorthand,
            issue=tail.get("issue", ""),
            path=tail.get("path", ""),
            query=query,
        )


# ── Owner rules ─────────────────────────────────────────────────


def _match_owner_name(parser: Parser, text: str) -> _OwnerMatch | None:
    """``owner/name``, with the owner expanded through the user map."""
    m = _OWNER_NAME_RE.match(text)
    if m is None:
        return None
    owner, name = m.group(1), m.group(2)
    if owner in parser.user_map:
        return _OwnerMatch(
            consumed=m.end(),
            owner=parser.user_map[owner],
            name=name,
            user_shorthand=owner,
        )
    return _OwnerMatch(consumed=m.end(), owner=owner, name=name)


def _match_bare_word(parser: Parser, text: str) -> _OwnerMatch | None:
    """A whole leading word: repo shorthand, user shorthand, or bare owner."""
    m = _WORD_RE.match(text)
    if m is None:
        return None
    word = m.group(0)

    if word in parser.repo_map:
        owner, name = split_repo(parser.repo_map[word])
        return _OwnerMatch(consumed=m.end(), owner=owner, name=name, repo_shorthand=word)

    if word in parser.user_map:
        return _OwnerMatch(consumed=m.end(), owner=parser.user_map[word], user_shorthand=word)

    if ParseOption.BARE_USER in parser.options:
        # "123" is an issue in the default repo, not a numeric login
        if parser.default_repo and _ISSUE_RE.fullmatch(text.rstrip(" ")):
            return None
        return _OwnerMatch(consumed=m.end(), owner=word)

    return None


_OWNER_RULES: tuple[Callable[[Parser, str], _OwnerMatch | None], ...] = (
    _match_owner_name,
    _match_bare_word,
)

# First matching tail rule consumes the entire remainder.
_TAIL_RULES: tuple[tuple[ParseOption, str, re.Pattern[str]], ...] = (
    (ParseOption.ISSUE, "issue", _ISSUE_RE),
    (ParseOption.PATH, "path", _PATH_RE),
)


def parse(
    repo_map: Mapping[str, str],
    user_map: Mapping[str, str],
    default_repo: str,
    text: str,
    options: ParseOption,
) -> ParseResult:
    """One-shot form of :meth:`Parser.parse`."""
    return Parser(repo_map, user_map, default_repo, options).parse(text)


def issue_reference_parser() -> Parser:
    """Parser for plain ``owner/name#123`` references, without shorthands."""
    return Parser(options=ParseOption.REQUIRE_REPO | ParseOption.ISSUE)

"""Glob dialect used by file triggers.

- ``**`` spans any number of path segments, including none
- ``*`` and ``?`` stay inside one segment
- ``[...]`` is a character class, ``[!...]`` its negation
- a leading ``/`` anchors the pattern at the path root; otherwise the
  pattern may match any suffix of the path that starts at a segment
  boundary, so ``app/models/*.rb`` also matches ``/srv/shop/app/models/a.rb``
"""

from __future__ import annotations

import re

from .errors import PatternError


def normalize_path(path: str) -> str:
    """Normalise separators and drop leading ``./`` segments."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a ``[...]`` class beginning at ``start``; returns (regex, next index)."""
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] == "!":
        negate = True
        i += 1
    # A "]" right after the opening bracket is a literal member
    j = i
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 1
    if j >= len(pattern):
        raise PatternError(f"Unterminated character class in glob: {pattern!r}", pattern=pattern)

    members = pattern[i:j].replace("\\", "\\\\")
    if members.startswith("^"):
        members = "\\" + members
    prefix = "^/" if negate else ""
    return f"[{prefix}{members}]", j + 1


def translate(pattern: str) -> str:
    """Translate a glob into an anchored regular expression string."""
    glob = normalize_path(pattern)
    anchored = glob.startswith("/")

    parts: list[str] = []
    i = 0
    n = len(glob)
    while i < n:
        c = glob[i]
        if c == "*":
            if glob.startswith("**", i):
                i += 2
                if i < n and glob[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
            else:
                parts.append("[^/]*")
                i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            regex, i = _translate_class(glob, i)
            parts.append(regex)
        else:
            parts.append(re.escape(c))
            i += 1

    body = "".join(parts)
    if anchored:
        return f"^{body}$"
    return f"^(?:.*/)?{body}$"


class GlobPattern:
    """A compiled glob."""

    __slots__ = ("pattern", "_regex")

    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self._regex = re.compile(translate(pattern))
        except re.error as e:
            raise PatternError(f"Invalid glob {pattern!r}: {e}", pattern=pattern) from e

    def __eq__(self, other: object) -> bool:
        return isinstance(other, GlobPattern) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"

    def matches(self, path: str) -> bool:
        return self._regex.match(normalize_path(path)) is not None


def first_match(patterns: tuple[GlobPattern, ...], path: str) -> GlobPattern | None:
    """Return the first pattern (in declaration order) matching ``path``."""
    for glob in patterns:
        if glob.matches(path):
            return glob
    return None


__all__ = [
    "GlobPattern",
    "first_match",
    "normalize_path",
    "translate",
]

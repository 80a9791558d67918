"""
Rule matching against a context snapshot.

Prompt snapshots are checked against keywords then intent patterns;
file snapshots against file patterns, with exclude patterns applied
last. Each rule yields at most one MatchRecord per call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .context import ContextKind, ContextSnapshot
from .globs import first_match
from .rule_schema import Rule

logger = logging.getLogger(__name__)


class MatchReason(str, Enum):
    """Which trigger fired, in precedence order."""

    KEYWORD = "keyword"
    INTENT = "intent"
    FILE_PATTERN = "filePattern"


@dataclass(frozen=True)
class MatchRecord:
    """One rule that fired, and why."""

    rule: Rule
    reason: MatchReason
    token: str  # keyword, matched prompt text, or glob
    excluded: bool = False
    excluded_by: str | None = None

    @property
    def name(self) -> str:
        return self.rule.name


def match_prompt(rule: Rule, text: str) -> tuple[MatchReason, str] | None:
    """Return (reason, token) for the first satisfied prompt trigger."""
    lowered = text.lower()
    for keyword in rule.keywords:
        if keyword.lower() in lowered:
            return MatchReason.KEYWORD, keyword

    for intent in rule.intent_patterns:
        found = intent.search(text)
        if found is not None:
            return MatchReason.INTENT, found

    return None


def match_file(rule: Rule, path: str) -> MatchRecord | None:
    """Match a path against a rule's file patterns; exclude patterns always win."""
    included = first_match(rule.file_patterns, path)
    if included is None:
        return None

    excluded = first_match(rule.exclude_patterns, path)
    return MatchRecord(
        rule=rule,
        reason=MatchReason.FILE_PATTERN,
        token=included.pattern,
        excluded=excluded is not None,
        excluded_by=excluded.pattern if excluded is not None else None,
    )


def evaluate(context: ContextSnapshot, rules: Iterable[Rule]) -> list[MatchRecord]:
    """
    Evaluate every rule against one snapshot.

    Args:
        context: Prompt or file-operation snapshot
        rules: Rules in declaration order

    Returns:
        MatchRecords in rule declaration order, at most one per rule.
        Excluded file matches are included with ``excluded=True``.
    """
    matches: list[MatchRecord] = []

    if context.kind is ContextKind.PROMPT:
        text = context.prompt_text or ""
        if not text.strip():
            return matches
        for rule in rules:
            hit = match_prompt(rule, text)
            if hit is not None:
                reason, token = hit
                matches.append(MatchRecord(rule=rule, reason=reason, token=token))
    else:
        path = context.file_path or ""
        for rule in rules:
            record = match_file(rule, path)
            if record is not None:
                matches.append(record)

    logger.debug(f"{context.kind.value}: {len(matches)} match(es)")
    return matches


__all__ = [
    "MatchReason",
    "MatchRecord",
    "evaluate",
    "match_file",
    "match_prompt",
]

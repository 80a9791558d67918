"""
Render decisions and check reminders as text for the host.

Blocking rules are listed first under REQUIRED SKILLS, so the high
priority group is labelled RECOMMENDED rather than CRITICAL.
"""

from __future__ import annotations

from typing import Iterable

from .enforcer import Decision
from .matcher import MatchReason, MatchRecord
from .ranking import SuggestionList
from .rule_schema import RulePriority

RULE = "━" * 40

PRIORITY_LABELS: dict[RulePriority, str] = {
    RulePriority.HIGH: "RECOMMENDED SKILLS:",
    RulePriority.MEDIUM: "SUGGESTED SKILLS:",
    RulePriority.LOW: "OPTIONAL SKILLS:",
}

_REASON_LABELS: dict[MatchReason, str] = {
    MatchReason.KEYWORD: "keyword",
    MatchReason.INTENT: "intent",
    MatchReason.FILE_PATTERN: "file",
}


def _describe(record: MatchRecord) -> str:
    line = f"    -> {record.name} ({_REASON_LABELS[record.reason]}: {record.token!r})"
    if record.rule.description:
        line += f"\n       {record.rule.description}"
    return line


def format_suggestions(decision: Decision, suggestions: SuggestionList) -> str:
    """
    Format a decision and its suggestions.

    Returns an empty string when there is nothing to suggest.
    """
    if not suggestions:
        return ""

    lines = ["", RULE, "SKILL ACTIVATION CHECK", RULE, ""]

    if decision.must_acknowledge:
        lines.append("  REQUIRED SKILLS (acknowledge before continuing):")
        for rule in decision.must_acknowledge:
            lines.append(f"    -> {rule.name}")
        lines.append("")

    blocking = set(decision.blocking_names)
    for priority in RulePriority:
        group = [r for r in suggestions.by_priority(priority) if r.name not in blocking]
        if not group:
            continue
        lines.append(f"  {PRIORITY_LABELS[priority]}")
        lines.extend(_describe(record) for record in group)
        lines.append("")

    if decision.proceed:
        lines.append("  ACTION: Use the Skill tool to load the matched skills")
    else:
        lines.append("  ACTION: Load the required skills, then acknowledge them to continue")
    lines.append(RULE)
    lines.append("")
    return "\n".join(lines)


def format_checks(checks: Iterable[str], files: Iterable[str] = ()) -> str:
    """Format pending follow-up checks; empty string when there are none."""
    names = sorted(set(checks))
    if not names:
        return ""

    lines = ["", "FOLLOW-UP CHECKS DUE:"]
    lines.extend(f"  - {name}" for name in names)

    touched = list(dict.fromkeys(files))
    if touched:
        lines.append("Files modified this session:")
        lines.extend(f"  - {path}" for path in touched[-10:])
        if len(touched) > 10:
            lines.append(f"  ... and {len(touched) - 10} more")
    lines.append("")
    return "\n".join(lines)


__all__ = ["PRIORITY_LABELS", "format_checks", "format_suggestions"]

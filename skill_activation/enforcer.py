"""Mode enforcement: turn a suggestion list into an authorization decision."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .ranking import SuggestionList
from .rule_schema import Rule


@dataclass(frozen=True)
class Decision:
    """
    Whether the host may proceed.

    ``must_acknowledge`` lists blocking rules the caller has not yet
    acknowledged. Suggest-mode rules never appear here.
    """

    proceed: bool
    must_acknowledge: tuple[Rule, ...] = ()

    @property
    def blocking_names(self) -> list[str]:
        return [rule.name for rule in self.must_acknowledge]


ALLOW = Decision(proceed=True)


def authorize(suggestions: SuggestionList, acknowledged: Iterable[str] = ()) -> Decision:
    """
    Apply each rule's mode.

    Pure: acknowledgments are supplied by the caller on every call and
    never remembered here.

    Args:
        suggestions: Ranked suggestions for the current prompt
        acknowledged: Names of blocking rules the caller has already shown

    Returns:
        Decision with proceed=False while any blocking rule is outstanding
    """
    done = set(acknowledged)
    outstanding = tuple(
        record.rule
        for record in suggestions
        if record.rule.is_blocking and record.name not in done
    )
    return Decision(proceed=not outstanding, must_acknowledge=outstanding)


__all__ = ["ALLOW", "Decision", "authorize"]

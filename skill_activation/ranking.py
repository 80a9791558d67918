"""Prioritise and deduplicate matches into the final suggestion list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .matcher import MatchRecord
from .rule_schema import RulePriority


@dataclass(frozen=True)
class SuggestionList:
    """Ranked, deduplicated matches. High priority first, then match order."""

    records: tuple[MatchRecord, ...] = ()

    def __iter__(self) -> Iterator[MatchRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __bool__(self) -> bool:
        return bool(self.records)

    def __getitem__(self, index: int) -> MatchRecord:
        return self.records[index]

    @property
    def names(self) -> list[str]:
        return [record.name for record in self.records]

    def by_priority(self, priority: RulePriority) -> list[MatchRecord]:
        return [record for record in self.records if record.rule.priority is priority]

    def limit(self, count: int | None) -> "SuggestionList":
        """First ``count`` suggestions; None keeps all."""
        if count is None:
            return self
        return SuggestionList(self.records[:max(count, 0)])


def rank(matches: Iterable[MatchRecord]) -> SuggestionList:
    """
    Rank matches for display.

    Excluded records are dropped. The sort is stable, so equal priorities
    keep their match order, which is rule declaration order. If a rule
    name occurs more than once, its highest-priority occurrence is kept.
    """
    surviving = [record for record in matches if not record.excluded]
    ordered = sorted(surviving, key=lambda record: record.rule.priority.rank)

    seen: set[str] = set()
    ranked: list[MatchRecord] = []
    for record in ordered:
        if record.name in seen:
            continue
        seen.add(record.name)
        ranked.append(record)

    return SuggestionList(tuple(ranked))


__all__ = ["SuggestionList", "rank"]

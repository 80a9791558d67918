"""Rule store: loads and validates activation rules from a JSON source."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from .errors import ConfigError, PatternError
from .rule_schema import Rule

logger = logging.getLogger(__name__)


RuleSource = Path | str | dict | list


def _read_source(source: RuleSource) -> tuple[Any, str]:
    """Return (parsed document, label used in messages)."""
    if isinstance(source, (dict, list)):
        return source, "<object>"

    if isinstance(source, str) and source.lstrip()[:1] in ("{", "["):
        text, label = source, "<text>"
    else:
        path = Path(source).expanduser()
        label = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read rule source {label}: {e}", source=label) from e

    try:
        return json.loads(text), label
    except json.JSONDecodeError as e:
        raise ConfigError(f"Rule source {label} is not valid JSON: {e}", source=label) from e


def _records(document: Any, label: str) -> list[Any]:
    """Extract the list of raw rule records from any accepted layout."""
    if isinstance(document, list):
        return document

    if isinstance(document, dict):
        if isinstance(document.get("rules"), list):
            return document["rules"]

        skills = document.get("skills")
        if isinstance(skills, dict):
            records = []
            for name, record in skills.items():
                if isinstance(record, dict):
                    record = {"name": name, **record}
                records.append(record)
            return records

    raise ConfigError(
        f"Rule source {label} has neither a 'rules' list nor a 'skills' mapping",
        source=label,
    )


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "rule"
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)


class RuleStore:
    """
    Read-only, ordered collection of activation rules.

    Declaration order is preserved; it is the tie-breaker for ranking.
    Bad individual records are skipped and reported in ``warnings``;
    only an unreadable or unparsable source raises ConfigError.
    """

    def __init__(self, rules: Iterable[Rule] = (), warnings: list[str] | None = None, source: str | None = None):
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._by_name: dict[str, Rule] = {rule.name: rule for rule in self._rules}
        self.warnings: list[str] = list(warnings or [])
        self.source = source

    @classmethod
    def load(cls, source: RuleSource) -> "RuleStore":
        """
        Load rules from a path, JSON text or a parsed document.

        Args:
            source: Path to a JSON file, JSON text, or the parsed object

        Returns:
            RuleStore with every valid rule, in declaration order

        Raises:
            ConfigError: If the source cannot be read or parsed
        """
        document, label = _read_source(source)
        records = _records(document, label)

        rules: list[Rule] = []
        seen: set[str] = set()
        warnings: list[str] = []

        def skip(message: str) -> None:
            warnings.append(message)
            logger.warning(message)

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                skip(f"Skipping rule #{index} in {label}: expected an object, got {type(record).__name__}")
                continue

            name = record.get("name") or f"#{index}"
            try:
                rule = Rule.model_validate(record)
            except PatternError as e:
                skip(f"Skipping rule {name!r} in {label}: {e}")
                continue
            except ValidationError as e:
                skip(f"Skipping rule {name!r} in {label}: {_describe(e)}")
                continue

            if rule.name in seen:
                skip(f"Skipping rule {rule.name!r} in {label}: duplicate name")
                continue

            seen.add(rule.name)
            rules.append(rule)

        logger.debug(f"Loaded {len(rules)} rule(s) from {label} ({len(warnings)} skipped)")
        return cls(rules, warnings=warnings, source=label)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def file_rules(self) -> tuple[Rule, ...]:
        """Rules that can fire on a file operation."""
        return tuple(rule for rule in self._rules if rule.file_patterns)

    def get(self, name: str) -> Rule | None:
        """Get a rule by name, or None if not found."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        """List rule names in declaration order."""
        return [rule.name for rule in self._rules]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name


__all__ = ["RuleSource", "RuleStore"]

"""
Rule models for skill activation.

Pydantic models for one activation rule per skill, validated at the
rule-source boundary so matching never sees a malformed rule.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import PatternError
from .globs import GlobPattern


class RuleMode(str, Enum):
    """How a matched rule affects the host."""

    SUGGEST = "suggest"
    BLOCK = "block"


class RulePriority(str, Enum):
    """Display priority, high first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key: lower ranks are shown first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    RulePriority.HIGH: 0,
    RulePriority.MEDIUM: 1,
    RulePriority.LOW: 2,
}

# Values found in older skill-rules.json files
_MODE_ALIASES = {"warn": "suggest", "suggested": "suggest", "required": "block"}
_PRIORITY_ALIASES = {"critical": "high"}


class IntentPattern:
    """A prompt pattern: a case-insensitive regex, or a literal substring."""

    __slots__ = ("source", "literal", "_regex")

    def __init__(self, source: str, literal: bool = False):
        self.source = source
        self.literal = literal
        self._regex: re.Pattern[str] | None = None
        if literal:
            return
        try:
            self._regex = re.compile(source, re.IGNORECASE)
        except re.error as e:
            raise PatternError(f"Invalid intent regex {source!r}: {e}", pattern=source) from e

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, IntentPattern)
            and other.source == self.source
            and other.literal == self.literal
        )

    def __hash__(self) -> int:
        return hash((self.source, self.literal))

    def __repr__(self) -> str:
        kind = "substring" if self.literal else "regex"
        return f"IntentPattern({kind}={self.source!r})"

    def search(self, text: str) -> str | None:
        """Return the matched text, or None."""
        if self._regex is None:
            index = text.lower().find(self.source.lower())
            if index < 0:
                return None
            return text[index:index + len(self.source)]
        found = self._regex.search(text)
        return found.group(0) if found else None

    @classmethod
    def parse(cls, raw: Any) -> "IntentPattern":
        if isinstance(raw, IntentPattern):
            return raw
        if isinstance(raw, str):
            return cls(raw)
        if isinstance(raw, dict):
            if "substring" in raw:
                return cls(str(raw["substring"]), literal=True)
            if "regex" in raw:
                return cls(str(raw["regex"]))
        raise ValueError(f"intent pattern must be a string or {{'substring'|'regex': ...}}, got {raw!r}")


def _string_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} must contain only strings, got {item!r}")
        if item and item not in items:
            items.append(item)
    return items


class Rule(BaseModel):
    """
    Activation rule for one skill.

    Accepts the flat record layout and the nested ``promptTriggers`` /
    ``fileTriggers`` layout of skill-rules.json. Unknown keys are ignored.
    """

    name: str = Field(min_length=1)
    mode: RuleMode = RuleMode.SUGGEST
    priority: RulePriority = RulePriority.MEDIUM
    keywords: tuple[str, ...] = ()
    intent_patterns: tuple[IntentPattern, ...] = Field(default=(), alias="intentPatterns")
    file_patterns: tuple[GlobPattern, ...] = Field(default=(), alias="filePatterns")
    exclude_patterns: tuple[GlobPattern, ...] = Field(default=(), alias="excludePatterns")
    description: str = ""
    checks: tuple[str, ...] = ()

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _flatten_triggers(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        prompt_triggers = data.pop("promptTriggers", None) or {}
        file_triggers = data.pop("fileTriggers", None) or {}
        if not isinstance(prompt_triggers, dict):
            raise ValueError(f"promptTriggers must be an object, got {type(prompt_triggers).__name__}")
        if not isinstance(file_triggers, dict):
            raise ValueError(f"fileTriggers must be an object, got {type(file_triggers).__name__}")
        if prompt_triggers:
            data.setdefault("keywords", prompt_triggers.get("keywords"))
            data.setdefault("intentPatterns", prompt_triggers.get("intentPatterns"))
        if file_triggers:
            data.setdefault("filePatterns", file_triggers.get("pathPatterns"))
            data.setdefault("excludePatterns", file_triggers.get("pathExclusions"))
        if "mode" not in data and "enforcement" in data:
            data["mode"] = data["enforcement"]
        return {k: v for k, v in data.items() if v is not None}

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return _MODE_ALIASES.get(value, value)
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return _PRIORITY_ALIASES.get(value, value)
        return value

    @field_validator("keywords", "checks", mode="before")
    @classmethod
    def _strings(cls, value: Any, info) -> tuple[str, ...]:
        return tuple(_string_list(value, info.field_name))

    @field_validator("intent_patterns", mode="before")
    @classmethod
    def _compile_intents(cls, value: Any) -> tuple[IntentPattern, ...]:
        if value is None:
            return ()
        if isinstance(value, (str, dict)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"intentPatterns must be a list, got {type(value).__name__}")
        return tuple(IntentPattern.parse(raw) for raw in value)

    @field_validator("file_patterns", "exclude_patterns", mode="before")
    @classmethod
    def _compile_globs(cls, value: Any, info) -> tuple[GlobPattern, ...]:
        if isinstance(value, (list, tuple)):
            value = [raw.pattern if isinstance(raw, GlobPattern) else raw for raw in value]
        return tuple(GlobPattern(raw) for raw in _string_list(value, info.field_name))

    @model_validator(mode="after")
    def _has_trigger(self) -> "Rule":
        if not (self.keywords or self.intent_patterns or self.file_patterns):
            raise ValueError(f"rule {self.name!r} has no keywords, intentPatterns or filePatterns")
        return self

    @property
    def is_blocking(self) -> bool:
        return self.mode is RuleMode.BLOCK


__all__ = [
    "IntentPattern",
    "Rule",
    "RuleMode",
    "RulePriority",
]

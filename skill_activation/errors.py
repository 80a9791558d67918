"""Error taxonomy for skill activation.

Lower layers raise these; ActivationEngine is the only place they are
caught and turned into empty results.
"""

from __future__ import annotations


class ActivationError(Exception):
    """Base class for every error raised by the activation engine."""


class ConfigError(ActivationError):
    """Rule source could not be read or parsed as a whole."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class InvalidContextError(ActivationError):
    """Malformed input handed to the context builder."""


class PatternError(ActivationError):
    """A glob or regex in a rule failed to compile."""

    def __init__(self, message: str, pattern: str, rule_name: str | None = None):
        super().__init__(message)
        self.pattern = pattern
        self.rule_name = rule_name


__all__ = [
    "ActivationError",
    "ConfigError",
    "InvalidContextError",
    "PatternError",
]

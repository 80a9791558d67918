"""
Activation engine: the per-event pipelines behind the host hooks.

Prompt:    context -> evaluate -> rank -> authorize -> format
File edit: context -> record_edit (file patterns) -> checks_due -> format

This is the only layer that catches ActivationError. Every failure
becomes an empty outcome so the host keeps working.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import ActivationConfig
from .context import FileOperation, from_prompt
from .emitter import format_checks, format_suggestions
from .enforcer import ALLOW, Decision, authorize
from .errors import ActivationError, ConfigError
from .matcher import evaluate
from .ranking import SuggestionList, rank
from .rule_schema import Rule
from .rule_store import RuleStore
from .session_artifacts import session_log_path
from .session_tracker import SessionLog, SessionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptOutcome:
    suggestions: SuggestionList = field(default_factory=SuggestionList)
    decision: Decision = ALLOW
    text: str = ""


@dataclass(frozen=True)
class EditOutcome:
    checks: frozenset[str] = frozenset()
    text: str = ""


class ActivationEngine:
    """
    Runs activation for one session.

    The rule store is loaded once, on first use, and shared read-only.
    The engine owns exactly one SessionTracker.
    """

    def __init__(
        self,
        config: ActivationConfig | None = None,
        rules: RuleStore | Iterable[Rule] | None = None,
        session_log: SessionLog | None = None,
        tracker: SessionTracker | None = None,
        project_dir: Path | str | None = None,
    ):
        self.config = config or ActivationConfig()
        self.project_dir = project_dir
        self.degraded = False
        self._store: RuleStore | None = None
        if rules is not None:
            self._store = rules if isinstance(rules, RuleStore) else RuleStore(rules)
        self._session_log = session_log
        self._tracker = tracker

    @property
    def store(self) -> RuleStore:
        if self._store is None:
            self._store = self._load_store()
        return self._store

    def _load_store(self) -> RuleStore:
        path = self.config.resolve_rules_path(self.project_dir)
        try:
            store = RuleStore.load(path)
        except ConfigError as e:
            logger.error(f"Skill activation disabled for this session: {e}")
            self.degraded = True
            return RuleStore(source=str(path))
        return store

    @property
    def tracker(self) -> SessionTracker:
        if self._tracker is None:
            self._tracker = SessionTracker(
                self.store.rules,
                log=self._session_log,
                threshold=self.config.check_threshold,
            )
        return self._tracker

    @classmethod
    def for_session(
        cls,
        session_id: str,
        config: ActivationConfig | None = None,
        project_dir: Path | str | None = None,
    ) -> "ActivationEngine":
        """Engine whose tracker is rebuilt from, and appends to, the session artifact."""
        engine = cls(config=config, project_dir=project_dir)
        artifact = session_log_path(engine.config.session_path, session_id)
        engine._tracker = SessionTracker.replay(
            engine.store.rules,
            artifact,
            threshold=engine.config.check_threshold,
            session_id=session_id,
        )
        return engine

    def on_prompt(self, text: str, acknowledged: Iterable[str] = ()) -> PromptOutcome:
        """Suggest skills for a prompt and decide whether the host may proceed."""
        if not self.config.enabled:
            return PromptOutcome()
        try:
            context = from_prompt(text)
            suggestions = rank(evaluate(context, self.store.rules))
            decision = authorize(suggestions, acknowledged)
            shown = suggestions.limit(self.config.max_suggestions)
            return PromptOutcome(
                suggestions=suggestions,
                decision=decision,
                text=format_suggestions(decision, shown),
            )
        except ActivationError as e:
            logger.warning(f"Prompt evaluation skipped: {e}")
            return PromptOutcome()

    def on_file_edit(self, path: str, operation: FileOperation | str = FileOperation.EDIT) -> EditOutcome:
        """Record a file modification and report any follow-up checks now due."""
        if not self.config.enabled:
            return EditOutcome()
        try:
            self.tracker.record_edit(path, operation)
        except ActivationError as e:
            logger.warning(f"Edit not recorded: {e}")
            return EditOutcome()
        return self._checks_outcome(self.tracker.checks_due())

    def end_session(self) -> EditOutcome:
        """Surface every check not yet reported."""
        if not self.config.enabled:
            return EditOutcome()
        return self._checks_outcome(self.tracker.drain())

    def _checks_outcome(self, checks: frozenset[str]) -> EditOutcome:
        if not checks:
            return EditOutcome()
        return EditOutcome(checks=checks, text=format_checks(checks, self.tracker.snapshot().paths))


__all__ = ["ActivationEngine", "EditOutcome", "PromptOutcome"]

"""
Session tracker: edit history and follow-up check reminders.

The tracker exclusively owns one SessionLog. The log only ever grows:
``modified_files`` by one record per edit, ``pending_checks`` by set
union. Reminders are throttled but never dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from .context import ContextSnapshot, FileOperation, from_file_op
from .errors import InvalidContextError
from .matcher import evaluate
from .rule_schema import Rule
from .session_artifacts import EDIT_EVENT, SURFACED_EVENT, SessionLogFile

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EMPTY = "empty"
    ACTIVE = "active"


@dataclass(frozen=True)
class EditRecord:
    """One recorded file modification."""

    path: str
    operation: FileOperation
    timestamp: float

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "operation": self.operation.value, "timestamp": self.timestamp}


class SessionLog:
    """Modified files (in order, duplicates kept) and pending check kinds."""

    def __init__(self, session_id: str | None = None):
        self.session_id = session_id
        self._modified_files: list[EditRecord] = []
        # dict keeps first-derived order for display
        self._pending_checks: dict[str, None] = {}

    @property
    def modified_files(self) -> tuple[EditRecord, ...]:
        return tuple(self._modified_files)

    @property
    def pending_checks(self) -> frozenset[str]:
        return frozenset(self._pending_checks)

    @property
    def paths(self) -> list[str]:
        return [record.path for record in self._modified_files]

    def append(self, record: EditRecord, checks: Iterable[str] = ()) -> None:
        self._modified_files.append(record)
        for check in checks:
            self._pending_checks.setdefault(check, None)

    def copy(self) -> "SessionLog":
        clone = SessionLog(self.session_id)
        clone._modified_files = list(self._modified_files)
        clone._pending_checks = dict(self._pending_checks)
        return clone

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "modified_files": [record.to_dict() for record in self._modified_files],
            "pending_checks": list(self._pending_checks),
        }

    def __len__(self) -> int:
        return len(self._modified_files)


def derive_checks(context: ContextSnapshot, rules: Iterable[Rule]) -> list[str]:
    """CheckKinds derived from the rules whose file patterns match ``context``."""
    checks: list[str] = []
    for record in evaluate(context, rules):
        if record.excluded:
            continue
        for check in record.rule.checks:
            if check not in checks:
                checks.append(check)
    return checks


class SessionTracker:
    """
    Records edits and decides when follow-up checks are due.

    Throttle: ``checks_due`` surfaces the whole pending set once at least
    ``threshold`` edits have been recorded since checks were last
    surfaced. ``drain`` surfaces whatever is outstanding regardless of
    the threshold, and is what the host calls at session end.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        log: SessionLog | None = None,
        threshold: int = 1,
        log_file: SessionLogFile | None = None,
    ):
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self._rules: tuple[Rule, ...] = tuple(rule for rule in rules if rule.file_patterns)
        self._log = log if log is not None else SessionLog()
        self.threshold = threshold
        self.log_file = log_file
        self._edits_since_surfaced = 0

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if len(self._log) else SessionState.EMPTY

    @property
    def edits_since_surfaced(self) -> int:
        return self._edits_since_surfaced

    def _apply(self, context: ContextSnapshot) -> list[str]:
        checks = derive_checks(context, self._rules)
        record = EditRecord(path=context.file_path, operation=context.operation, timestamp=context.timestamp)
        self._log.append(record, checks)
        self._edits_since_surfaced += 1
        return checks

    def record_edit(
        self,
        path: str,
        operation: FileOperation | str = FileOperation.EDIT,
        timestamp: float | None = None,
    ) -> list[str]:
        """
        Append one edit and union its derived checks into the pending set.

        Args:
            path: File that was modified
            operation: "edit" or "write"
            timestamp: Event time (default: now)

        Returns:
            CheckKinds derived from this edit

        Raises:
            InvalidContextError: On an empty path, unknown operation, or a read
        """
        context = from_file_op(path, operation, timestamp)
        if context.operation is FileOperation.READ:
            raise InvalidContextError(f"Read of {context.file_path} is not a modification")

        checks = self._apply(context)
        if self.log_file is not None:
            self._persist(self.log_file.append_edit, context.file_path, context.operation.value, context.timestamp)

        logger.debug(f"Recorded {context.operation.value} of {context.file_path}; derived {checks}")
        return checks

    def _persist(self, write, *args) -> None:
        try:
            write(*args)
        except OSError as e:
            logger.warning(f"Session log {self.log_file.path} not written: {e}")

    def _surface(self, persist: bool = True) -> frozenset[str]:
        due = self._log.pending_checks
        self._edits_since_surfaced = 0
        if persist and self.log_file is not None:
            self._persist(self.log_file.append_surfaced, due)
        return due

    def checks_due(self) -> frozenset[str]:
        """Pending checks if the throttle threshold has been reached, else empty."""
        if not self._log.pending_checks:
            return frozenset()
        if self._edits_since_surfaced < self.threshold:
            return frozenset()
        return self._surface()

    def drain(self) -> frozenset[str]:
        """Pending checks if any edit has not been surfaced yet, ignoring the threshold."""
        if not self._log.pending_checks or self._edits_since_surfaced == 0:
            return frozenset()
        return self._surface()

    def snapshot(self) -> SessionLog:
        """Read-only copy of the session log."""
        return self._log.copy()

    @classmethod
    def replay(
        cls,
        rules: Iterable[Rule],
        path: Path | str,
        threshold: int = 1,
        session_id: str | None = None,
    ) -> "SessionTracker":
        """
        Rebuild a tracker from a session artifact and keep appending to it.

        Edits are re-applied through the same derivation as record_edit,
        so checks follow the current rules.
        """
        log_file = SessionLogFile(path)
        tracker = cls(rules, log=SessionLog(session_id), threshold=threshold)

        for event in log_file.read_events():
            if event["event"] == EDIT_EVENT:
                try:
                    context = from_file_op(
                        event.get("path", ""),
                        event.get("operation", FileOperation.EDIT.value),
                        float(event.get("timestamp", 0.0)),
                    )
                except (InvalidContextError, TypeError, ValueError) as e:
                    logger.warning(f"{log_file.path}: skipping edit record: {e}")
                    continue
                if context.operation is FileOperation.READ:
                    logger.warning(f"{log_file.path}: skipping read of {context.file_path}")
                    continue
                tracker._apply(context)
            elif event["event"] == SURFACED_EVENT:
                tracker._surface(persist=False)

        tracker.log_file = log_file
        return tracker


__all__ = [
    "EditRecord",
    "SessionLog",
    "SessionState",
    "SessionTracker",
    "derive_checks",
]

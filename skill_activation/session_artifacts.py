"""SessionLogFile - append-only JSON Lines artifact for one session's edits."""

from __future__ import annotations

import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Iterable, Iterator

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")

EDIT_EVENT = "edit"
SURFACED_EVENT = "surfaced"
ACKNOWLEDGED_EVENT = "acknowledged"

EVENTS = (EDIT_EVENT, SURFACED_EVENT, ACKNOWLEDGED_EVENT)


def session_log_path(session_dir: Path | str, session_id: str) -> Path:
    """Path of the artifact for ``session_id`` under ``session_dir``."""
    safe_id = _UNSAFE.sub("_", session_id) or "default"
    return Path(session_dir).expanduser() / f"{safe_id}.jsonl"


class SessionLogFile:
    """
    Durability aid for the session log.

    One line per recorded edit, one per surfacing of checks, and one per
    set of blocking rules whose guidance the prompt hook has shown. The
    in-memory SessionLog stays authoritative; this file only lets a new
    process rebuild it (see SessionTracker.replay).
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def _append(self, entry: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def append_edit(self, path: str, operation: str, timestamp: float) -> None:
        self._append({"event": EDIT_EVENT, "timestamp": timestamp, "path": path, "operation": operation})

    def append_surfaced(self, checks: Iterable[str], timestamp: float | None = None) -> None:
        self._append({
            "event": SURFACED_EVENT,
            "timestamp": time.time() if timestamp is None else timestamp,
            "checks": sorted(checks),
        })

    def append_acknowledged(self, rule_names: Iterable[str], timestamp: float | None = None) -> None:
        self._append({
            "event": ACKNOWLEDGED_EVENT,
            "timestamp": time.time() if timestamp is None else timestamp,
            "rules": sorted(set(rule_names)),
        })

    def read_events(self) -> Iterator[dict[str, Any]]:
        """
        Yield well-formed events in file order.

        Unreadable lines (bad JSON or bad UTF-8) are skipped with a warning.
        """
        if not self.path.exists():
            return

        try:
            f = open(self.path, "rb")
        except OSError as e:
            logger.warning(f"Cannot read session log {self.path}: {e}")
            return

        with f:
            for line_no, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8").strip()
                except UnicodeDecodeError as e:
                    logger.warning(f"{self.path}:{line_no}: skipping undecodable line ({e})")
                    continue
                if not line:
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError as e:
                    logger.warning(f"{self.path}:{line_no}: skipping unreadable line ({e})")
                    continue
                if not isinstance(event, dict) or event.get("event") not in EVENTS:
                    logger.warning(f"{self.path}:{line_no}: skipping unknown record")
                    continue
                yield event

    def acknowledged_rules(self) -> set[str]:
        """Names of blocking rules already shown in this session."""
        names: set[str] = set()
        for event in self.read_events():
            if event["event"] != ACKNOWLEDGED_EVENT:
                continue
            rules = event.get("rules")
            if isinstance(rules, list):
                names.update(name for name in rules if isinstance(name, str))
        return names

    def remove(self) -> None:
        """Discard the artifact at session end."""
        if self.path.exists():
            self.path.unlink()


__all__ = [
    "ACKNOWLEDGED_EVENT",
    "EDIT_EVENT",
    "SURFACED_EVENT",
    "SessionLogFile",
    "session_log_path",
]

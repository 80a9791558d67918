"""
Configuration management for skill activation.

Settings come from ~/.claude/skill-activation.json, then environment
variables for the values a hook may need to override per invocation.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".claude" / "skill-activation.json"

ENV_RULES_PATH = "SKILL_ACTIVATION_RULES"
ENV_DISABLED = "SKILL_ACTIVATION_DISABLED"
ENV_LOG_LEVEL = "SKILL_ACTIVATION_LOG_LEVEL"
ENV_ACKNOWLEDGED = "SKILL_ACTIVATION_ACK"

DEFAULT_RULES_PATH = ".claude/skills/skill-rules.json"
DEFAULT_SESSION_DIR = "~/.claude/skill-activation/sessions"


def _filter_dataclass_fields(data: dict[str, Any], cls: type) -> dict[str, Any]:
    """Filter dict to only include fields that exist in the dataclass."""
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in valid_fields}


@dataclass
class ActivationConfig:
    """
    Skill activation settings.

    check_threshold: edits between follow-up check reminders (1 = every edit)
    max_suggestions: cap on rendered suggestions, None for no cap
    """

    enabled: bool = True
    rules_path: str = DEFAULT_RULES_PATH
    check_threshold: int = 1
    max_suggestions: int | None = None
    session_dir: str = DEFAULT_SESSION_DIR
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.check_threshold, int) or self.check_threshold < 1:
            logger.warning(f"Invalid check_threshold {self.check_threshold!r}; using 1")
            self.check_threshold = 1
        if self.max_suggestions is not None and self.max_suggestions < 1:
            self.max_suggestions = None

    def resolve_rules_path(self, project_dir: Path | str | None = None) -> Path:
        """Rules path, relative paths resolved against the project directory."""
        path = Path(self.rules_path).expanduser()
        if path.is_absolute():
            return path
        base = Path(project_dir) if project_dir else Path.cwd()
        return base / path

    @property
    def session_path(self) -> Path:
        return Path(self.session_dir).expanduser()

    @classmethod
    def load(cls, path: Path | None = None, env: dict[str, str] | None = None) -> "ActivationConfig":
        """
        Load config from file with defaults, then apply environment overrides.

        Args:
            path: Optional config file path. Defaults to ~/.claude/skill-activation.json
            env: Environment mapping (default: os.environ)

        Returns:
            ActivationConfig instance
        """
        if path is None:
            path = CONFIG_PATH
        if env is None:
            env = dict(os.environ)

        data: dict[str, Any] = {}
        if path.exists():
            try:
                loaded = json.loads(path.read_text())
                if isinstance(loaded, dict):
                    data = loaded
                else:
                    logger.warning(f"Ignoring {path}: expected a JSON object")
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Ignoring unreadable config {path}: {e}")

        if env.get(ENV_RULES_PATH):
            data["rules_path"] = env[ENV_RULES_PATH]
        if env.get(ENV_DISABLED, "").lower() == "true":
            data["enabled"] = False
        if env.get(ENV_LOG_LEVEL):
            data["log_level"] = env[ENV_LOG_LEVEL].upper()

        return cls(**_filter_dataclass_fields(data, cls))

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_PATH

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)


def acknowledged_from_env(env: dict[str, str] | None = None) -> list[str]:
    """Rule names the caller has acknowledged, from SKILL_ACTIVATION_ACK."""
    if env is None:
        env = dict(os.environ)
    raw = env.get(ENV_ACKNOWLEDGED, "")
    return [name.strip() for name in raw.split(",") if name.strip()]


__all__ = [
    "ActivationConfig",
    "CONFIG_PATH",
    "DEFAULT_RULES_PATH",
    "DEFAULT_SESSION_DIR",
    "acknowledged_from_env",
]

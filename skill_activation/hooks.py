"""
Host hook handlers.

Hooks receive JSON via stdin. Each handler returns the process exit
code: 0 to continue, 2 to stop the prompt and show stderr to the model.
Nothing but the payload is ever written to stdout.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, TextIO

from .config import ActivationConfig, acknowledged_from_env
from .context import TOOL_OPERATIONS, FileOperation
from .engine import ActivationEngine
from .session_artifacts import SessionLogFile, session_log_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BLOCK = 2


def read_hook_input(stream: TextIO | None = None) -> dict[str, Any]:
    """Read hook input from stdin (JSON format per Claude Code docs)."""
    stream = stream or sys.stdin
    try:
        data = stream.read()
        if data:
            parsed = json.loads(data)
            if isinstance(parsed, dict):
                return parsed
    except json.JSONDecodeError:
        pass
    return {}


def configure_logging(config: ActivationConfig, stream: TextIO | None = None) -> None:
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=stream or sys.stderr,
        format="[skill-activation] %(levelname)s %(name)s: %(message)s",
    )


def _session_id(hook_input: dict[str, Any], env: dict[str, str]) -> str:
    return str(hook_input.get("session_id") or env.get("CLAUDE_SESSION_ID") or "default")


def _project_dir(hook_input: dict[str, Any], env: dict[str, str]) -> str | None:
    return env.get("CLAUDE_PROJECT_DIR") or hook_input.get("cwd") or None


def prompt_hook(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    env: dict[str, str] | None = None,
    config: ActivationConfig | None = None,
) -> int:
    """UserPromptSubmit: print skill suggestions for the submitted prompt."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    env = dict(os.environ) if env is None else env
    hook_input = read_hook_input(stdin)

    prompt = hook_input.get("prompt", "")
    if not isinstance(prompt, str) or not prompt.strip():
        return EXIT_OK

    config = config or ActivationConfig.load(env=env)
    engine = ActivationEngine(config, project_dir=_project_dir(hook_input, env))
    log_file = SessionLogFile(session_log_path(config.session_path, _session_id(hook_input, env)))

    acknowledged = set(acknowledged_from_env(env)) | log_file.acknowledged_rules()
    outcome = engine.on_prompt(prompt, acknowledged)

    if not outcome.decision.proceed:
        print(outcome.text, file=stderr)
        # Shown once per session: the next matching prompt proceeds
        try:
            log_file.append_acknowledged(outcome.decision.blocking_names)
        except OSError as e:
            logger.warning(f"Acknowledgment not recorded in {log_file.path}: {e}")
        return EXIT_BLOCK

    if outcome.text:
        print(outcome.text, file=stdout)
    return EXIT_OK


def edit_hook(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    env: dict[str, str] | None = None,
    config: ActivationConfig | None = None,
) -> int:
    """PostToolUse: record a file modification and print due check reminders."""
    stdout = stdout or sys.stdout
    env = dict(os.environ) if env is None else env
    hook_input = read_hook_input(stdin)

    operation = TOOL_OPERATIONS.get(str(hook_input.get("tool_name", "")))
    if operation is None or operation is FileOperation.READ:
        return EXIT_OK

    tool_input = hook_input.get("tool_input")
    if not isinstance(tool_input, dict):
        return EXIT_OK
    file_path = tool_input.get("file_path") or tool_input.get("notebook_path")
    if not isinstance(file_path, str) or not file_path:
        return EXIT_OK

    config = config or ActivationConfig.load(env=env)
    engine = ActivationEngine.for_session(
        _session_id(hook_input, env),
        config=config,
        project_dir=_project_dir(hook_input, env),
    )
    outcome = engine.on_file_edit(file_path, operation)
    if outcome.text:
        print(outcome.text, file=stdout)
    return EXIT_OK


def stop_hook(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    env: dict[str, str] | None = None,
    config: ActivationConfig | None = None,
) -> int:
    """Stop: print every follow-up check not reported yet."""
    stdout = stdout or sys.stdout
    env = dict(os.environ) if env is None else env
    hook_input = read_hook_input(stdin)

    config = config or ActivationConfig.load(env=env)
    engine = ActivationEngine.for_session(
        _session_id(hook_input, env),
        config=config,
        project_dir=_project_dir(hook_input, env),
    )
    outcome = engine.end_session()
    if outcome.text:
        print(outcome.text, file=stdout)
    return EXIT_OK


def run(handler, **kwargs) -> int:
    """Run a hook handler; any unexpected failure degrades to exit 0."""
    env = dict(os.environ)
    configure_logging(ActivationConfig.load(env=env))
    try:
        return handler(env=env, **kwargs)
    except Exception as e:
        logger.error(f"{handler.__name__} failed: {e}")
        return EXIT_OK


__all__ = [
    "EXIT_BLOCK",
    "EXIT_OK",
    "configure_logging",
    "edit_hook",
    "prompt_hook",
    "read_hook_input",
    "run",
    "stop_hook",
]

"""Skill activation: decide which skills apply to a prompt or file edit.

Matches prompts and file operations against declarative activation
rules, ranks the matches, applies suggest/block modes, and tracks the
files touched in a session to remind about follow-up checks.
"""

__version__ = "0.1.0"

# Rules
from .errors import ActivationError, ConfigError, InvalidContextError, PatternError
from .globs import GlobPattern
from .rule_schema import IntentPattern, Rule, RuleMode, RulePriority
from .rule_store import RuleStore

# Pipeline
from .context import ContextKind, ContextSnapshot, FileOperation, from_file_op, from_prompt
from .matcher import MatchReason, MatchRecord, evaluate
from .ranking import SuggestionList, rank
from .enforcer import Decision, authorize
from .emitter import format_checks, format_suggestions

# Session
from .session_artifacts import SessionLogFile, session_log_path
from .session_tracker import EditRecord, SessionLog, SessionState, SessionTracker

# Engine & Config
from .config import ActivationConfig
from .engine import ActivationEngine, EditOutcome, PromptOutcome

__all__ = [
    # Rules
    "ActivationError",
    "ConfigError",
    "InvalidContextError",
    "PatternError",
    "GlobPattern",
    "IntentPattern",
    "Rule",
    "RuleMode",
    "RulePriority",
    "RuleStore",
    # Pipeline
    "ContextKind",
    "ContextSnapshot",
    "FileOperation",
    "from_file_op",
    "from_prompt",
    "MatchReason",
    "MatchRecord",
    "evaluate",
    "SuggestionList",
    "rank",
    "Decision",
    "authorize",
    "format_checks",
    "format_suggestions",
    # Session
    "SessionLogFile",
    "session_log_path",
    "EditRecord",
    "SessionLog",
    "SessionState",
    "SessionTracker",
    # Engine & Config
    "ActivationConfig",
    "ActivationEngine",
    "EditOutcome",
    "PromptOutcome",
]

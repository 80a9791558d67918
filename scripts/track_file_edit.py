#!/usr/bin/env python3
"""
Record a file modification for the current session.

Called by: hooks/hooks.json PostToolUse (Edit|MultiEdit|Write|NotebookEdit)

Appends the edit to ~/.claude/skill-activation/sessions/{session_id}.jsonl
and prints follow-up checks (lint, tests) once they are due.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from skill_activation.hooks import edit_hook, run


if __name__ == "__main__":
    sys.exit(run(edit_hook))

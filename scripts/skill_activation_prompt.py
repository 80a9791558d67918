#!/usr/bin/env python3
"""
Suggest skills for the prompt the user just submitted.

Called by: hooks/hooks.json UserPromptSubmit

Reads {"prompt", "session_id", "cwd"} from stdin and prints the matched
skills. Exits 2 with the reason on stderr while a blocking skill has not
been acknowledged (SKILL_ACTIVATION_ACK=name[,name...]).
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from skill_activation.hooks import prompt_hook, run


if __name__ == "__main__":
    sys.exit(run(prompt_hook))

#!/usr/bin/env python3
"""
Report follow-up checks still outstanding for the session.

Called by: hooks/hooks.json Stop
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from skill_activation.hooks import run, stop_hook


if __name__ == "__main__":
    sys.exit(run(stop_hook))

"""Per-user locations for PomoTimer's files."""

import os
import sys
from pathlib import Path


def config_home() -> Path:
    """``$XDG_CONFIG_HOME``, or ``~/.config`` when it is unset or empty."""
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def _app_support_dir() -> Path:
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "PomoTimer"
    return config_home() / "pomotimer"


APP_SUPPORT_DIR = _app_support_dir()
LOGS_DIR = APP_SUPPORT_DIR / "logs"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

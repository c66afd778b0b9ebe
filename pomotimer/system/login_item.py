"""Registration for starting PomoTimer at login.

macOS gets a per-user LaunchAgent with ``RunAtLoad``; other platforms get
an XDG autostart entry.  Registration is just the presence of that file,
so there is no state to keep in the app.
"""

from __future__ import annotations

import plistlib
import shlex
import sys
from pathlib import Path

from ..log import get_logger
from ..paths import config_home


LABEL = "com.pomotimer.app"

LAUNCH_AGENTS_DIR = Path.home() / "Library" / "LaunchAgents"
AUTOSTART_SUBDIR = "autostart"

log = get_logger(__name__)


class LoginItemError(Exception):
    """The login item could not be added or removed."""


def default_command() -> list[str]:
    """How to relaunch this app: the bundle binary, or ``python -m``."""
    if getattr(sys, "frozen", False):
        return [sys.executable]
    return [sys.executable, "-m", "pomotimer"]


class LoginItem:
    """On/off toggle for starting PomoTimer when the user logs in."""

    def __init__(
        self,
        platform: str | None = None,
        *,
        directory: Path | None = None,
        command: list[str] | None = None,
    ) -> None:
        self._platform = platform or sys.platform
        if directory is None:
            directory = (
                LAUNCH_AGENTS_DIR if self._is_mac
                else config_home() / AUTOSTART_SUBDIR
            )
        self._directory = directory
        self._command = command or default_command()

    @property
    def _is_mac(self) -> bool:
        return self._platform == "darwin"

    @property
    def path(self) -> Path:
        if self._is_mac:
            return self._directory / f"{LABEL}.plist"
        return self._directory / "pomotimer.desktop"

    def is_enabled(self) -> bool:
        return self.path.exists()

    def set_enabled(self, enabled: bool) -> None:
        try:
            if enabled:
                self._directory.mkdir(parents=True, exist_ok=True)
                self.path.write_bytes(self._render())
            else:
                self.path.unlink(missing_ok=True)
        except OSError as exc:
            log.error("Could not change login item %s: %s", self.path, exc)
            raise LoginItemError(str(exc)) from exc
        log.info("Launch at login %s", "enabled" if enabled else "disabled")

    def toggle(self) -> bool:
        """Flip the setting and return the new state."""
        enabled = not self.is_enabled()
        self.set_enabled(enabled)
        return enabled

    # ── file contents ─────────────────────────────────────────────────

    def _render(self) -> bytes:
        if self._is_mac:
            return plistlib.dumps({
                "Label": LABEL,
                "ProgramArguments": list(self._command),
                "RunAtLoad": True,
                "ProcessType": "Interactive",
            })
        lines = [
            "[Desktop Entry]",
            "Type=Application",
            "Name=PomoTimer",
            f"Exec={shlex.join(self._command)}",
            "X-GNOME-Autostart-enabled=true",
            "",
        ]
        return "\n".join(lines).encode("utf-8")

"""Locking the screen when a session completes.

Each platform has a primary mechanism and a fallback:

- macOS: ``SACLockScreenImmediate`` from the private ``login`` framework
  (an instant lock), then ``pmset displaysleepnow`` which sleeps the
  display and relies on "require password after sleep".
- elsewhere: ``loginctl lock-session``, then ``xdg-screensaver lock``.

Failures are logged only.  The user is never shown an error and nothing
is retried.
"""

from __future__ import annotations

import ctypes
import subprocess
import sys

from ..log import get_logger


LOGIN_FRAMEWORK = (
    "/System/Library/PrivateFrameworks/login.framework/Versions/Current/login"
)
LOCK_SYMBOL = "SACLockScreenImmediate"

PMSET_COMMAND = ["/usr/bin/pmset", "displaysleepnow"]
LOGINCTL_COMMAND = ["loginctl", "lock-session"]
XDG_SCREENSAVER_COMMAND = ["xdg-screensaver", "lock"]

COMMAND_TIMEOUT = 5  # seconds

log = get_logger(__name__)


class ScreenLocker:
    """Locks the session with the best mechanism the platform offers."""

    def __init__(self, platform: str | None = None) -> None:
        self._platform = platform or sys.platform

    @property
    def platform(self) -> str:
        return self._platform

    def lock(self) -> bool:
        """Lock now.  Returns ``True`` if some mechanism reported success."""
        if self._platform == "darwin":
            primary, fallback = self._lock_login_framework, self._lock_pmset
        else:
            primary, fallback = self._lock_loginctl, self._lock_xdg_screensaver

        if primary():
            log.info("Screen locked")
            return True
        if fallback():
            log.info("Screen locked using fallback")
            return True
        log.error("Could not lock the screen")
        return False

    # ── macOS ─────────────────────────────────────────────────────────

    def _lock_login_framework(self) -> bool:
        try:
            login = ctypes.CDLL(LOGIN_FRAMEWORK)
        except OSError as exc:
            log.warning("Failed to load login framework: %s", exc)
            return False
        try:
            lock_fn = getattr(login, LOCK_SYMBOL)
        except AttributeError:
            log.warning("Failed to find %s symbol", LOCK_SYMBOL)
            return False
        lock_fn.restype = None
        lock_fn.argtypes = []
        lock_fn()
        return True

    def _lock_pmset(self) -> bool:
        return _run(PMSET_COMMAND)

    # ── other platforms ───────────────────────────────────────────────

    def _lock_loginctl(self) -> bool:
        return _run(LOGINCTL_COMMAND)

    def _lock_xdg_screensaver(self) -> bool:
        return _run(XDG_SCREENSAVER_COMMAND)


def _run(command: list[str]) -> bool:
    """Run *command*; ``True`` when it exits 0."""
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            timeout=COMMAND_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        log.warning("%s failed: %s", command[0], exc)
        return False
    if result.returncode != 0:
        log.warning(
            "%s exited with %d: %s",
            command[0],
            result.returncode,
            result.stderr.decode(errors="replace").strip(),
        )
        return False
    return True

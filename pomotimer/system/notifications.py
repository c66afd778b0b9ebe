"""Desktop notifications for timer events."""

from __future__ import annotations

from PyQt6.QtWidgets import QSystemTrayIcon

from ..log import get_logger
from ..settings import DEFAULT_SOUND, validate_sound
from ..timer.engine import TimerEvent


MESSAGE_TIMEOUT_MS = 10_000

MESSAGES: dict[TimerEvent, tuple[str, str]] = {
    TimerEvent.FIVE_MINUTE_WARNING: (
        "5 Minutes Left", "Your Pomodoro session is almost done!",
    ),
    TimerEvent.ONE_MINUTE_WARNING: (
        "1 Minute Left", "Wrapping up your Pomodoro session!",
    ),
    TimerEvent.COMPLETED: (
        "Pomodoro Complete!", "Great work! Time for a break.",
    ),
}
PREVIEW_MESSAGE = ("Sound Preview", "This is how your notifications will sound")

log = get_logger(__name__)


class Notifier:
    """Shows a tray message and plays the chosen sound.

    *tray_icon* only needs ``showMessage(title, body, icon, msecs)``;
    *sound_manager* only needs ``play(name)``.
    """

    def __init__(self, tray_icon, sound_manager, sound: str = DEFAULT_SOUND) -> None:
        self._tray_icon = tray_icon
        self._sound_manager = sound_manager
        self._sound = validate_sound(sound)
        self._warned_unsupported = False

    @property
    def sound(self) -> str:
        return self._sound

    def set_sound(self, name: str) -> str:
        """Select the sound used from now on; unknown names use the default."""
        self._sound = validate_sound(name)
        return self._sound

    def notify_event(self, event: TimerEvent) -> None:
        title, body = MESSAGES[event]
        self.notify(title, body)

    def preview(self) -> None:
        self.notify(*PREVIEW_MESSAGE)

    def notify(self, title: str, body: str) -> None:
        if not QSystemTrayIcon.supportsMessages() and not self._warned_unsupported:
            self._warned_unsupported = True
            log.warning("Notifications are not supported by this desktop")
        self._tray_icon.showMessage(
            title,
            body,
            QSystemTrayIcon.MessageIcon.Information,
            MESSAGE_TIMEOUT_MS,
        )
        self._sound_manager.play(self._sound)

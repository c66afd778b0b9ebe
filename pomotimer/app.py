"""Menu-bar application for PomoTimer.

Everything lives in the tray icon's menu; there is no main window.

Menu (top → bottom):
    - Status line ("Ready to start" / "Time remaining: M:SS")
    - Notification Sound submenu
    - Mode: Duration | End Time
    - Input row for the selected mode
    - Start Timer / Stop Timer
    - Launch at Login
    - Test Screen Lock
    - Quit
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, Qt, QTimer
from PyQt6.QtGui import (
    QAction, QActionGroup, QColor, QIcon, QImage, QKeySequence, QPainter, QPen, QPixmap,
)
from PyQt6.QtWidgets import (
    QApplication, QHBoxLayout, QLabel, QLineEdit, QMenu, QMessageBox,
    QSystemTrayIcon, QWidget, QWidgetAction,
)

from .audio.sounds import SoundManager
from .log import get_logger
from .settings import AVAILABLE_SOUNDS, Settings, load_settings, save_settings
from .system.login_item import LoginItem, LoginItemError
from .system.notifications import Notifier
from .system.screen_lock import ScreenLocker
from .timer.driver import TimerDriver
from .timer.engine import TimerEvent, TimerState
from .timer.errors import TimerError
from .timer.inputs import (
    DEFAULT_MINUTES, default_end_time, format_remaining, local_now,
    parse_duration_minutes,
)


APP_TITLE = "Pomodoro Timer"
TRAY_EMOJI = "\U0001F345"

LOCK_DELAY_MS = 1000
TEST_LOCK_DELAY_MS = 2000

log = get_logger(__name__)


# ── tray-icon image generation ────────────────────────────────────────────


def _make_tray_icon(fraction_remaining: float | None) -> QIcon:
    """Generate a monochrome template icon for the menu bar.

    - idle:     thin circle outline
    - running:  outline plus a pie for the time still remaining
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)  # template image: macOS tints automatically

    cx, cy, r = size // 2, size // 2, size // 2 - 4

    p.setPen(QPen(colour, 4))
    p.setBrush(Qt.BrushStyle.NoBrush)
    p.drawEllipse(cx - r, cy - r, r * 2, r * 2)

    if fraction_remaining is not None and fraction_remaining > 0:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        inner = r - 6
        span = int(360 * 16 * min(1.0, fraction_remaining))
        # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock.
        p.drawPie(cx - inner, cy - inner, inner * 2, inner * 2, 90 * 16, -span)

    p.end()

    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


def _input_row(label: str, field: QLineEdit, parent: QWidget) -> QWidgetAction:
    """A menu row holding a caption and a text field."""
    row = QWidget()
    layout = QHBoxLayout(row)
    layout.setContentsMargins(10, 4, 10, 4)
    layout.setSpacing(8)
    layout.addWidget(QLabel(label, row))
    field.setParent(row)
    field.setFixedWidth(80)
    layout.addWidget(field)

    action = QWidgetAction(parent)
    action.setDefaultWidget(row)
    return action


class PomoTimerApp(QObject):
    """Owns the tray icon, its menu and the single timer."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        sound_manager: SoundManager | None = None,
        locker: ScreenLocker | None = None,
        login_item: LoginItem | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        super().__init__(parent)
        self._clock = clock

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── collaborators ─────────────────────────────────────────────
        self._driver = TimerDriver(self, clock=clock)
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._locker = locker or ScreenLocker()
        self._login_item = login_item or LoginItem()

        # ── tray icon ─────────────────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(_make_tray_icon(None))
        self._tray_icon.setToolTip(TRAY_EMOJI)
        self._notifier = Notifier(
            self._tray_icon,
            self._sound_manager,
            self._settings.notification_sound,
        )
        self._build_menu()

        # ── wire signals ──────────────────────────────────────────────
        self._driver.state_changed.connect(self._on_state_changed)
        self._driver.tick.connect(self._on_tick)
        self._driver.five_minute_warning.connect(
            lambda: self._notifier.notify_event(TimerEvent.FIVE_MINUTE_WARNING),
        )
        self._driver.one_minute_warning.connect(
            lambda: self._notifier.notify_event(TimerEvent.ONE_MINUTE_WARNING),
        )
        self._driver.completed.connect(self._on_completed)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def driver(self) -> TimerDriver:
        return self._driver

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def menu(self) -> QMenu:
        return self._menu

    def show(self) -> None:
        if not QSystemTrayIcon.isSystemTrayAvailable():
            log.warning("No system tray available; the menu may not be visible")
        self._tray_icon.show()

    # ══════════════════════════════════════════════════════════════════
    #  MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_menu(self) -> None:
        menu = QMenu()
        self._menu = menu

        # Status
        self._status_action = menu.addAction("Ready to start")
        self._status_action.setEnabled(False)
        menu.addSeparator()

        # Sound submenu
        self._sound_menu = menu.addMenu("Notification Sound")
        self._sound_group = QActionGroup(self)
        self._sound_group.setExclusive(True)
        self._sound_actions: dict[str, QAction] = {}
        for sound in AVAILABLE_SOUNDS:
            action = self._sound_menu.addAction(sound)
            action.setCheckable(True)
            action.setChecked(sound == self._notifier.sound)
            action.triggered.connect(lambda _checked, s=sound: self._select_sound(s))
            self._sound_group.addAction(action)
            self._sound_actions[sound] = action
        menu.addSeparator()

        # Mode selector
        mode_label = menu.addAction("Mode:")
        mode_label.setEnabled(False)
        self._mode_group = QActionGroup(self)
        self._mode_group.setExclusive(True)
        self._duration_mode_action = menu.addAction("Duration")
        self._end_time_mode_action = menu.addAction("End Time")
        for action in (self._duration_mode_action, self._end_time_mode_action):
            action.setCheckable(True)
            self._mode_group.addAction(action)
        self._duration_mode_action.setChecked(True)
        self._mode_group.triggered.connect(lambda _action: self._on_mode_changed())

        # Duration input
        self._duration_field = QLineEdit(str(DEFAULT_MINUTES))
        self._duration_field.returnPressed.connect(self._start_from_field)
        self._duration_row = _input_row("Duration (min):", self._duration_field, menu)
        menu.addAction(self._duration_row)

        # End time input
        self._end_time_field = QLineEdit()
        self._end_time_field.setPlaceholderText("HH:MM")
        self._end_time_field.returnPressed.connect(self._start_from_field)
        self._end_time_row = _input_row("End time (HH:MM):", self._end_time_field, menu)
        self._end_time_row.setVisible(False)
        menu.addAction(self._end_time_row)
        menu.addSeparator()

        # Timer controls
        self._start_action = menu.addAction("Start Timer")
        self._start_action.triggered.connect(self._start_from_input)
        self._stop_action = menu.addAction("Stop Timer")
        self._stop_action.triggered.connect(self._driver.stop)
        self._stop_action.setVisible(False)
        menu.addSeparator()

        # Launch at login
        self._launch_action = menu.addAction("Launch at Login")
        self._launch_action.setCheckable(True)
        self._launch_action.setChecked(self._login_item.is_enabled())
        self._launch_action.triggered.connect(self._toggle_launch_at_login)
        menu.addSeparator()

        # Test lock
        test_action = menu.addAction("Test Screen Lock")
        test_action.triggered.connect(self._test_lock)
        menu.addSeparator()

        # Quit
        quit_action = menu.addAction("Quit")
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit)

        self._tray_icon.setContextMenu(menu)

    @property
    def _is_duration_mode(self) -> bool:
        return self._duration_mode_action.isChecked()

    # ══════════════════════════════════════════════════════════════════
    #  ACTIONS
    # ══════════════════════════════════════════════════════════════════

    def _select_sound(self, sound: str) -> None:
        sound = self._notifier.set_sound(sound)
        self._settings.notification_sound = sound
        save_settings(self._settings)
        for name, action in self._sound_actions.items():
            action.setChecked(name == sound)
        self._notifier.preview()

    def _on_mode_changed(self) -> None:
        is_duration = self._is_duration_mode
        self._duration_row.setVisible(is_duration)
        self._end_time_row.setVisible(not is_duration)
        if not is_duration:
            self._end_time_field.setText(default_end_time(self._clock()))

    def _start_from_field(self) -> None:
        """Return pressed in an input field: close the menu, then start."""
        self._menu.hide()
        self._start_from_input()

    def _start_from_input(self) -> None:
        """Validate the active input and start; bad input leaves the timer alone."""
        try:
            if self._is_duration_mode:
                self._driver.start(parse_duration_minutes(self._duration_field.text()))
            else:
                self._driver.start_at(self._end_time_field.text())
        except TimerError as exc:
            log.info("Rejected timer input: %s", exc)
            self._show_alert(str(exc))

    def _toggle_launch_at_login(self) -> None:
        try:
            self._login_item.toggle()
        except LoginItemError:
            self._show_alert("Could not change launch at login setting.")
        self._launch_action.setChecked(self._login_item.is_enabled())

    def _test_lock(self) -> None:
        if self._confirm_test_lock():
            self._schedule_lock(TEST_LOCK_DELAY_MS)

    def _confirm_test_lock(self) -> bool:
        box = QMessageBox()
        box.setWindowTitle("Test Screen Lock")
        box.setText("Test Screen Lock")
        box.setInformativeText("This will lock your screen in 2 seconds.")
        test_btn = box.addButton("Test", QMessageBox.ButtonRole.AcceptRole)
        box.addButton("Cancel", QMessageBox.ButtonRole.RejectRole)
        box.exec()
        return box.clickedButton() is test_btn

    def _show_alert(self, message: str) -> None:
        box = QMessageBox()
        box.setIcon(QMessageBox.Icon.Warning)
        box.setWindowTitle(APP_TITLE)
        box.setText(APP_TITLE)
        box.setInformativeText(message)
        box.setStandardButtons(QMessageBox.StandardButton.Ok)
        box.exec()

    def _quit(self) -> None:
        self._driver.stop()
        self._tray_icon.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        running = state == TimerState.RUNNING
        self._start_action.setVisible(not running)
        self._stop_action.setVisible(running)
        if not running:
            self._status_action.setText("Ready to start")
            self._tray_icon.setToolTip(TRAY_EMOJI)
            self._tray_icon.setIcon(_make_tray_icon(None))

    def _on_tick(self, remaining: int) -> None:
        text = format_remaining(remaining)
        self._status_action.setText(f"Time remaining: {text}")
        self._tray_icon.setToolTip(f"{TRAY_EMOJI} {text}")
        self._tray_icon.setIcon(
            _make_tray_icon(1.0 - self._driver.percent_complete()),
        )

    def _on_completed(self) -> None:
        self._notifier.notify_event(TimerEvent.COMPLETED)
        self._schedule_lock(LOCK_DELAY_MS)

    def _schedule_lock(self, delay_ms: int) -> None:
        QTimer.singleShot(delay_ms, self._locker.lock)

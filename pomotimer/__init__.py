"""PomoTimer: a menu-bar Pomodoro countdown that locks the screen when done."""

__version__ = "1.0.0"

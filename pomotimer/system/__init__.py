"""Platform integration: notifications, screen lock, login item."""

from .login_item import LoginItem, LoginItemError
from .notifications import Notifier
from .screen_lock import ScreenLocker

__all__ = ["LoginItem", "LoginItemError", "Notifier", "ScreenLocker"]

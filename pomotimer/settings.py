"""Application settings with JSON persistence.

Settings are stored at ``<app support>/settings.json``
(``~/Library/Application Support/PomoTimer`` on macOS).

The only preference is the notification sound.  A stored name that is not
one of ``AVAILABLE_SOUNDS`` is dropped silently in favour of the default.

Usage::

    settings = load_settings()
    settings.notification_sound = "Ping"
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, fields

from .paths import APP_SUPPORT_DIR


SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

AVAILABLE_SOUNDS = (
    "Default", "Glass", "Basso", "Blow", "Bottle", "Frog",
    "Funk", "Hero", "Morse", "Ping", "Pop", "Purr", "Sosumi",
    "Submarine", "Tink",
)
DEFAULT_SOUND = "Glass"


def validate_sound(name: object) -> str:
    """Return *name* if it is a known sound, else ``DEFAULT_SOUND``."""
    if isinstance(name, str) and name in AVAILABLE_SOUNDS:
        return name
    return DEFAULT_SOUND


@dataclass
class Settings:
    """All user-configurable preferences."""

    notification_sound: str = DEFAULT_SOUND

    def __post_init__(self) -> None:
        self.notification_sound = validate_sound(self.notification_sound)


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, AttributeError):
        pass
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )

"""Audio package."""

from .sounds import SoundManager, SYSTEM_SOUNDS_DIR

__all__ = ["SoundManager", "SYSTEM_SOUNDS_DIR"]

"""Notification sound playback using numpy + QSoundEffect.

Every name in ``AVAILABLE_SOUNDS`` maps to a cached WAV file.  On macOS
the WAV is converted from the system sound of the same name
(``/System/Library/Sounds/<Name>.aiff``); ``QSoundEffect`` only plays WAV,
so the AIFF samples are decoded with numpy and re-encoded as 16-bit PCM.
Where the system sound is missing (other platforms) or cannot be decoded,
a short tone is synthesized instead, pitched by the sound's position in
the list so each name still sounds different.

``"Default"`` is always the synthesized chime.
"""

from __future__ import annotations

import io
import struct
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..log import get_logger
from ..paths import SOUNDS_DIR
from ..settings import AVAILABLE_SOUNDS


SYSTEM_SOUNDS_DIR = Path("/System/Library/Sounds")

SAMPLE_RATE = 44100

log = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    # Attack
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    # Decay
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    # Sustain
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    # Release
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Convert float samples (-1..1) to 16-bit PCM WAV bytes.

    *samples* is either mono ``(frames,)`` or interleaved
    ``(frames, channels)``.
    """
    channels = 1 if samples.ndim == 1 else samples.shape[1]
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype("<i2")

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(np.ascontiguousarray(int_samples).tobytes())
    return buf.getvalue()


def _generate_chime() -> bytes:
    """Default sound: 3 ascending notes (C5→E5→G5)."""
    notes = [523.25, 659.25, 783.99]  # C5, E5, G5
    note_dur = 0.12
    gap = 0.03
    parts: list[np.ndarray] = []
    for freq in notes:
        tone = _sine(freq, note_dur) * 0.6
        env = _make_envelope(len(tone), attack=100, decay=200, sustain_level=0.4, release=300)
        parts.append(tone * env)
        parts.append(np.zeros(int(SAMPLE_RATE * gap)))
    parts.append(np.zeros(int(SAMPLE_RATE * 0.05)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_tone(name: str) -> bytes:
    """Stand-in for a missing system sound: a soft two-note bell.

    The pitch climbs a semitone per position in ``AVAILABLE_SOUNDS``.
    """
    if name == "Default":
        return _generate_chime()
    index = AVAILABLE_SOUNDS.index(name) if name in AVAILABLE_SOUNDS else 0
    base = 440.0 * 2 ** (index / 12)
    parts: list[np.ndarray] = []
    for freq, dur in ((base, 0.12), (base * 1.5, 0.35)):
        tone = _sine(freq, dur) * 0.4 + _sine(freq * 2, dur) * 0.08
        env = _make_envelope(
            len(tone),
            attack=int(SAMPLE_RATE * 0.01),
            decay=int(SAMPLE_RATE * 0.05),
            sustain_level=0.4,
            release=int(SAMPLE_RATE * dur * 0.6),
        )
        parts.append(tone * env)
    return _to_wav_bytes(np.concatenate(parts))


# ═══════════════════════════════════════════════════════════════════════════
#  AIFF DECODING
# ═══════════════════════════════════════════════════════════════════════════


def _read_extended(raw: bytes) -> float:
    """80-bit IEEE 754 extended float (AIFF sample rate field)."""
    exp_sign, mantissa = struct.unpack(">HQ", raw[:10])
    exponent = exp_sign & 0x7FFF
    if exponent == 0 and mantissa == 0:
        return 0.0
    sign = -1.0 if exp_sign & 0x8000 else 1.0
    return sign * mantissa * 2.0 ** (exponent - 16383 - 63)


def _decode_aiff(data: bytes) -> tuple[np.ndarray, int]:
    """Decode uncompressed AIFF / AIFF-C into ``(frames, channels)`` floats.

    Returns the samples in -1..1 and the sample rate.  Raises
    ``ValueError`` for anything it cannot read.
    """
    if len(data) < 12 or data[:4] != b"FORM" or data[8:12] not in (b"AIFF", b"AIFC"):
        raise ValueError("not an AIFF file")
    is_aifc = data[8:12] == b"AIFC"

    comm = ssnd = None
    pos = 12
    while pos + 8 <= len(data):
        chunk_id = data[pos:pos + 4]
        (size,) = struct.unpack(">I", data[pos + 4:pos + 8])
        body = data[pos + 8:pos + 8 + size]
        if chunk_id == b"COMM":
            comm = body
        elif chunk_id == b"SSND":
            ssnd = body
        pos += 8 + size + (size & 1)  # chunks are padded to even length
    if comm is None or ssnd is None or len(comm) < 18 or len(ssnd) < 8:
        raise ValueError("missing COMM or SSND chunk")

    channels, frames, bits = struct.unpack(">hIh", comm[:8])
    sample_rate = int(_read_extended(comm[8:18]))
    if channels <= 0 or bits <= 0 or sample_rate <= 0:
        raise ValueError("bad COMM chunk")

    byteorder = ">"
    if is_aifc:
        compression = comm[18:22]
        if compression == b"sowt":
            byteorder = "<"
        elif compression not in (b"NONE", b"twos"):
            raise ValueError(f"unsupported AIFF-C compression {compression!r}")

    (offset,) = struct.unpack(">I", ssnd[:4])
    width = (bits + 7) // 8
    frame_size = width * channels
    raw = ssnd[8 + offset:8 + offset + frames * frame_size]
    raw = raw[:len(raw) // frame_size * frame_size]

    if width == 1:
        samples = np.frombuffer(raw, dtype=np.int8) / 128.0
    elif width == 2:
        samples = np.frombuffer(raw, dtype=byteorder + "i2") / 32768.0
    elif width == 3:
        b = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        if byteorder == "<":
            b = b[:, ::-1]
        ints = (b[:, 0] << 16) | (b[:, 1] << 8) | b[:, 2]
        ints = np.where(ints & 0x800000, ints - 0x1000000, ints)
        samples = ints / 8388608.0
    elif width == 4:
        samples = np.frombuffer(raw, dtype=byteorder + "i4") / 2147483648.0
    else:
        raise ValueError(f"unsupported sample size {bits}")

    return samples.reshape(-1, channels), sample_rate


def _wav_for(name: str, system_dir: Path) -> bytes:
    """WAV bytes for *name*: converted system sound, else synthesized."""
    if name != "Default":
        source = system_dir / f"{name}.aiff"
        if source.exists():
            try:
                samples, rate = _decode_aiff(source.read_bytes())
                return _to_wav_bytes(samples, rate)
            except (OSError, ValueError, struct.error) as exc:
                log.warning("Could not convert %s, using a generated tone: %s", source, exc)
    return _generate_tone(name)


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Converts, caches and plays the notification sounds.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.play("Glass")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        system_sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._system_dir = system_sounds_dir or SYSTEM_SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def sounds_dir(self) -> Path:
        return self._sounds_dir

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Write any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name in AVAILABLE_SOUNDS:
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(_wav_for(name, self._system_dir))

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in AVAILABLE_SOUNDS:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                self._effects[name] = effect

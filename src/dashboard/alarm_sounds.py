"""Alarm sound presets and custom sound files.

Presets are described as data (tone sequences) so any audio backend can
render them; the dashboard itself never synthesises sound. A custom sound is
stored in the settings file as a ``data:`` URL.
"""

import base64
import binascii
import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from src.dashboard.errors import PermanentError
from src.dashboard.models import AlarmPhase

CUSTOM_SOUND = "custom"
DEFAULT_PRESET = "classic"

# Note frequencies in Hz
NOTE: dict[str, float] = {
    "C4": 261.63, "D4": 293.66, "E4": 329.63, "F4": 349.23, "G4": 392.00,
    "A4": 440.00, "B4": 493.88,
    "C5": 523.25, "D5": 587.33, "E5": 659.25, "F5": 698.46, "G5": 783.99,
    "A5": 880.00, "B5": 987.77,
    "C6": 1046.50, "D6": 1174.66, "E6": 1318.51,
}  # fmt: skip

AUDIO_MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
    ".webm": "audio/webm",
}


class Waveform(str, Enum):
    SINE = "sine"
    SQUARE = "square"


class Envelope(str, Enum):
    FLAT = "flat"  # short linear attack and release
    BELL = "bell"  # exponential decay from full volume
    SOFT = "soft"  # slow swell and fade


@dataclass(frozen=True)
class Tone:
    note: str
    offset: float  # seconds after the sequence starts
    duration: float  # seconds
    volume: float = 0.3
    waveform: Waveform = Waveform.SINE
    envelope: Envelope = Envelope.FLAT

    @property
    def frequency(self) -> float:
        return NOTE[self.note]


def _flat(*tones: tuple, waveform: Waveform = Waveform.SINE) -> tuple[Tone, ...]:
    return tuple(Tone(*t, waveform=waveform) for t in tones)


def _enveloped(envelope: Envelope, *tones: tuple) -> tuple[Tone, ...]:
    return tuple(Tone(*t, envelope=envelope) for t in tones)


PRESETS: dict[str, dict[AlarmPhase, tuple[Tone, ...]]] = {
    "classic": {
        AlarmPhase.WARNING: _flat(
            ("E5", 0.0, 0.2, 0.25), ("C5", 0.25, 0.2, 0.25),
            ("E5", 0.5, 0.2, 0.25), ("C5", 0.75, 0.2, 0.25),
        ),
        AlarmPhase.START: _flat(
            ("C5", 0.0, 0.3, 0.3), ("D5", 0.35, 0.3, 0.3), ("E5", 0.7, 0.5, 0.35),
        ),
        AlarmPhase.END: _flat(
            ("B5", 0.0, 0.3, 0.3), ("E5", 0.35, 0.3, 0.3), ("C5", 0.7, 0.5, 0.35),
        ),
    },
    "chime": {
        AlarmPhase.WARNING: _enveloped(
            Envelope.BELL, ("E6", 0.0, 0.6, 0.25), ("C6", 0.4, 0.6, 0.25),
        ),
        AlarmPhase.START: _enveloped(
            Envelope.BELL,
            ("C6", 0.0, 0.8, 0.3), ("E6", 0.3, 0.8, 0.3), ("G5", 0.6, 1.0, 0.35),
        ),
        AlarmPhase.END: _enveloped(
            Envelope.BELL,
            ("G5", 0.0, 0.8, 0.3), ("E5", 0.3, 0.8, 0.3), ("C5", 0.6, 1.2, 0.35),
        ),
    },
    "soft": {
        AlarmPhase.WARNING: _enveloped(
            Envelope.SOFT, ("G4", 0.0, 0.6, 0.12), ("E4", 0.7, 0.6, 0.12),
        ),
        AlarmPhase.START: _enveloped(
            Envelope.SOFT,
            ("C4", 0.0, 0.5, 0.15), ("E4", 0.55, 0.5, 0.15), ("G4", 1.1, 0.7, 0.18),
        ),
        AlarmPhase.END: _enveloped(
            Envelope.SOFT,
            ("G4", 0.0, 0.5, 0.15), ("E4", 0.55, 0.5, 0.15), ("C4", 1.1, 0.7, 0.18),
        ),
    },
    "digital": {
        AlarmPhase.WARNING: _flat(
            ("A5", 0.0, 0.1, 0.2), ("A5", 0.2, 0.1, 0.2),
            ("E5", 0.4, 0.1, 0.2), ("E5", 0.6, 0.1, 0.2),
            waveform=Waveform.SQUARE,
        ),
        AlarmPhase.START: _flat(
            ("C5", 0.0, 0.12, 0.22), ("E5", 0.15, 0.12, 0.22),
            ("G5", 0.3, 0.12, 0.22), ("C6", 0.45, 0.25, 0.25),
            waveform=Waveform.SQUARE,
        ),
        AlarmPhase.END: _flat(
            ("C6", 0.0, 0.12, 0.22), ("G5", 0.15, 0.12, 0.22),
            ("E5", 0.3, 0.12, 0.22), ("C5", 0.45, 0.25, 0.25),
            waveform=Waveform.SQUARE,
        ),
    },
    "melody": {
        AlarmPhase.WARNING: _flat(
            ("E5", 0.0, 0.15, 0.2), ("D5", 0.18, 0.15, 0.2),
            ("E5", 0.36, 0.15, 0.2), ("G5", 0.54, 0.3, 0.25),
        ),
        AlarmPhase.START: _flat(
            ("C5", 0.0, 0.2, 0.25), ("E5", 0.22, 0.2, 0.25), ("G5", 0.44, 0.2, 0.25),
            ("A5", 0.66, 0.15, 0.25), ("G5", 0.83, 0.4, 0.3),
        ),
        AlarmPhase.END: _flat(
            ("G5", 0.0, 0.2, 0.25), ("E5", 0.22, 0.2, 0.25), ("D5", 0.44, 0.2, 0.25),
            ("C5", 0.66, 0.15, 0.25), ("C5", 0.88, 0.5, 0.3),
        ),
    },
}  # fmt: skip


def preset_tones(preset: str, phase: AlarmPhase) -> tuple[Tone, ...]:
    """Tone sequence for a preset and phase; unknown presets fall back to classic."""
    return PRESETS.get(preset, PRESETS[DEFAULT_PRESET])[phase]


@dataclass(frozen=True)
class AlarmFile:
    data: str  # data URL
    name: str  # display name (file name)


def load_alarm_file(path: str | Path) -> AlarmFile:
    """Read an audio file into a ``data:`` URL for the settings file.

    Raises:
        PermanentError: If the file cannot be read.
    """
    path = Path(path)
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise PermanentError(f"Cannot read alarm file {path}: {e}") from e

    ext = path.suffix.lower()
    mime_type = AUDIO_MIME_TYPES.get(ext) or mimetypes.guess_type(path.name)[0] or "audio/mpeg"
    encoded = base64.b64encode(payload).decode("ascii")
    return AlarmFile(data=f"data:{mime_type};base64,{encoded}", name=path.name)


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URL into ``(mime_type, payload)``.

    Raises:
        PermanentError: If the string is not a base64 data URL.
    """
    if not data_url.startswith("data:") or "," not in data_url:
        raise PermanentError("Not a data URL")
    header, encoded = data_url[5:].split(",", 1)
    mime_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise PermanentError(f"Unsupported data URL encoding: {encoding or 'none'}")
    try:
        return mime_type or "application/octet-stream", base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise PermanentError(f"Invalid base64 payload: {e}") from e

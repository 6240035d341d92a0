"""Core types and constants for pitchnotes."""

from .note import SampleBuffer, RawPitchEvent, NoteEvent
from .conversion import (
    clamp_midi,
    hz_to_midi,
    hz_to_midi_float,
    midi_to_hz,
    midi_to_note_name,
)
from .constants import (
    PITCH_NAMES,
    DEFAULT_SR,
    DEFAULT_WINDOW_SIZE,
    DEFAULT_SPECTRAL_WINDOW_SIZE,
    DEFAULT_HOP_SIZE,
    DEFAULT_TEMPO,
    DEFAULT_TICKS_PER_BEAT,
    DEFAULT_VELOCITY,
)

__all__ = [
    "SampleBuffer",
    "RawPitchEvent",
    "NoteEvent",
    "clamp_midi",
    "hz_to_midi",
    "hz_to_midi_float",
    "midi_to_hz",
    "midi_to_note_name",
    "PITCH_NAMES",
    "DEFAULT_SR",
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_SPECTRAL_WINDOW_SIZE",
    "DEFAULT_HOP_SIZE",
    "DEFAULT_TEMPO",
    "DEFAULT_TICKS_PER_BEAT",
    "DEFAULT_VELOCITY",
]

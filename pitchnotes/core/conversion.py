"""Frequency <-> note number conversion."""

import math

from .constants import A4_FREQUENCY, A4_MIDI, MIDI_MAX, MIDI_MIN, PITCH_NAMES


def clamp_midi(value: int) -> int:
    """Clamp a note number into the MIDI range (0-127)."""
    return max(MIDI_MIN, min(MIDI_MAX, int(value)))


def hz_to_midi_float(hz: float) -> float:
    """Convert frequency (Hz) to a continuous MIDI note number.

    Raises:
        ValueError: If ``hz`` is not positive
    """
    if not hz > 0:
        raise ValueError(f"Frequency must be positive, got {hz}")
    return A4_MIDI + 12.0 * math.log2(hz / A4_FREQUENCY)


def hz_to_midi(hz: float) -> int:
    """Convert frequency (Hz) to the nearest MIDI note, clamped to 0-127.

    Halfway values round up, so a quarter tone above a note maps to the
    note above.

    Raises:
        ValueError: If ``hz`` is not positive
    """
    return clamp_midi(math.floor(hz_to_midi_float(hz) + 0.5))


def midi_to_hz(midi: int) -> float:
    """Convert MIDI note number to frequency (Hz)."""
    return A4_FREQUENCY * (2 ** ((midi - A4_MIDI) / 12.0))


def midi_to_note_name(midi: int) -> str:
    """Get note name (e.g., 'C4', 'A#3')."""
    midi = clamp_midi(midi)
    octave = (midi // 12) - 1
    return f"{PITCH_NAMES[midi % 12]}{octave}"

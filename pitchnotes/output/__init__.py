"""Output layer - Consumers of quantized note events.

This layer handles:
- MIDI files (tick layout with rests, via pretty_midi)
- Playback scheduling against a synthesizer
- Offline sine preview rendering
"""

from .midi import MIDIExporter, TickChord, layout_ticks
from .playback import (
    PlaybackScheduler,
    ScheduledNote,
    SineRenderer,
    Synthesizer,
)

__all__ = [
    "MIDIExporter",
    "TickChord",
    "layout_ticks",
    "PlaybackScheduler",
    "ScheduledNote",
    "SineRenderer",
    "Synthesizer",
]

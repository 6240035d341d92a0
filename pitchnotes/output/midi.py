"""MIDI export functionality."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import pretty_midi

from ..config import ExportConfig
from ..core import NoteEvent
from ..core.constants import DEFAULT_TEMPO, DEFAULT_TICKS_PER_BEAT, DEFAULT_VELOCITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickChord:
    """A note event placed on the MIDI tick grid."""

    start_tick: int
    duration_ticks: int
    rest_ticks: int  # Silence inserted before this chord
    midi_notes: Tuple[int, ...]
    velocity: int


def layout_ticks(
    notes: List[NoteEvent],
    tempo: float = DEFAULT_TEMPO,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
    default_velocity: int = DEFAULT_VELOCITY,
) -> List[TickChord]:
    """
    Place note events on a sequential tick timeline.

    A running cursor tracks the end of the last chord. When a note starts
    after the cursor, a rest fills the gap; a note starting before the
    cursor is pushed back to it, so chords never overlap.

    Args:
        notes: Quantized note events in time order
        tempo: Tempo in BPM
        ticks_per_beat: MIDI resolution

    Returns:
        One TickChord per note event
    """
    ticks_per_second = ticks_per_beat * tempo / 60.0
    cursor = 0
    chords = []

    for note in notes:
        if not note.midi_notes:
            continue

        target = int(round(note.time * ticks_per_second))
        rest = 0
        if target > cursor:
            rest = target - cursor
            cursor = target

        duration = max(1, int(round(note.duration * ticks_per_second)))
        velocity = note.velocity if note.velocity is not None else default_velocity
        velocity = max(1, velocity)  # note-on with velocity 0 means note-off

        chords.append(
            TickChord(
                start_tick=cursor,
                duration_ticks=duration,
                rest_ticks=rest,
                midi_notes=note.midi_notes,
                velocity=velocity,
            )
        )
        cursor += duration

    return chords


class MIDIExporter:
    """Export note events to MIDI format."""

    def __init__(
        self,
        tempo: float = DEFAULT_TEMPO,
        ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
        instrument_name: str = "Acoustic Grand Piano",
        instrument_program: Optional[int] = None,
        default_velocity: int = DEFAULT_VELOCITY,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            ticks_per_beat: MIDI resolution (ticks per quarter note)
            instrument_name: General MIDI instrument name
            instrument_program: MIDI program number (0-127); looked up from
                instrument_name when None
            default_velocity: Velocity for notes without one

        Raises:
            ValueError: If instrument_name is not a General MIDI name
        """
        self.tempo = tempo
        self.ticks_per_beat = ticks_per_beat
        self.instrument_name = instrument_name
        if instrument_program is None:
            instrument_program = pretty_midi.instrument_name_to_program(instrument_name)
        self.instrument_program = instrument_program
        self.default_velocity = default_velocity

    @classmethod
    def from_config(cls, config: ExportConfig) -> "MIDIExporter":
        return cls(
            tempo=config.tempo,
            ticks_per_beat=config.ticks_per_beat,
            instrument_name=config.instrument_name,
            default_velocity=config.default_velocity,
        )

    @property
    def seconds_per_tick(self) -> float:
        return 60.0 / (self.tempo * self.ticks_per_beat)

    def layout(self, notes: List[NoteEvent]) -> List[TickChord]:
        return layout_ticks(
            notes,
            tempo=self.tempo,
            ticks_per_beat=self.ticks_per_beat,
            default_velocity=self.default_velocity,
        )

    def notes_to_pretty_midi(self, notes: List[NoteEvent]) -> pretty_midi.PrettyMIDI:
        """Convert note events to a PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(
            resolution=self.ticks_per_beat, initial_tempo=self.tempo
        )

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        tick = self.seconds_per_tick
        for chord in self.layout(notes):
            start = chord.start_tick * tick
            end = (chord.start_tick + chord.duration_ticks) * tick
            for pitch in chord.midi_notes:
                instrument.notes.append(
                    pretty_midi.Note(
                        velocity=chord.velocity,
                        pitch=pitch,
                        start=start,
                        end=end,
                    )
                )

        midi.instruments.append(instrument)
        return midi

    def export(self, notes: List[NoteEvent], output_path: str) -> None:
        """
        Export note events to MIDI file.

        Args:
            notes: Quantized note events
            output_path: Path to output MIDI file
        """
        midi = self.notes_to_pretty_midi(notes)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))
        logger.debug(
            "Wrote %d MIDI notes to %s", len(midi.instruments[0].notes), output_path
        )

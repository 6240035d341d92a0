"""Data model - sample buffers, raw per-frame pitch events and note events."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
import numpy as np

from .conversion import hz_to_midi, midi_to_note_name


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Single-channel audio samples plus their sample rate.

    The samples are copied into a read-only float64 array, so one buffer can
    be handed to several analysis runs at once.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        samples = np.array(self.samples, dtype=np.float64, copy=True)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def from_array(
        cls, samples: Union[np.ndarray, Sequence[float]], sample_rate: int
    ) -> "SampleBuffer":
        """Build a buffer from any float sequence (e.g. a decoder's output)."""
        return cls(samples=np.asarray(samples), sample_rate=sample_rate)

    def __len__(self) -> int:
        return int(self.samples.shape[0]) if self.samples.ndim > 0 else 0

    @property
    def duration(self) -> float:
        """Buffer length in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return len(self) / self.sample_rate


@dataclass(frozen=True)
class RawPitchEvent:
    """One pitch observation from a single analysis frame."""

    time: float  # Frame start in seconds
    frequency: float  # Hz
    amplitude: Optional[float] = None  # Spectral magnitude (polyphonic only)

    @property
    def midi(self) -> int:
        """Nearest MIDI note, clamped to 0-127."""
        return hz_to_midi(self.frequency)


@dataclass(frozen=True)
class NoteEvent:
    """A quantized note (or chord) ready for playback or export."""

    time: float  # Start time in seconds
    pitches: Tuple[float, ...]  # Unique frequencies, ascending
    midi_notes: Tuple[int, ...]  # Unique MIDI notes (0-127), ascending
    duration: float  # Sounding duration in seconds
    velocity: Optional[int] = None  # MIDI velocity (0-127)

    @property
    def offset(self) -> float:
        """End time in seconds."""
        return self.time + self.duration

    @property
    def is_chord(self) -> bool:
        return len(self.midi_notes) > 1

    @property
    def note_names(self) -> Tuple[str, ...]:
        """Note names, e.g. ('C4', 'E4', 'G4')."""
        return tuple(midi_to_note_name(m) for m in self.midi_notes)

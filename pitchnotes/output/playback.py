"""Playback scheduling and offline preview rendering.

The scheduler turns note events into timed synth calls. Real-time audio
output is left to whatever object implements ``Synthesizer``; the bundled
``SineRenderer`` renders the same calls into a sample buffer instead, which
is handy for auditioning a transcription without a sound device.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol

import numpy as np
import soundfile as sf

from ..core import NoteEvent, midi_to_hz
from ..core.constants import DEFAULT_SR, DEFAULT_VELOCITY

logger = logging.getLogger(__name__)


class Synthesizer(Protocol):
    """Sound source driven by the scheduler."""

    def play(self, midi: int, offset: float, duration: float, velocity: int) -> None:
        ...


@dataclass(frozen=True)
class ScheduledNote:
    """One sounding note, relative to playback start."""

    offset: float  # Seconds after playback start
    midi: int
    velocity: int
    duration: float


class PlaybackScheduler:
    """Plays note events in order, one chord at a time."""

    def __init__(self, default_velocity: int = DEFAULT_VELOCITY):
        self.default_velocity = default_velocity

    def schedule(self, notes: List[NoteEvent]) -> List[ScheduledNote]:
        """Flatten note events into per-note entries, chord members together."""
        scheduled = []
        for note in notes:
            velocity = note.velocity if note.velocity is not None else self.default_velocity
            for midi in note.midi_notes:
                scheduled.append(
                    ScheduledNote(
                        offset=note.time,
                        midi=midi,
                        velocity=velocity,
                        duration=note.duration,
                    )
                )
        return scheduled

    def play(
        self,
        notes: List[NoteEvent],
        synth: Synthesizer,
        on_progress: Optional[Callable[[float], None]] = None,
        stop: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """
        Trigger every chord on ``synth``, waiting between chords.

        Args:
            notes: Note events in time order
            synth: Receives one ``play`` call per note
            on_progress: Called with the fraction of the timeline reached
            stop: ``threading.Event``-like object; playback ends before the
                next chord once it is set
            sleep: Wait function; pass a no-op to render offline

        Returns:
            Number of chords played
        """
        total = notes[-1].time if notes else 0.0
        played = 0

        for i, note in enumerate(notes):
            if stop is not None and stop.is_set():
                logger.debug("Playback stopped after %d chords", played)
                break

            velocity = note.velocity if note.velocity is not None else self.default_velocity
            for midi in note.midi_notes:
                synth.play(midi, note.time, note.duration, velocity)
            played += 1

            if on_progress is not None:
                on_progress(note.time / total if total > 0 else 1.0)

            if i + 1 < len(notes):
                sleep(notes[i + 1].time - note.time)

        return played


class SineRenderer:
    """Offline synthesizer: additive sine tones into a float buffer."""

    def __init__(
        self,
        sample_rate: int = DEFAULT_SR,
        gain: float = 0.2,
        fade: float = 0.005,
    ):
        """
        Initialize SineRenderer.

        Args:
            sample_rate: Output sample rate
            gain: Peak amplitude of a velocity-127 note
            fade: Linear fade in/out length in seconds (avoids clicks)
        """
        self.sample_rate = sample_rate
        self.gain = gain
        self.fade = fade
        self._audio = np.zeros(0, dtype=np.float64)

    def play(self, midi: int, offset: float, duration: float, velocity: int) -> None:
        start = int(round(offset * self.sample_rate))
        length = max(1, int(round(duration * self.sample_rate)))
        end = start + length
        if end > self._audio.size:
            self._audio = np.pad(self._audio, (0, end - self._audio.size))

        t = np.arange(length) / self.sample_rate
        tone = np.sin(2 * np.pi * midi_to_hz(midi) * t)

        ramp = min(int(self.fade * self.sample_rate), length // 2)
        if ramp > 0:
            envelope = np.ones(length)
            envelope[:ramp] = np.linspace(0.0, 1.0, ramp)
            envelope[-ramp:] = np.linspace(1.0, 0.0, ramp)
            tone *= envelope

        self._audio[start:end] += tone * self.gain * (velocity / 127.0)

    def render(self) -> np.ndarray:
        """Mixed audio, scaled down only if it would clip."""
        audio = self._audio.copy()
        peak = np.abs(audio).max() if audio.size else 0.0
        if peak > 1.0:
            audio /= peak
        return audio.astype(np.float32)

    def write(self, output_path: str) -> None:
        """Write the rendered audio as a WAV file."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        sf.write(str(output_path), self.render(), self.sample_rate)


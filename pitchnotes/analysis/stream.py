"""Streaming analysis for live input.

``StreamingScanner`` accepts audio in arbitrary chunks (e.g. from a
microphone callback) and analyzes frames at exactly the positions a
``FrameScanner`` would use on the concatenated buffer, so live and offline
analysis agree. ``NoteChangeTracker`` turns a stream of per-frame pitches
into note-on / note-off changes for live monitoring.
"""

from dataclasses import dataclass
from typing import List, Optional
import numpy as np

from ..core import RawPitchEvent, hz_to_midi
from .scanner import PitchEstimator


class StreamingScanner:
    """Incremental frame scanner fed by pushed sample chunks."""

    def __init__(
        self,
        estimator: PitchEstimator,
        sample_rate: int,
        window_size: int = 2048,
        hop_size: int = 512,
    ):
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")
        if window_size <= 0 or hop_size <= 0:
            raise ValueError(
                f"window_size and hop_size must be positive, "
                f"got {window_size} and {hop_size}"
            )
        self.estimator = estimator
        self.sample_rate = sample_rate
        self.window_size = window_size
        self.hop_size = hop_size
        self.reset()

    def reset(self) -> None:
        """Forget buffered audio and restart time at zero."""
        self._pending = np.zeros(0, dtype=np.float64)
        self._pending_start = 0  # Absolute index of _pending[0]
        self._next_frame = 0  # Absolute index of the next frame start

    @property
    def samples_seen(self) -> int:
        return self._pending_start + self._pending.size

    def push(self, chunk: np.ndarray) -> List[RawPitchEvent]:
        """
        Append samples and analyze every frame completed by them.

        Args:
            chunk: Mono samples

        Returns:
            Pitch events for the newly completed frames, in time order
        """
        chunk = np.asarray(chunk, dtype=np.float64)
        if chunk.ndim != 1:
            raise ValueError(f"Expected mono (1-D) chunk, got shape {chunk.shape}")
        self._pending = np.concatenate((self._pending, chunk))

        events = []
        while self._next_frame + self.window_size <= self.samples_seen:
            lo = self._next_frame - self._pending_start
            frame = self._pending[lo:lo + self.window_size]
            time = self._next_frame / self.sample_rate
            for frequency, amplitude in self.estimator.estimate(frame, self.sample_rate):
                events.append(
                    RawPitchEvent(time=time, frequency=frequency, amplitude=amplitude)
                )
            self._next_frame += self.hop_size

        # Samples before the next frame start are never needed again
        drop = min(self._next_frame - self._pending_start, self._pending.size)
        if drop > 0:
            self._pending = self._pending[drop:]
            self._pending_start += drop

        return events


@dataclass(frozen=True)
class NoteChange:
    """A live note switching on or off."""

    kind: str  # "on" or "off"
    midi: int
    time: float


class NoteChangeTracker:
    """Follows the current monophonic note and reports when it changes."""

    def __init__(self):
        self.current: Optional[int] = None

    def update(self, frequency: Optional[float], time: float) -> List[NoteChange]:
        """
        Feed the latest pitch estimate.

        Args:
            frequency: Detected pitch in Hz, or None when nothing was detected
            time: Time of the estimate in seconds

        Returns:
            Changes caused by this estimate (possibly empty)
        """
        midi = hz_to_midi(frequency) if frequency is not None and frequency > 0 else None
        if midi == self.current:
            return []

        changes = []
        if self.current is not None:
            changes.append(NoteChange("off", self.current, time))
        if midi is not None:
            changes.append(NoteChange("on", midi, time))
        self.current = midi
        return changes

    def flush(self, time: float) -> List[NoteChange]:
        """End the sounding note, if any."""
        return self.update(None, time)

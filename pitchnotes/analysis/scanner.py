"""Frame scanning - slide an analysis window over a sample buffer."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple
import numpy as np

from ..core import RawPitchEvent, SampleBuffer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class PitchEstimator(Protocol):
    """Anything that turns one frame into (frequency, amplitude) pairs."""

    def estimate(
        self, frame: np.ndarray, sample_rate: int
    ) -> List[Tuple[float, Optional[float]]]:
        ...


class AnalysisCancelled(RuntimeError):
    """Raised when a scan is cancelled between frames."""


@dataclass(frozen=True, eq=False)
class Frame:
    """One analysis window."""

    index: int
    start: int  # First sample
    time: float  # Seconds
    samples: np.ndarray


def validate_buffer(buffer: SampleBuffer) -> None:
    """Reject buffers no analysis can run on.

    Raises:
        ValueError: On a non-positive sample rate, non-mono or empty samples
    """
    if buffer.sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {buffer.sample_rate}")
    if buffer.samples.ndim != 1:
        raise ValueError(
            f"Expected mono (1-D) samples, got shape {buffer.samples.shape}"
        )
    if buffer.samples.size == 0:
        raise ValueError("Sample buffer is empty")


def count_frames(n_samples: int, window_size: int, hop_size: int) -> int:
    """Number of full windows of ``window_size`` samples, ``hop_size`` apart."""
    if n_samples < window_size:
        return 0
    return (n_samples - window_size) // hop_size + 1


def _is_cancelled(cancel: Any) -> bool:
    if cancel is None:
        return False
    if hasattr(cancel, "is_set"):
        return bool(cancel.is_set())
    return bool(cancel())


class FrameScanner:
    """Runs a pitch estimator on consecutive, overlapping frames.

    The scan is a lazy generator: nothing is analyzed until iterated, and
    each call to ``scan`` starts again from the first sample.
    """

    def __init__(
        self,
        estimator: PitchEstimator,
        window_size: int = 2048,
        hop_size: int = 512,
        progress_every: int = 50,
    ):
        """
        Initialize FrameScanner.

        Args:
            estimator: Object with an ``estimate(frame, sample_rate)`` method
            window_size: Samples per frame
            hop_size: Samples between frame starts
            progress_every: Frames between progress callbacks
        """
        if window_size <= 0 or hop_size <= 0:
            raise ValueError(
                f"window_size and hop_size must be positive, "
                f"got {window_size} and {hop_size}"
            )
        self.estimator = estimator
        self.window_size = window_size
        self.hop_size = hop_size
        self.progress_every = max(1, progress_every)

    def count_frames(self, buffer: SampleBuffer) -> int:
        """Number of full frames that fit in the buffer."""
        return count_frames(len(buffer), self.window_size, self.hop_size)

    def frames(self, buffer: SampleBuffer) -> Iterator[Frame]:
        """
        Iterate over full analysis windows.

        Yields:
            Frame objects; samples are read-only views into the buffer

        Raises:
            ValueError: If the buffer cannot be analyzed
        """
        validate_buffer(buffer)
        return self._iter_frames(buffer)

    def _iter_frames(self, buffer: SampleBuffer) -> Iterator[Frame]:
        samples = buffer.samples
        sr = buffer.sample_rate
        start = 0
        index = 0
        while start + self.window_size <= samples.size:
            yield Frame(
                index=index,
                start=start,
                time=start / sr,
                samples=samples[start:start + self.window_size],
            )
            start += self.hop_size
            index += 1

    def scan(
        self,
        buffer: SampleBuffer,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Any = None,
    ) -> Iterator[RawPitchEvent]:
        """
        Detect pitches frame by frame.

        Args:
            buffer: Audio to analyze
            on_progress: Called with the fraction done (0-1) every
                ``progress_every`` frames and with 1.0 at the end
            cancel: ``threading.Event``-like object or zero-argument callable,
                checked before each frame

        Yields:
            RawPitchEvent objects in non-decreasing time order

        Raises:
            ValueError: If the buffer cannot be analyzed (raised immediately)
            AnalysisCancelled: If ``cancel`` is set between frames
        """
        validate_buffer(buffer)
        return self._scan(buffer, on_progress, cancel)

    def _scan(
        self,
        buffer: SampleBuffer,
        on_progress: Optional[ProgressCallback],
        cancel: Any,
    ) -> Iterator[RawPitchEvent]:
        total = len(buffer)
        sr = buffer.sample_rate
        n_frames = 0
        n_events = 0

        for frame in self._iter_frames(buffer):
            if _is_cancelled(cancel):
                logger.debug("Scan cancelled at frame %d", frame.index)
                raise AnalysisCancelled(
                    f"Analysis cancelled at {frame.time:.3f}s (frame {frame.index})"
                )

            if on_progress is not None and frame.index % self.progress_every == 0:
                on_progress(frame.start / total)

            for frequency, amplitude in self.estimator.estimate(frame.samples, sr):
                n_events += 1
                yield RawPitchEvent(
                    time=frame.time, frequency=frequency, amplitude=amplitude
                )
            n_frames += 1

        if on_progress is not None:
            on_progress(1.0)

        logger.debug(
            "Scanned %d frames (window=%d, hop=%d): %d pitch events",
            n_frames,
            self.window_size,
            self.hop_size,
            n_events,
        )

"""Monophonic pitch detection using lag-domain difference correlation."""

from typing import List, Optional, Tuple
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..config import MonophonicConfig


class AutocorrelationDetector:
    """Detects one dominant frequency per frame.

    For every lag below half the frame, the mean absolute difference between
    the first half of the frame and its lagged copy is turned into a score
    ``1 - mean|x[i] - x[i + lag]|``. The chosen lag is the top of the first
    peak that clears ``correlation_threshold`` while the score is still
    rising, which steps over the trivial zero-lag peak.

    Cost is O(M^2) per frame with M = frame_size / 2; this is the hot spot
    for long buffers at high sample rates.
    """

    def __init__(
        self,
        silence_threshold: float = 0.0005,
        correlation_threshold: float = 0.9,
        min_frequency: float = 50.0,
        max_frequency: float = 1000.0,
    ):
        """
        Initialize AutocorrelationDetector.

        Args:
            silence_threshold: Frame RMS below this returns no pitch
            correlation_threshold: Minimum lag score to accept (0-1)
            min_frequency: Lowest reported pitch in Hz (exclusive)
            max_frequency: Highest reported pitch in Hz (exclusive)
        """
        self.silence_threshold = silence_threshold
        self.correlation_threshold = correlation_threshold
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency

    @classmethod
    def from_config(cls, config: MonophonicConfig) -> "AutocorrelationDetector":
        return cls(
            silence_threshold=config.silence_threshold,
            correlation_threshold=config.correlation_threshold,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
        )

    def detect(self, frame: np.ndarray, sample_rate: int) -> Optional[float]:
        """
        Detect the dominant frequency of one frame.

        Args:
            frame: Audio samples (mono)
            sample_rate: Sample rate in Hz

        Returns:
            Frequency in Hz, or None when the frame is too quiet or no lag
            qualifies
        """
        frame = np.asarray(frame, dtype=np.float64)
        if frame.size < 2:
            return None

        rms = float(np.sqrt(np.mean(frame**2)))
        if rms < self.silence_threshold:
            return None

        correlation = self.correlation_curve(frame)
        best_offset = self._best_offset(correlation)
        if best_offset is None:
            return None

        return sample_rate / best_offset

    def estimate(
        self, frame: np.ndarray, sample_rate: int
    ) -> List[Tuple[float, Optional[float]]]:
        """Frame-scanner hook: at most one (frequency, amplitude) pair.

        Frequencies outside the configured range are dropped, and kept ones
        are rounded to 0.01 Hz. Monophonic events carry no amplitude.
        """
        hz = self.detect(frame, sample_rate)
        if hz is None or not self.min_frequency < hz < self.max_frequency:
            return []
        return [(round(hz, 2), None)]

    @staticmethod
    def correlation_curve(frame: np.ndarray) -> np.ndarray:
        """Score every lag in [0, N/2).

        Returns:
            Array of length N // 2; index is the lag in samples
        """
        frame = np.asarray(frame, dtype=np.float64)
        half = frame.size // 2
        if half == 0:
            return np.zeros(0)

        # Row `lag` holds frame[lag:lag + half]
        lagged = sliding_window_view(frame, half)[:half]
        diff = np.abs(lagged - frame[:half]).sum(axis=1)
        return 1.0 - diff / half

    def _best_offset(self, correlation: np.ndarray) -> Optional[int]:
        """Pick the lag by threshold, rising edge and running best.

        Only the first accepted peak is considered: the search ends at the
        first lag where the curve falls after a lag has been accepted, so a
        multiple of the period cannot win over the period itself.
        """
        previous = np.concatenate(([1.0], correlation[:-1]))
        accepted = (
            (correlation > self.correlation_threshold)
            & (correlation > previous)
            & (correlation > 0.0)
        )
        if not np.any(accepted):
            return None

        first = int(np.argmax(accepted))
        falling = np.flatnonzero(correlation[first:] < previous[first:])
        end = first + int(falling[0]) if falling.size else correlation.size

        # Running "strictly better than best so far" keeps the first maximum
        candidates = first + np.flatnonzero(accepted[first:end])
        best = candidates[int(np.argmax(correlation[candidates]))]
        return int(best)

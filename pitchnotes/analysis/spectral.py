"""Polyphonic pitch detection from magnitude-spectrum peaks.

Each frame goes through:
1. Magnitude spectrum over the positive-frequency bins
2. Local-maximum peak picking above a threshold, inside the musical range
3. Loudest-first truncation to a fixed number of peaks
4. Greedy harmonic filtering, lowest frequency first
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np

from ..config import SpectralConfig


@dataclass(frozen=True)
class SpectralPeak:
    """A local maximum in the magnitude spectrum."""

    frequency: float  # Hz
    amplitude: float  # Normalized magnitude
    bin: int


def magnitude_spectrum(frame: np.ndarray) -> np.ndarray:
    """Compute |DFT| / N for the first N // 2 bins.

    Equivalent to summing x[n] * exp(-2j*pi*k*n/N) for each bin k; the FFT
    just gets the same values faster.
    """
    frame = np.asarray(frame, dtype=np.float64)
    size = frame.size
    if size == 0:
        return np.zeros(0)
    return np.abs(np.fft.rfft(frame))[: size // 2] / size


def is_harmonic(frequency: float, fundamental: float, tolerance: float = 0.1) -> bool:
    """Check whether ``frequency`` sits near an integer multiple (> 1) of ``fundamental``."""
    if fundamental <= 0:
        return False
    ratio = frequency / fundamental
    nearest = math.floor(ratio + 0.5)
    return abs(ratio - nearest) < tolerance and nearest > 1


def filter_harmonics(
    peaks: List[SpectralPeak], tolerance: float = 0.1
) -> List[SpectralPeak]:
    """Keep fundamentals, dropping peaks that are harmonics of a lower one.

    Single greedy pass in ascending frequency: each peak not yet excluded
    is a fundamental, and every later peak that is one of its harmonics is
    excluded. A rejection is never revisited, so when two real fundamentals
    are harmonically related the lower one wins.

    Returns:
        Fundamentals in ascending frequency
    """
    ordered = sorted(peaks, key=lambda p: p.frequency)
    excluded = [False] * len(ordered)
    fundamentals = []

    for i, candidate in enumerate(ordered):
        if excluded[i]:
            continue
        fundamentals.append(candidate)
        for j in range(i + 1, len(ordered)):
            if not excluded[j] and is_harmonic(
                ordered[j].frequency, candidate.frequency, tolerance
            ):
                excluded[j] = True

    return fundamentals


class SpectralPeakDetector:
    """Detects simultaneous pitches (chords) in one frame."""

    def __init__(
        self,
        peak_threshold: float = 0.05,
        harmonic_tolerance: float = 0.1,
        min_frequency: float = 50.0,
        max_frequency: float = 4000.0,
        max_peaks: int = 10,
        edge_bins: int = 10,
        neighborhood: int = 5,
    ):
        """
        Initialize SpectralPeakDetector.

        Args:
            peak_threshold: Minimum normalized magnitude for a peak
            harmonic_tolerance: Max distance from an integer frequency ratio
            min_frequency: Lowest kept peak in Hz (inclusive)
            max_frequency: Highest kept peak in Hz (inclusive)
            max_peaks: Keep at most this many of the loudest peaks
            edge_bins: Bins skipped at each end of the spectrum
            neighborhood: A peak must beat every bin within +/- this many
        """
        self.peak_threshold = peak_threshold
        self.harmonic_tolerance = harmonic_tolerance
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self.max_peaks = max_peaks
        self.edge_bins = edge_bins
        self.neighborhood = neighborhood

    @classmethod
    def from_config(cls, config: SpectralConfig) -> "SpectralPeakDetector":
        return cls(
            peak_threshold=config.peak_threshold,
            harmonic_tolerance=config.harmonic_tolerance,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
            max_peaks=config.max_peaks,
        )

    def find_peaks(
        self, spectrum: np.ndarray, sample_rate: int, frame_size: int
    ) -> List[SpectralPeak]:
        """
        Pick local maxima from a magnitude spectrum.

        Args:
            spectrum: Output of magnitude_spectrum
            sample_rate: Sample rate in Hz
            frame_size: Frame length the spectrum was computed from

        Returns:
            Up to max_peaks peaks, loudest first
        """
        bin_width = sample_rate / frame_size
        n = len(spectrum)
        peaks = []

        for i in range(self.edge_bins, n - self.edge_bins):
            value = spectrum[i]
            if value < self.peak_threshold:
                continue

            lo = max(0, i - self.neighborhood)
            hi = min(n, i + self.neighborhood + 1)
            neighbors = np.concatenate((spectrum[lo:i], spectrum[i + 1:hi]))
            if np.any(neighbors >= value):
                continue

            frequency = i * bin_width
            if self.min_frequency <= frequency <= self.max_frequency:
                peaks.append(
                    SpectralPeak(frequency=float(frequency), amplitude=float(value), bin=i)
                )

        # Stable sort keeps ascending-bin order among equal amplitudes
        peaks.sort(key=lambda p: p.amplitude, reverse=True)
        return peaks[: self.max_peaks]

    def detect(self, frame: np.ndarray, sample_rate: int) -> List[SpectralPeak]:
        """Fundamentals present in one frame, ascending frequency."""
        frame = np.asarray(frame, dtype=np.float64)
        spectrum = magnitude_spectrum(frame)
        peaks = self.find_peaks(spectrum, sample_rate, frame.size)
        if not peaks:
            return []
        return filter_harmonics(peaks, self.harmonic_tolerance)

    def estimate(
        self, frame: np.ndarray, sample_rate: int
    ) -> List[Tuple[float, Optional[float]]]:
        """Frame-scanner hook: one (frequency, amplitude) pair per fundamental."""
        return [(p.frequency, p.amplitude) for p in self.detect(frame, sample_rate)]

"""Analysis layer - Frame-level pitch estimation.

This layer turns sample buffers into raw pitch events:
- Monophonic autocorrelation estimator
- Polyphonic spectral-peak estimator with harmonic filtering
- Frame scanner (static buffers) and streaming scanner (live input)
"""

from .autocorrelation import AutocorrelationDetector
from .spectral import (
    SpectralPeak,
    SpectralPeakDetector,
    filter_harmonics,
    is_harmonic,
    magnitude_spectrum,
)
from .scanner import (
    AnalysisCancelled,
    Frame,
    FrameScanner,
    PitchEstimator,
    count_frames,
    validate_buffer,
)
from .stream import NoteChange, NoteChangeTracker, StreamingScanner

__all__ = [
    "AutocorrelationDetector",
    "SpectralPeak",
    "SpectralPeakDetector",
    "filter_harmonics",
    "is_harmonic",
    "magnitude_spectrum",
    "AnalysisCancelled",
    "Frame",
    "FrameScanner",
    "PitchEstimator",
    "count_frames",
    "validate_buffer",
    "NoteChange",
    "NoteChangeTracker",
    "StreamingScanner",
]

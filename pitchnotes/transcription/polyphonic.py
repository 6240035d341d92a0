"""Polyphonic transcription using spectral peaks with harmonic filtering."""

from ..analysis import FrameScanner, SpectralPeakDetector
from .base import Transcriber


class PolyphonicTranscriber(Transcriber):
    """
    Transcribes simultaneous notes (chords).

    Every fundamental found in a frame becomes its own pitch event with the
    peak's spectral magnitude, which the quantizer turns into velocity.
    """

    def _build_scanner(self) -> FrameScanner:
        spectral = self.config.spectral
        self.detector = SpectralPeakDetector.from_config(spectral)
        return FrameScanner(
            self.detector,
            window_size=spectral.window_size,
            hop_size=spectral.hop_size,
            progress_every=self.config.progress_every,
        )

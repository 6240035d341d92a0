"""Monophonic transcription using the autocorrelation estimator."""

from ..analysis import AutocorrelationDetector, FrameScanner
from .base import Transcriber


class MonophonicTranscriber(Transcriber):
    """Transcribes a single melody line, one pitch per frame."""

    def _build_scanner(self) -> FrameScanner:
        mono = self.config.mono
        self.detector = AutocorrelationDetector.from_config(mono)
        return FrameScanner(
            self.detector,
            window_size=mono.window_size,
            hop_size=mono.hop_size,
            progress_every=self.config.progress_every,
        )

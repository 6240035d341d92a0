"""Base classes for transcription."""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional

from ..analysis import FrameScanner
from ..analysis.scanner import ProgressCallback
from ..config import AnalysisConfig
from ..core import NoteEvent, RawPitchEvent, SampleBuffer
from ..processing import NoteQuantizer


class Transcriber(ABC):
    """Frame scanner + pitch estimator + note quantizer."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize Transcriber.

        Args:
            config: Pipeline settings (defaults apply when omitted)
        """
        self.config = config or AnalysisConfig()
        self.scanner = self._build_scanner()
        self.quantizer = NoteQuantizer.from_config(self.config.quantize)

    @abstractmethod
    def _build_scanner(self) -> FrameScanner:
        """Create the frame scanner with this transcriber's estimator."""
        pass

    def detect(
        self,
        buffer: SampleBuffer,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Any = None,
    ) -> Iterator[RawPitchEvent]:
        """
        Lazily detect raw pitch events.

        Raises:
            ValueError: If the buffer cannot be analyzed
        """
        return self.scanner.scan(buffer, on_progress=on_progress, cancel=cancel)

    def transcribe(
        self,
        buffer: SampleBuffer,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Any = None,
    ) -> List[NoteEvent]:
        """
        Transcribe audio to note events.

        Args:
            buffer: Mono audio
            on_progress: Optional progress observer (fraction 0-1)
            cancel: Optional cancellation flag, checked between frames

        Returns:
            Note events in time order
        """
        events = self.detect(buffer, on_progress=on_progress, cancel=cancel)
        return self.quantizer.quantize(events)

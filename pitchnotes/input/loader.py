"""Audio loading into sample buffers."""

import numpy as np
import librosa
from pathlib import Path
from typing import Optional

from ..core import SampleBuffer


class AudioLoader:
    """Decodes audio files into mono sample buffers."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        target_sr: Optional[int] = None,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Resample to this rate; None keeps the file's native rate
            normalize: Peak-normalize to [-1, 1] if True
        """
        self.target_sr = target_sr
        self.normalize = normalize

    def load(self, path: str) -> SampleBuffer:
        """
        Load an audio file as a mono buffer.

        Args:
            path: Path to audio file

        Returns:
            SampleBuffer with the decoded samples

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        # librosa handles decoding, resampling and downmixing
        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)

        if self.normalize:
            audio = self._normalize(audio)

        return SampleBuffer.from_array(audio, int(sr))

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if audio.size else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

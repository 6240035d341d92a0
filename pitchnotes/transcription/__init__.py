"""Transcription layer - Sample buffer to note events.

This layer wires the analysis and processing layers together:
- Monophonic transcription (single melody line)
- Polyphonic transcription (multiple simultaneous notes)
"""

from .base import Transcriber
from .monophonic import MonophonicTranscriber
from .polyphonic import PolyphonicTranscriber

__all__ = [
    "Transcriber",
    "MonophonicTranscriber",
    "PolyphonicTranscriber",
]

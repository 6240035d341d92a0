"""pitchnotes - Audio pitch detection to timed note events.

Architecture Layers:
    1. core/          - Data model and frequency/note conversion
    2. input/         - Audio file decoding into sample buffers
    3. analysis/      - Frame-level pitch estimation (autocorrelation, spectral)
    4. processing/    - Note quantization
    5. transcription/ - End-to-end monophonic / polyphonic pipelines
    6. output/        - MIDI export, playback scheduling, preview rendering
"""

__version__ = "0.1.0"

# Core types
from .core import (
    SampleBuffer,
    RawPitchEvent,
    NoteEvent,
    hz_to_midi,
    midi_to_hz,
)

# Configuration
from .config import (
    AnalysisConfig,
    MonophonicConfig,
    SpectralConfig,
    QuantizeConfig,
    ExportConfig,
    load_config,
)

# Input layer
from .input import AudioLoader

# Analysis layer
from .analysis import (
    AutocorrelationDetector,
    SpectralPeakDetector,
    FrameScanner,
    StreamingScanner,
    NoteChangeTracker,
    AnalysisCancelled,
)

# Processing layer
from .processing import NoteQuantizer

# Transcription layer
from .transcription import MonophonicTranscriber, PolyphonicTranscriber

# Output layer
from .output import MIDIExporter, PlaybackScheduler, SineRenderer

__all__ = [
    # Core
    "SampleBuffer",
    "RawPitchEvent",
    "NoteEvent",
    "hz_to_midi",
    "midi_to_hz",
    # Config
    "AnalysisConfig",
    "MonophonicConfig",
    "SpectralConfig",
    "QuantizeConfig",
    "ExportConfig",
    "load_config",
    # Input
    "AudioLoader",
    # Analysis
    "AutocorrelationDetector",
    "SpectralPeakDetector",
    "FrameScanner",
    "StreamingScanner",
    "NoteChangeTracker",
    "AnalysisCancelled",
    # Processing
    "NoteQuantizer",
    # Transcription
    "MonophonicTranscriber",
    "PolyphonicTranscriber",
    # Output
    "MIDIExporter",
    "PlaybackScheduler",
    "SineRenderer",
]

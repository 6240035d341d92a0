"""Analysis configuration.

Every tunable of the pipeline lives in one of these dataclasses and is
passed explicitly to the component that needs it.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Union

from .core.constants import (
    DEFAULT_HOP_SIZE,
    DEFAULT_SPECTRAL_WINDOW_SIZE,
    DEFAULT_TEMPO,
    DEFAULT_TICKS_PER_BEAT,
    DEFAULT_VELOCITY,
    DEFAULT_WINDOW_SIZE,
)


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value}")


def _require_range(name: str, low: float, high: float) -> None:
    if not low < high:
        raise ValueError(f"{name}: lower bound {low} must be below upper bound {high}")


def _check_frames(window_size: int, hop_size: int) -> None:
    _require_positive("window_size", window_size)
    _require_positive("hop_size", hop_size)


@dataclass
class MonophonicConfig:
    """Autocorrelation estimator settings.

    Attributes:
        silence_threshold: Frame RMS below this is "no pitch" (default: 0.0005)
        correlation_threshold: Minimum lag correlation to accept (default: 0.9)
        min_frequency: Lowest kept pitch in Hz, exclusive (default: 50)
        max_frequency: Highest kept pitch in Hz, exclusive (default: 1000)
        window_size: Samples per analysis frame (default: 2048)
        hop_size: Samples between frames (default: 512)
    """

    silence_threshold: float = 0.0005
    correlation_threshold: float = 0.9
    min_frequency: float = 50.0
    max_frequency: float = 1000.0
    window_size: int = DEFAULT_WINDOW_SIZE
    hop_size: int = DEFAULT_HOP_SIZE

    def __post_init__(self):
        if self.silence_threshold < 0:
            raise ValueError(
                f"silence_threshold must be >= 0, got {self.silence_threshold}"
            )
        _require_range("frequency range", self.min_frequency, self.max_frequency)
        _check_frames(self.window_size, self.hop_size)


@dataclass
class SpectralConfig:
    """Spectral peak estimator settings.

    Attributes:
        peak_threshold: Minimum bin magnitude for a peak (default: 0.05)
        harmonic_tolerance: Allowed distance from an integer ratio (default: 0.1)
        min_frequency: Lowest kept peak in Hz, inclusive (default: 50)
        max_frequency: Highest kept peak in Hz, inclusive (default: 4000)
        max_peaks: Loudest peaks kept per frame (default: 10)
        window_size: Samples per analysis frame (default: 4096)
        hop_size: Samples between frames (default: 512)
    """

    peak_threshold: float = 0.05
    harmonic_tolerance: float = 0.1
    min_frequency: float = 50.0
    max_frequency: float = 4000.0
    max_peaks: int = 10
    window_size: int = DEFAULT_SPECTRAL_WINDOW_SIZE
    hop_size: int = DEFAULT_HOP_SIZE

    def __post_init__(self):
        if self.peak_threshold < 0:
            raise ValueError(f"peak_threshold must be >= 0, got {self.peak_threshold}")
        if not 0 < self.harmonic_tolerance < 0.5:
            raise ValueError(
                f"harmonic_tolerance must be in (0, 0.5), got {self.harmonic_tolerance}"
            )
        _require_range("frequency range", self.min_frequency, self.max_frequency)
        _require_positive("max_peaks", self.max_peaks)
        _check_frames(self.window_size, self.hop_size)


@dataclass
class QuantizeConfig:
    """Note grouping settings.

    The duration defaults match the MIDI export grid: at 120 BPM and 128
    ticks per beat, 0.03125s is 8 ticks and 0.25s is 64 ticks.

    Attributes:
        time_window: Events closer than this to a group's start join it (default: 0.02)
        default_duration: Duration of the last note (default: 0.2)
        min_duration: Shortest note duration (default: 0.03125)
        max_duration: Longest note duration (default: 0.25)
    """

    time_window: float = 0.02
    default_duration: float = 0.2
    min_duration: float = 0.03125
    max_duration: float = 0.25

    def __post_init__(self):
        _require_positive("time_window", self.time_window)
        _require_positive("default_duration", self.default_duration)
        _require_positive("min_duration", self.min_duration)
        if self.max_duration < self.min_duration:
            raise ValueError(
                f"max_duration ({self.max_duration}) must be >= "
                f"min_duration ({self.min_duration})"
            )


@dataclass
class ExportConfig:
    """MIDI file export settings."""

    tempo: float = DEFAULT_TEMPO
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT
    instrument_name: str = "Acoustic Grand Piano"
    default_velocity: int = DEFAULT_VELOCITY

    def __post_init__(self):
        _require_positive("tempo", self.tempo)
        _require_positive("ticks_per_beat", self.ticks_per_beat)
        if not 0 <= self.default_velocity <= 127:
            raise ValueError(
                f"default_velocity must be in 0-127, got {self.default_velocity}"
            )


# Sensitivity presets: lower thresholds pick up quieter material
SENSITIVITY_PRESETS: Dict[str, Dict[str, float]] = {
    "low": {"silence_threshold": 0.01, "peak_threshold": 0.1},
    "medium": {"silence_threshold": 0.0005, "peak_threshold": 0.05},
    "high": {"silence_threshold": 0.0002, "peak_threshold": 0.02},
    "ultra": {"silence_threshold": 0.0001, "peak_threshold": 0.01},
}


@dataclass
class AnalysisConfig:
    """Complete pipeline configuration."""

    mono: MonophonicConfig = field(default_factory=MonophonicConfig)
    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    quantize: QuantizeConfig = field(default_factory=QuantizeConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    progress_every: int = 50  # frames between progress callbacks

    def __post_init__(self):
        _require_positive("progress_every", self.progress_every)

    @classmethod
    def from_sensitivity(cls, name: str) -> "AnalysisConfig":
        """Build a config from a named sensitivity preset.

        Raises:
            ValueError: If the preset is unknown
        """
        key = name.lower()
        if key not in SENSITIVITY_PRESETS:
            raise ValueError(
                f"Unknown sensitivity: {name}. "
                f"Supported: {sorted(SENSITIVITY_PRESETS)}"
            )
        preset = SENSITIVITY_PRESETS[key]
        return cls(
            mono=MonophonicConfig(silence_threshold=preset["silence_threshold"]),
            spectral=SpectralConfig(peak_threshold=preset["peak_threshold"]),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        """Build a config from a nested dict; missing keys keep defaults.

        Raises:
            ValueError: On unknown sections or keys
        """
        sections = {
            "mono": MonophonicConfig,
            "spectral": SpectralConfig,
            "quantize": QuantizeConfig,
            "export": ExportConfig,
        }
        unknown = set(data) - set(sections) - {"progress_every"}
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        kwargs: Dict[str, Any] = {}
        for name, section_cls in sections.items():
            values = data.get(name) or {}
            allowed = {f.name for f in fields(section_cls)}
            bad = set(values) - allowed
            if bad:
                raise ValueError(f"Unknown keys in '{name}': {sorted(bad)}")
            kwargs[name] = section_cls(**values)
        if "progress_every" in data:
            kwargs["progress_every"] = int(data["progress_every"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> AnalysisConfig:
    """Load an AnalysisConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is invalid or holds unknown keys
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be an object, got {type(data).__name__}")
    return AnalysisConfig.from_dict(data)

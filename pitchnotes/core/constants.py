"""Global constants for pitchnotes."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Tuning reference
A4_FREQUENCY = 440.0
A4_MIDI = 69

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127

# Frame scanning defaults
DEFAULT_SR = 22050
DEFAULT_WINDOW_SIZE = 2048  # autocorrelation frame
DEFAULT_SPECTRAL_WINDOW_SIZE = 4096  # larger frame for finer frequency bins
DEFAULT_HOP_SIZE = 512

# Export defaults
DEFAULT_TEMPO = 120.0
DEFAULT_TICKS_PER_BEAT = 128
DEFAULT_VELOCITY = 80

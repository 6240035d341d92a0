"""Shared fixtures: synthetic test signals."""

import numpy as np
import pytest

from pitchnotes.core import SampleBuffer


def periodic_tone(period: int, duration: float, sr: int = 22050, amplitude: float = 0.5) -> np.ndarray:
    """Sine whose period is an exact whole number of samples.

    One period is computed and tiled, so the signal repeats bit-for-bit and
    the expected pitch is exactly ``sr / period``.
    """
    cycle = amplitude * np.sin(2 * np.pi * np.arange(period) / period)
    n_samples = int(duration * sr)
    reps = n_samples // period + 1
    return np.tile(cycle, reps)[:n_samples]


def bin_tones(bins, amplitudes, n_samples: int, n_fft: int = 4096) -> np.ndarray:
    """Sum of sines centred on DFT bins of an ``n_fft`` frame.

    Each tone completes a whole number of cycles per frame, so any window of
    ``n_fft`` samples shows no spectral leakage.
    """
    n = np.arange(n_samples)
    audio = np.zeros(n_samples)
    for k, amp in zip(bins, amplitudes):
        audio += amp * np.sin(2 * np.pi * k * n / n_fft)
    return audio


@pytest.fixture
def sample_rate():
    return 22050


@pytest.fixture
def tone_441(sample_rate):
    """One second of 441 Hz (period 50 samples at 22050 Hz)."""
    return SampleBuffer.from_array(periodic_tone(50, 1.0, sample_rate), sample_rate)


@pytest.fixture
def silence(sample_rate):
    return SampleBuffer.from_array(np.zeros(sample_rate), sample_rate)


@pytest.fixture
def c_major_chord(sample_rate):
    """One second of three non-harmonic bin-centred tones (C4, E4, G4 area)."""
    audio = bin_tones([49, 62, 73], [0.3, 0.3, 0.3], sample_rate)
    return SampleBuffer.from_array(audio, sample_rate)

"""Tests for frequency/note conversion and the data model."""

import numpy as np
import pytest

from pitchnotes.core import (
    NoteEvent,
    RawPitchEvent,
    SampleBuffer,
    clamp_midi,
    hz_to_midi,
    hz_to_midi_float,
    midi_to_hz,
    midi_to_note_name,
)


class TestConversion:
    """Tests for hz <-> MIDI conversion."""

    def test_hz_to_midi(self):
        assert hz_to_midi(440.0) == 69  # A4
        assert hz_to_midi(261.63) == 60  # C4 (approx)
        assert hz_to_midi(880.0) == 81  # A5

    def test_midi_to_hz(self):
        assert midi_to_hz(69) == 440.0
        assert abs(midi_to_hz(60) - 261.63) < 0.01
        assert midi_to_hz(81) == pytest.approx(880.0)

    def test_round_trip_full_range(self):
        for n in range(128):
            assert hz_to_midi(midi_to_hz(n)) == n

    def test_continuous_note_number(self):
        assert hz_to_midi_float(440.0) == pytest.approx(69.0)
        # A quarter tone above A4
        assert hz_to_midi_float(440.0 * 2 ** (0.5 / 12)) == pytest.approx(69.5)

    def test_half_step_rounds_up(self):
        assert hz_to_midi(440.0 * 2 ** (0.5 / 12) * 1.0000001) == 70

    def test_out_of_range_is_clamped(self):
        assert hz_to_midi(20000.0) == 127
        assert hz_to_midi(5.0) == 0

    def test_non_positive_frequency_raises(self):
        with pytest.raises(ValueError, match="positive"):
            hz_to_midi(0.0)
        with pytest.raises(ValueError):
            hz_to_midi(-440.0)

    def test_note_names(self):
        assert midi_to_note_name(60) == "C4"
        assert midi_to_note_name(69) == "A4"
        assert midi_to_note_name(61) == "C#4"
        assert midi_to_note_name(0) == "C-1"

    def test_clamp_midi(self):
        assert clamp_midi(-3) == 0
        assert clamp_midi(64) == 64
        assert clamp_midi(200) == 127


class TestSampleBuffer:
    """Tests for SampleBuffer."""

    def test_duration_and_length(self):
        buffer = SampleBuffer.from_array(np.zeros(11025), 22050)
        assert len(buffer) == 11025
        assert buffer.duration == pytest.approx(0.5)

    def test_samples_are_read_only(self):
        buffer = SampleBuffer.from_array(np.zeros(16), 8000)
        with pytest.raises(ValueError):
            buffer.samples[0] = 1.0

    def test_source_array_is_copied(self):
        source = np.zeros(16, dtype=np.float32)
        buffer = SampleBuffer.from_array(source, 8000)
        source[0] = 1.0
        assert buffer.samples[0] == 0.0
        assert buffer.samples.dtype == np.float64

    def test_accepts_lists(self):
        buffer = SampleBuffer.from_array([0.0, 0.5, -0.5], 3)
        assert len(buffer) == 3
        assert buffer.duration == pytest.approx(1.0)


class TestEvents:
    """Tests for RawPitchEvent and NoteEvent."""

    def test_raw_event_midi(self):
        assert RawPitchEvent(time=0.0, frequency=440.0).midi == 69
        assert RawPitchEvent(time=0.0, frequency=440.0).amplitude is None

    def test_note_event_properties(self):
        note = NoteEvent(
            time=0.5,
            pitches=(261.63, 329.63, 392.0),
            midi_notes=(60, 64, 67),
            duration=0.25,
            velocity=90,
        )
        assert note.offset == pytest.approx(0.75)
        assert note.is_chord
        assert note.note_names == ("C4", "E4", "G4")

    def test_note_events_are_hashable_values(self):
        a = NoteEvent(time=0.0, pitches=(440.0,), midi_notes=(69,), duration=0.2)
        b = NoteEvent(time=0.0, pitches=(440.0,), midi_notes=(69,), duration=0.2)
        assert a == b
        assert hash(a) == hash(b)

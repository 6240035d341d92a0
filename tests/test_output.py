"""Tests for MIDI export and playback."""

import threading

import numpy as np
import pretty_midi
import pytest
import soundfile as sf

from pitchnotes.config import ExportConfig
from pitchnotes.core import NoteEvent
from pitchnotes.output import (
    MIDIExporter,
    PlaybackScheduler,
    ScheduledNote,
    SineRenderer,
    TickChord,
    layout_ticks,
)


def _note(time, midi_notes, duration=0.1, velocity=None):
    pitches = tuple(pretty_midi.note_number_to_hz(n) for n in midi_notes)
    return NoteEvent(
        time=time,
        pitches=pitches,
        midi_notes=tuple(midi_notes),
        duration=duration,
        velocity=velocity,
    )


@pytest.fixture
def melody():
    return [
        _note(0.0, (60,), duration=0.0625),
        _note(0.5, (64, 67), duration=0.25, velocity=100),
        _note(0.6, (72,), duration=0.1),
    ]


class TestLayoutTicks:
    """Tests for the sequential tick layout."""

    def test_rests_and_pushback(self, melody):
        chords = layout_ticks(melody)  # 120 BPM, 128 ticks/beat: 256 ticks/s
        assert chords[0] == TickChord(0, 16, 0, (60,), 80)
        assert chords[1] == TickChord(128, 64, 112, (64, 67), 100)
        # Starts before the previous chord ends, so it follows it directly
        assert chords[2] == TickChord(192, 26, 0, (72,), 80)

    def test_chords_never_overlap(self, melody):
        chords = layout_ticks(melody)
        for a, b in zip(chords, chords[1:]):
            assert b.start_tick >= a.start_tick + a.duration_ticks

    def test_empty_notes_skipped(self):
        chords = layout_ticks([_note(0.0, ()), _note(0.1, (60,))])
        assert len(chords) == 1
        assert chords[0].rest_ticks == 26

    def test_zero_velocity_becomes_audible(self):
        (chord,) = layout_ticks([_note(0.0, (60,), velocity=0)])
        assert chord.velocity == 1

    def test_tempo_scales_ticks(self):
        (chord,) = layout_ticks([_note(1.0, (60,), duration=0.5)], tempo=60, ticks_per_beat=96)
        assert chord.start_tick == 96
        assert chord.duration_ticks == 48


class TestMIDIExporter:
    """Tests for MIDIExporter."""

    def test_pretty_midi_notes(self, melody):
        midi = MIDIExporter().notes_to_pretty_midi(melody)
        assert midi.resolution == 128
        (instrument,) = midi.instruments
        assert instrument.program == 0
        assert [n.pitch for n in instrument.notes] == [60, 64, 67, 72]
        assert instrument.notes[1].start == pytest.approx(0.5)
        assert instrument.notes[1].end == pytest.approx(0.75)
        assert instrument.notes[1].velocity == 100

    def test_export_round_trip(self, melody, tmp_path):
        output = tmp_path / "nested" / "out.mid"
        MIDIExporter().export(melody, str(output))
        assert output.exists()

        midi = pretty_midi.PrettyMIDI(str(output))
        notes = sorted(midi.instruments[0].notes, key=lambda n: (n.start, n.pitch))
        assert [n.pitch for n in notes] == [60, 64, 67, 72]
        assert notes[0].start == pytest.approx(0.0, abs=1e-3)
        assert notes[1].start == pytest.approx(0.5, abs=1e-3)
        assert notes[3].start == pytest.approx(0.75, abs=1e-3)
        _, tempi = midi.get_tempo_changes()
        assert tempi[0] == pytest.approx(120.0)

    def test_export_empty(self, tmp_path):
        output = tmp_path / "empty.mid"
        MIDIExporter().export([], str(output))
        midi = pretty_midi.PrettyMIDI(str(output))
        assert sum(len(i.notes) for i in midi.instruments) == 0

    def test_instrument_from_config(self):
        exporter = MIDIExporter.from_config(ExportConfig(instrument_name="Violin"))
        assert exporter.instrument_program == 40

    def test_unknown_instrument(self):
        with pytest.raises(ValueError):
            MIDIExporter(instrument_name="Not An Instrument")

    def test_seconds_per_tick(self):
        assert MIDIExporter().seconds_per_tick == pytest.approx(1 / 256)


class RecordingSynth:
    def __init__(self, on_play=None):
        self.calls = []
        self.on_play = on_play

    def play(self, midi, offset, duration, velocity):
        self.calls.append((midi, offset, duration, velocity))
        if self.on_play is not None:
            self.on_play()


class TestPlaybackScheduler:
    """Tests for PlaybackScheduler."""

    @pytest.fixture
    def notes(self):
        return [
            _note(0.0, (60, 64)),
            _note(0.1, (67,), velocity=90),
            _note(0.35, (72,)),
        ]

    def test_schedule(self, notes):
        scheduled = PlaybackScheduler().schedule(notes)
        assert scheduled[0] == ScheduledNote(offset=0.0, midi=60, velocity=80, duration=0.1)
        assert [s.midi for s in scheduled] == [60, 64, 67, 72]
        assert scheduled[2].velocity == 90

    def test_play_waits_between_chords(self, notes):
        synth = RecordingSynth()
        waits = []
        played = PlaybackScheduler().play(notes, synth, sleep=waits.append)
        assert played == 3
        assert len(synth.calls) == 4
        assert waits == pytest.approx([0.1, 0.25])

    def test_progress(self, notes):
        seen = []
        PlaybackScheduler().play(notes, RecordingSynth(), on_progress=seen.append, sleep=lambda s: None)
        assert seen[0] == 0.0
        assert seen[-1] == 1.0

    def test_stop(self, notes):
        stop = threading.Event()
        synth = RecordingSynth(on_play=stop.set)
        played = PlaybackScheduler().play(notes, synth, stop=stop, sleep=lambda s: None)
        assert played == 1

    def test_nothing_to_play(self):
        assert PlaybackScheduler().play([], RecordingSynth(), sleep=lambda s: None) == 0


class TestSineRenderer:
    """Tests for offline preview rendering."""

    def test_single_note(self):
        renderer = SineRenderer(sample_rate=8000)
        renderer.play(69, 0.0, 0.5, 127)
        audio = renderer.render()
        assert audio.dtype == np.float32
        assert audio.size == 4000
        assert np.abs(audio).max() <= 0.2 + 1e-6

        spectrum = np.abs(np.fft.rfft(audio))
        peak_hz = np.argmax(spectrum) * 8000 / audio.size
        assert abs(peak_hz - 440.0) < 5.0

    def test_velocity_scales_level(self):
        loud, quiet = SineRenderer(sample_rate=8000), SineRenderer(sample_rate=8000)
        loud.play(60, 0.0, 0.2, 127)
        quiet.play(60, 0.0, 0.2, 32)
        assert np.abs(quiet.render()).max() < np.abs(loud.render()).max()

    def test_clipping_is_avoided(self):
        renderer = SineRenderer(sample_rate=8000, gain=0.9)
        for midi in (60, 64, 67):
            renderer.play(midi, 0.0, 0.2, 127)
        assert np.abs(renderer.render()).max() <= 1.0 + 1e-6

    def test_scheduler_drives_renderer(self, tmp_path):
        renderer = SineRenderer(sample_rate=8000)
        notes = [_note(0.0, (60,)), _note(0.5, (64,))]
        PlaybackScheduler().play(notes, renderer, sleep=lambda s: None)
        output = tmp_path / "preview.wav"
        renderer.write(str(output))

        audio, sr = sf.read(str(output))
        assert sr == 8000
        assert len(audio) == 4800  # last note ends at 0.6s

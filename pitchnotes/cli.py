"""Command-line interface for pitchnotes.

Provides commands for:
- transcribe: Convert audio to MIDI (monophonic or polyphonic)
- detect: List raw per-frame pitch detections
- info: Show audio file information
"""

import dataclasses
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .config import AnalysisConfig, load_config

app = typer.Typer(
    name="pitchnotes",
    help="Detect pitches in audio and turn them into timed notes",
    rich_markup_mode="markdown",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_config(
    sensitivity: str,
    config_file: Optional[Path],
    window: int,
    hop: int,
    instrument: Optional[str],
) -> AnalysisConfig:
    """Resolve CLI options into an AnalysisConfig.

    Raises:
        ValueError: On unknown presets or invalid values
        FileNotFoundError: If the config file is missing
    """
    if config_file is not None:
        config = load_config(config_file)
    else:
        config = AnalysisConfig.from_sensitivity(sensitivity)

    overrides = {}
    if window > 0:
        overrides["window_size"] = window
    if hop > 0:
        overrides["hop_size"] = hop
    if overrides:
        config.mono = dataclasses.replace(config.mono, **overrides)
        config.spectral = dataclasses.replace(config.spectral, **overrides)
    if instrument:
        config.export = dataclasses.replace(config.export, instrument_name=instrument)
    return config


def _load_buffer(input_file: Path, sample_rate: int):
    from .input import AudioLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    loader = AudioLoader(target_sr=sample_rate if sample_rate > 0 else None)
    try:
        return loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _make_transcriber(polyphonic: bool, config: AnalysisConfig):
    from .transcription import MonophonicTranscriber, PolyphonicTranscriber

    if polyphonic:
        return PolyphonicTranscriber(config)
    return MonophonicTranscriber(config)


@app.command()
def transcribe(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output MIDI file path"
    ),
    polyphonic: bool = typer.Option(
        False, "-p", "--polyphonic", help="Use spectral detection (chords/multiple notes)"
    ),
    sensitivity: str = typer.Option(
        "medium", "--sensitivity", "-s", help="Detection sensitivity: low/medium/high/ultra"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="JSON config file (overrides --sensitivity)"
    ),
    window: int = typer.Option(0, "--window", help="Frame size in samples (0 = default)"),
    hop: int = typer.Option(0, "--hop", help="Hop size in samples (0 = default)"),
    sample_rate: int = typer.Option(
        0, "--sr", help="Resample to this rate before analysis (0 = native)"
    ),
    instrument: Optional[str] = typer.Option(
        None, "--instrument", "-i", help="General MIDI instrument name"
    ),
    preview: Optional[Path] = typer.Option(
        None, "--preview", help="Also render a sine-tone preview WAV"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Transcribe an audio file to MIDI.

    **Examples:**

        pitchnotes transcribe melody.wav

        pitchnotes transcribe chords.wav -p -o chords.mid --preview check.wav
    """
    from .output import MIDIExporter, PlaybackScheduler, SineRenderer

    _configure_logging(verbose)

    try:
        config = _build_config(sensitivity, config_file, window, hop, instrument)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = input_file.with_suffix(".mid")

    if not json_output:
        console.print(f"[blue]Loading audio:[/blue] {input_file}")
    buffer = _load_buffer(input_file, sample_rate)

    if verbose and not json_output:
        console.print(
            f"  Duration: {buffer.duration:.2f}s, Sample rate: {buffer.sample_rate}Hz"
        )

    try:
        exporter = MIDIExporter.from_config(config.export)
        transcriber = _make_transcriber(polyphonic, config)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    mode = "polyphonic" if polyphonic else "monophonic"
    started = time.time()
    try:
        if json_output:
            notes = transcriber.transcribe(buffer)
        else:
            console.print(f"[blue]Transcribing ({mode} mode)...[/blue]")
            with Progress(
                SpinnerColumn(),
                TextColumn("{task.description}"),
                BarColumn(),
                TimeElapsedColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("Scanning frames", total=1.0)
                notes = transcriber.transcribe(
                    buffer,
                    on_progress=lambda fraction: progress.update(task, completed=fraction),
                )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    elapsed = time.time() - started

    if not json_output:
        console.print(f"  Detected {len(notes)} notes")
        console.print(f"[blue]Exporting to:[/blue] {output}")
    exporter.export(notes, str(output))

    if preview is not None:
        renderer = SineRenderer(sample_rate=buffer.sample_rate)
        PlaybackScheduler(default_velocity=config.export.default_velocity).play(
            notes, renderer, sleep=lambda _: None
        )
        renderer.write(str(preview))
        if not json_output:
            console.print(f"[blue]Preview written to:[/blue] {preview}")

    if json_output:
        result = {
            "input": str(input_file),
            "output": str(output),
            "mode": mode,
            "notes_count": len(notes),
            "duration": buffer.duration,
            "sample_rate": buffer.sample_rate,
            "analysis_time": elapsed,
            "notes": [
                {
                    "time": n.time,
                    "midi": list(n.midi_notes),
                    "duration": n.duration,
                    "velocity": n.velocity,
                }
                for n in notes
            ],
        }
        if preview is not None:
            result["preview"] = str(preview)
        console.print_json(data=result)
        return

    console.print("[green]Transcription complete![/green]")
    if verbose and notes:
        _show_notes_table(notes[:30])
        if len(notes) > 30:
            console.print(f"   [dim]... and {len(notes) - 30} more notes[/dim]")


@app.command()
def detect(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    polyphonic: bool = typer.Option(
        False, "-p", "--polyphonic", help="Use spectral detection"
    ),
    sensitivity: str = typer.Option(
        "medium", "--sensitivity", "-s", help="Detection sensitivity: low/medium/high/ultra"
    ),
    limit: int = typer.Option(50, "--limit", "-n", help="Rows to show (0 = all)"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """List raw pitch detections, frame by frame."""
    _configure_logging(False)

    try:
        config = AnalysisConfig.from_sensitivity(sensitivity)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    buffer = _load_buffer(input_file, 0)
    try:
        events = list(_make_transcriber(polyphonic, config).detect(buffer))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(
            data={
                "events_count": len(events),
                "events": [
                    {
                        "time": e.time,
                        "hz": e.frequency,
                        "midi": e.midi,
                        "amplitude": e.amplitude,
                    }
                    for e in events
                ],
            }
        )
        return

    if not events:
        console.print("[yellow]No pitches detected![/yellow]")
        return

    shown = events if limit <= 0 else events[:limit]
    _show_events_table(shown)
    if len(events) > len(shown):
        console.print(f"   [dim]... and {len(events) - len(shown)} more[/dim]")

    freqs = [e.frequency for e in events]
    console.print(f"  Detected {len(events)} pitch events")
    console.print(f"  Range: {min(freqs):.1f}Hz - {max(freqs):.1f}Hz")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
):
    """Show information about an audio file."""
    from .analysis import count_frames

    buffer = _load_buffer(input_file, 0)
    config = AnalysisConfig()

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {buffer.duration:.2f} seconds")
    console.print(f"  Sample rate: {buffer.sample_rate} Hz")
    console.print(f"  Samples: {len(buffer):,}")

    for label, section in (("monophonic", config.mono), ("polyphonic", config.spectral)):
        n_frames = count_frames(len(buffer), section.window_size, section.hop_size)
        console.print(
            f"  Frames ({label}, window {section.window_size}, hop {section.hop_size}): "
            f"{n_frames:,}"
        )


def _show_notes_table(notes):
    """Display note events in a table."""
    table = Table(title="Detected Notes")
    table.add_column("Notes", style="cyan")
    table.add_column("Onset (s)", style="green")
    table.add_column("Duration (s)", style="yellow")
    table.add_column("Velocity", style="magenta")

    for note in notes:
        table.add_row(
            " ".join(note.note_names),
            f"{note.time:.3f}",
            f"{note.duration:.3f}",
            "-" if note.velocity is None else str(note.velocity),
        )

    console.print(table)


def _show_events_table(events):
    """Display raw pitch events in a table."""
    from .core import midi_to_note_name

    table = Table(title="Pitch Events")
    table.add_column("Time (s)", style="green")
    table.add_column("Hz", style="cyan")
    table.add_column("MIDI", style="yellow")
    table.add_column("Note", style="cyan")
    table.add_column("Velocity", style="magenta")

    for event in events:
        velocity = "-"
        if event.amplitude is not None:
            velocity = str(min(127, int(event.amplitude * 127 + 0.5)))
        table.add_row(
            f"{event.time:.3f}",
            f"{event.frequency:.1f}",
            str(event.midi),
            midi_to_note_name(event.midi),
            velocity,
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()

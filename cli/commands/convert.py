"""
Convert command - M8 song to Standard MIDI File.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from cli.log import setup_logging

console = Console()
app = typer.Typer()


@app.command()
def convert(
    source: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output .mid file path"),
    transpose: int = typer.Option(
        36, "--transpose", "-t", help="Semitones added to every note (M8 C-1 = MIDI 36)"
    ),
    max_note_length: Optional[float] = typer.Option(
        None, "--max-note-length", "-l", help="Maximum note length in quarter notes"
    ),
    tracks: str = typer.Option("1-8", "--tracks", help="Tracks to convert, e.g. 1-8 or 1,3,5"),
    start: int = typer.Option(0, "--start", "-s", help="Song row to start from"),
    split: bool = typer.Option(
        False, "--split", help="Also write one file per track that plays notes"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed progress"),
) -> None:
    """
    Convert an M8 song to a Standard MIDI File.

    Every selected track becomes a MIDI track on channel 1, at 24 ticks
    per quarter note.

    Examples:

        m8midi convert SONG.m8s -o song.mid

        m8midi convert SONG.m8s --tracks 1-4 --max-note-length 0.5

        m8midi convert SONG.m8s --split
    """
    from m8midi.converters.song_to_midi import (
        RenderConfig,
        parse_track_selection,
        song_to_midi,
        song_to_track_midis,
    )
    from m8midi.formats.m8.reader import M8SongReader
    from m8midi.utils.validation import M8MidiError

    setup_logging(verbose)

    if not source.exists():
        console.print(f"[red]Error: Source file not found: {source}[/red]")
        raise typer.Exit(1)

    try:
        config = RenderConfig(
            global_transpose=transpose,
            tracks=parse_track_selection(tracks),
            start_from=start,
        )
        if max_note_length is not None:
            config = config.with_max_note_length(max_note_length)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    output_path = output or source.with_suffix(".mid")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=not verbose,
    ) as progress:
        task = progress.add_task("Converting M8 song to MIDI...", total=None)

        try:
            song = M8SongReader.read(source)
            midi_data = song_to_midi(song, config)
            track_files = song_to_track_midis(song, config) if split else {}

            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "wb") as f:
                f.write(midi_data)

            for track, data in track_files.items():
                track_path = output_path.with_name(f"{output_path.stem}_track{track}.mid")
                with open(track_path, "wb") as f:
                    f.write(data)

            progress.update(task, description="Done!")

        except M8MidiError as e:
            console.print(f"[red]Error: {e}[/red]")
            if verbose:
                console.print_exception()
            raise typer.Exit(1)

    console.print(f"[green]Converted:[/green] {source} -> {output_path}")
    console.print(
        f"[dim]Song: {song.name or 'N/A'} (v{song.version}), "
        f"{len(config.tracks)} tracks, {len(midi_data)} bytes[/dim]"
    )
    if split:
        if track_files:
            names = ", ".join(str(t) for t in track_files)
            console.print(f"[dim]Per-track files written for tracks: {names}[/dim]")
        else:
            console.print("[yellow]No track plays any notes; no per-track files written[/yellow]")


if __name__ == "__main__":
    app()

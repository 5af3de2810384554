"""
Tracks command - per-track summary of the rendered MIDI.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.commands.info import load_song
from cli.display.tables import display_tracks_summary
from cli.log import setup_logging

console = Console()
app = typer.Typer()


@app.command()
def tracks(
    file: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    transpose: int = typer.Option(36, "--transpose", "-t", help="Global transpose"),
    start: int = typer.Option(0, "--start", "-s", help="Song row to start from"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show render details"),
) -> None:
    """
    Render all 8 tracks and show notes, events and length per track.

    Example:

        m8midi tracks SONG.m8s
    """
    from m8midi.converters.song_to_midi import RenderConfig, SequenceRenderer
    from m8midi.utils.validation import M8MidiError

    setup_logging(verbose)
    song = load_song(file, verbose)

    try:
        config = RenderConfig(global_transpose=transpose, start_from=start)
        timelines = SequenceRenderer(song, config).render()
    except (ValueError, M8MidiError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    rows = [song.track_length_rows(track - 1, start) for track in config.tracks]
    display_tracks_summary(timelines, list(config.tracks), rows)


if __name__ == "__main__":
    app()

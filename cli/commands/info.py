"""
Info command - display song information.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.display.tables import (
    display_grooves,
    display_instruments,
    display_mixer,
    display_song_info,
    display_usage,
)
from cli.log import setup_logging

console = Console()
app = typer.Typer()


def load_song(path: Path, verbose: bool = False):
    """
    Read a song for display, exiting with an error message on failure.

    Args:
        path: Path to .m8s file
        verbose: Print the traceback on failure

    Returns:
        Decoded Song
    """
    from m8midi.formats.m8.reader import M8SongReader
    from m8midi.utils.validation import M8MidiError

    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        return M8SongReader.read(path)
    except M8MidiError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def info(
    file: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    full: bool = typer.Option(
        False, "--full", "-f", help="Also show mixer, grooves and empty instrument slots"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show decode details"),
) -> None:
    """
    Display song information.

    Shows name, version, tempo, table usage and instruments.

    Examples:

        m8midi info SONG.m8s

        m8midi info SONG.m8s --full
    """
    setup_logging(verbose)
    song = load_song(file, verbose)

    display_song_info(song, str(file))
    display_usage(song)
    display_instruments(song, show_empty=full)

    if full:
        display_mixer(song)
        display_grooves(song)


if __name__ == "__main__":
    app()

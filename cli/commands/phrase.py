"""
Song, chain and phrase commands - M8 screen views of the song data.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from cli.commands.info import load_song

console = Console()
app = typer.Typer()


def _parse_index(text: str, limit: int, what: str) -> int:
    """Parse a hex index as shown on the M8 screen."""
    try:
        value = int(text, 16)
    except ValueError:
        console.print(f"[red]Error: Invalid {what} number: {text}[/red]")
        raise typer.Exit(1)

    if not 0 <= value < limit:
        console.print(f"[red]Error: {what.capitalize()} must be 00-{limit - 1:02X}, got {text}[/red]")
        raise typer.Exit(1)

    return value


@app.command()
def song(
    file: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    start: str = typer.Option("00", "--from", "-r", help="First row to show (hex)"),
) -> None:
    """
    Show 16 rows of the song grid.

    Examples:

        m8midi song SONG.m8s

        m8midi song SONG.m8s --from 10
    """
    from m8midi.models.song import N_SONG_ROWS

    data = load_song(file)
    row = _parse_index(start, N_SONG_ROWS, "row")

    console.print(
        Panel(data.song.print_screen(row).rstrip(), title=f"[bold]SONG[/bold] {data.name}",
              border_style="blue", expand=False)
    )


@app.command()
def chain(
    file: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    number: str = typer.Argument(..., help="Chain number (hex, as shown on the M8)"),
) -> None:
    """
    Show a chain.

    Example:

        m8midi chain SONG.m8s 0A
    """
    from m8midi.models.song import N_CHAINS

    data = load_song(file)
    index = _parse_index(number, N_CHAINS, "chain")
    selected = data.chains[index]

    console.print(
        Panel(selected.print_screen().rstrip(), title=f"[bold]CHAIN {index:02X}[/bold]",
              border_style="cyan", expand=False)
    )
    if selected.is_empty:
        console.print(f"[dim]Chain {index:02X} is empty[/dim]")


@app.command()
def phrase(
    file: Path = typer.Argument(..., help="M8 song file (.m8s)"),
    number: str = typer.Argument(..., help="Phrase number (hex, as shown on the M8)"),
) -> None:
    """
    Show a phrase with notes, velocities, instruments and FX.

    Example:

        m8midi phrase SONG.m8s 1F
    """
    from m8midi.models.song import N_PHRASES

    data = load_song(file)
    index = _parse_index(number, N_PHRASES, "phrase")
    selected = data.phrases[index]

    console.print(
        Panel(selected.print_screen().rstrip(), title=f"[bold]PHRASE {index:02X}[/bold]",
              border_style="red", expand=False)
    )
    if selected.is_empty:
        console.print(f"[dim]Phrase {index:02X} is empty[/dim]")
    else:
        console.print(f"[dim]{selected.note_count} notes[/dim]")


if __name__ == "__main__":
    app()

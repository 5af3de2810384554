"""
m8midi - Convert Dirtywave M8 song files to Standard MIDI Files.

A CLI tool for converting and inspecting M8 tracker songs.
"""

import typer
from rich.console import Console

from cli.commands.info import info
from cli.commands.convert import convert
from cli.commands.tracks import tracks
from cli.commands.phrase import song, chain, phrase
from m8midi import __version__

console = Console()

# Main app
app = typer.Typer(
    name="m8midi",
    help="Convert Dirtywave M8 song files to Standard MIDI Files.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Add commands directly
app.command(name="convert")(convert)
app.command(name="info")(info)
app.command(name="tracks")(tracks)
app.command(name="song")(song)
app.command(name="chain")(chain)
app.command(name="phrase")(phrase)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]m8midi[/bold] version {__version__}")
    console.print("[dim]Dirtywave M8 song to Standard MIDI File converter[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
) -> None:
    """
    m8midi - Convert Dirtywave M8 songs to MIDI.

    Reads [cyan]M8[/cyan] song files (.m8s) and writes Standard MIDI Files (.mid).

    [bold]Quick Start:[/bold]

        m8midi convert SONG.m8s           # Write SONG.mid
        m8midi convert SONG.m8s --split   # Also one file per track

    [bold]Inspection Commands:[/bold]

        m8midi info SONG.m8s          # Song overview and instruments
        m8midi tracks SONG.m8s        # Rendered notes per track
        m8midi song SONG.m8s          # Song grid
        m8midi chain SONG.m8s 00      # Chain contents
        m8midi phrase SONG.m8s 00     # Phrase contents

    Use --help with any command for more details.
    """
    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()

"""
Rich table displays for song information.
"""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from m8midi.models.instrument import NoInstrument, instrument_name, instrument_number
from m8midi.models.song import N_CHAINS, N_PHRASES, N_TRACKS, Song
from m8midi.models.timeline import TrackTimeline
from cli.display.formatters import density_bar, format_kind, format_tempo, format_ticks, value_bar

console = Console()


def display_song_info(song: Song, filepath: str = "") -> None:
    """Display the song overview panel."""
    content = f"""[bold]File:[/bold] {filepath or "N/A"}
[bold]Name:[/bold] {song.name or "N/A"}
[bold]Version:[/bold] {song.version}
[bold]Directory:[/bold] {song.directory or "/"}
[bold]Tempo:[/bold] {format_tempo(song.tempo)}
[bold]Transpose:[/bold] {song.transpose:+d}
[bold]Key:[/bold] {song.key}
[bold]Quantize:[/bold] {song.quantize}"""

    console.print(
        Panel(content, title="[bold blue]M8 Song Info[/bold blue]", border_style="blue", expand=False)
    )


def display_usage(song: Song) -> None:
    """Display how much of the chain, phrase and instrument tables is in use."""
    table = Table(title="Usage", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Table", style="cyan", width=12)
    table.add_column("Used", width=40)

    used_instruments = sum(1 for i in song.instruments if not isinstance(i, NoInstrument))

    table.add_row("Chains", density_bar(len(song.used_chains()), N_CHAINS))
    table.add_row("Phrases", density_bar(len(song.used_phrases()), N_PHRASES))
    table.add_row("Instruments", density_bar(used_instruments, len(song.instruments)))

    console.print(table)


def display_instruments(song: Song, show_empty: bool = False) -> None:
    """Display the instrument slots."""
    table = Table(
        title="Instruments", box=box.ROUNDED, show_header=True, header_style="bold magenta"
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Kind", width=12)
    table.add_column("Name", style="cyan", width=14)
    table.add_column("Volume", width=24)

    for inst in song.instruments:
        if isinstance(inst, NoInstrument) and not show_empty:
            continue

        params = getattr(inst, "synth_params", None)
        volume = value_bar(params.volume) if params else "[dim]-[/dim]"
        table.add_row(
            f"{instrument_number(inst):02X}",
            format_kind(inst.kind),
            instrument_name(inst),
            volume,
        )

    console.print(table)


def display_mixer(song: Song) -> None:
    """Display mixer levels."""
    mixer = song.mixer_settings

    table = Table(title="Mixer", box=box.SIMPLE, show_header=False)
    table.add_column("Channel", style="cyan", width=12)
    table.add_column("Level", width=24)

    table.add_row("Master", value_bar(mixer.master_volume))
    for i, volume in enumerate(mixer.track_volume[:N_TRACKS]):
        table.add_row(f"Track {i + 1}", value_bar(volume))
    table.add_row("Chorus", value_bar(mixer.chorus_volume))
    table.add_row("Delay", value_bar(mixer.delay_volume))
    table.add_row("Reverb", value_bar(mixer.reverb_volume))

    console.print(table)


def display_grooves(song: Song) -> None:
    """Display grooves that differ from the default 6/6 groove."""
    table = Table(title="Grooves", box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=4)
    table.add_column("Steps (ticks)", width=60)

    for groove in song.grooves:
        steps = groove.active_steps()
        if groove.number and steps == [6, 6]:
            continue
        table.add_row(f"{groove.number:02X}", " ".join(str(s) for s in steps))

    console.print(table)


def display_tracks_summary(
    timelines: List[TrackTimeline], track_numbers: List[int], rows: List[int]
) -> None:
    """
    Display a summary of rendered track timelines.

    Args:
        timelines: Rendered timelines, in the order of track_numbers
        track_numbers: 1-based track numbers
        rows: Song grid rows each track plays
    """
    table = Table(
        title="Rendered Tracks", box=box.ROUNDED, show_header=True, header_style="bold magenta"
    )
    table.add_column("Track", style="cyan", width=8)
    table.add_column("Rows", justify="right", width=5)
    table.add_column("Notes", justify="right", width=7)
    table.add_column("Events", justify="right", width=7)
    table.add_column("Length", width=28)

    for number, timeline, row_count in zip(track_numbers, timelines, rows):
        notes = timeline.note_count
        notes_str = str(notes) if notes else "[dim]0[/dim]"
        table.add_row(
            str(number),
            str(row_count),
            notes_str,
            str(len(timeline.events)),
            format_ticks(timeline.total_ticks),
        )

    console.print(table)

"""
Display formatting utilities for CLI output.

Provides bar graphics and value formatting for M8 song data.
"""

from m8midi.models.instrument import InstrumentKind


def value_bar(
    value: int,
    max_value: int = 255,
    width: int = 10,
    filled_char: str = "█",
    empty_char: str = "░",
) -> str:
    """
    Create a text-based bar graphic with value and percentage.

    Args:
        value: Current value
        max_value: Maximum value (default 255 for M8 parameters)
        width: Bar width in characters
        filled_char: Character for filled portion
        empty_char: Character for empty portion

    Returns:
        Formatted string like "E0 [████████░░]  87%"
    """
    if max_value <= 0:
        max_value = 1

    clamped = max(0, min(value, max_value))

    fill_count = int((clamped / max_value) * width)
    empty_count = width - fill_count

    bar = filled_char * fill_count + empty_char * empty_count
    percent = int((clamped / max_value) * 100)

    return f"{value:02X} [{bar}] {percent:3d}%"


def density_bar(
    used: int,
    total: int,
    width: int = 20,
    filled_char: str = "█",
    empty_char: str = "░",
) -> str:
    """
    Create a usage bar with percentage.

    Returns:
        Formatted string like "[████████░░░░░░░░░░░░]  40.0% (102/255)"
    """
    if total <= 0:
        return f"[{empty_char * width}]   0.0% (0/0)"

    percent = (used / total) * 100
    fill_count = int((used / total) * width)
    empty_count = width - fill_count

    bar = filled_char * fill_count + empty_char * empty_count

    return f"[{bar}] {percent:5.1f}% ({used}/{total})"


KIND_STYLES = {
    InstrumentKind.WAVSYNTH: "cyan",
    InstrumentKind.MACROSYNTH: "magenta",
    InstrumentKind.SAMPLER: "green",
    InstrumentKind.MIDIOUT: "yellow",
    InstrumentKind.FMSYNTH: "blue",
    InstrumentKind.NONE: "dim",
}


def format_kind(kind: InstrumentKind) -> str:
    """Format an instrument kind with Rich markup, e.g. "[green]SAMPLER[/green]"."""
    style = KIND_STYLES.get(kind, "white")
    return f"[{style}]{kind.name}[/{style}]"


def format_ticks(ticks: int, ticks_per_quarter: int = 24) -> str:
    """
    Format a tick count with its length in 4/4 bars and beats.

    Returns:
        "192 (2 bars)" or "216 (2 bars 1.00 beats)"
    """
    quarters = ticks / ticks_per_quarter
    bars, beats = divmod(quarters, 4)
    if beats:
        return f"{ticks} ({int(bars)} bars {beats:.2f} beats)"
    return f"{ticks} ({int(bars)} bars)"


def format_tempo(tempo: float) -> str:
    """Format tempo as "120.00 BPM"."""
    return f"{tempo:.2f} BPM"

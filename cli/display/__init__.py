"""
CLI display modules.
"""

from cli.display.tables import (
    display_song_info,
    display_usage,
    display_instruments,
    display_mixer,
    display_grooves,
    display_tracks_summary,
)

__all__ = [
    "display_song_info",
    "display_usage",
    "display_instruments",
    "display_mixer",
    "display_grooves",
    "display_tracks_summary",
]

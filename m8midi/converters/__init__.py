"""
Song to MIDI conversion.

Example:
    from m8midi.converters import RenderConfig, song_to_midi

    config = RenderConfig(global_transpose=24).with_max_note_length(1.0)
    data = song_to_midi(song, config)
"""

from m8midi.converters.song_to_midi import (
    TICKS_PER_QUARTER_NOTE,
    RenderConfig,
    SequenceRenderer,
    parse_track_selection,
    render_song,
    song_to_midi,
    song_to_track_midis,
)

__all__ = [
    "TICKS_PER_QUARTER_NOTE",
    "RenderConfig",
    "SequenceRenderer",
    "parse_track_selection",
    "render_song",
    "song_to_midi",
    "song_to_track_midis",
]

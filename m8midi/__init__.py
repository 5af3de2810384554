"""
m8midi - Convert Dirtywave M8 song files to Standard MIDI Files.

This library provides tools to:
- Decode M8 song files (.m8s) into a structured Song model
- Replay the song's tracks, chains, phrases and grooves as MIDI notes
- Write the result as a Standard MIDI File (.mid)

Example usage:
    from m8midi import M8SongReader, RenderConfig, song_to_midi

    song = M8SongReader.read("SONG.m8s")
    data = song_to_midi(song, RenderConfig(global_transpose=36))

    with open("song.mid", "wb") as f:
        f.write(data)
"""

__version__ = "0.2.0"
__author__ = "m8midi Contributors"

from m8midi.formats.m8.reader import M8SongReader
from m8midi.formats.m8.decoder import SongDecoder, decode_song
from m8midi.formats.midi.writer import MidiFileFormat, MidiHeader, MidiWriter, encode_midi
from m8midi.converters.song_to_midi import (
    RenderConfig,
    SequenceRenderer,
    render_song,
    song_to_midi,
    song_to_track_midis,
)
from m8midi.models.song import Song
from m8midi.models.timeline import TrackTimeline
from m8midi.utils.validation import M8MidiError, DecodeError, RenderError, EncodeError

__all__ = [
    "M8SongReader",
    "SongDecoder",
    "decode_song",
    "MidiFileFormat",
    "MidiHeader",
    "MidiWriter",
    "encode_midi",
    "RenderConfig",
    "SequenceRenderer",
    "render_song",
    "song_to_midi",
    "song_to_track_midis",
    "Song",
    "TrackTimeline",
    "M8MidiError",
    "DecodeError",
    "RenderError",
    "EncodeError",
]

"""Format handlers for M8 songs and Standard MIDI Files."""

from m8midi.formats.m8 import M8SongReader, SongDecoder
from m8midi.formats.midi import MidiWriter

__all__ = ["M8SongReader", "SongDecoder", "MidiWriter"]

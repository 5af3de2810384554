"""Standard MIDI File handlers."""

from m8midi.formats.midi.writer import MidiFileFormat, MidiHeader, MidiWriter, encode_midi

__all__ = ["MidiFileFormat", "MidiHeader", "MidiWriter", "encode_midi"]

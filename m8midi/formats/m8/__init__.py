"""M8 song format handlers."""

from m8midi.formats.m8.reader import M8SongReader
from m8midi.formats.m8.decoder import M8Offsets, SongDecoder, decode_song

__all__ = ["M8SongReader", "M8Offsets", "SongDecoder", "decode_song"]

"""Utility functions for m8midi."""

from m8midi.utils.byte_cursor import ByteCursor
from m8midi.utils.vlq import encode_vlq, decode_vlq
from m8midi.utils.validation import (
    M8MidiError,
    DecodeError,
    RenderError,
    EncodeError,
)

__all__ = [
    "ByteCursor",
    "encode_vlq",
    "decode_vlq",
    "M8MidiError",
    "DecodeError",
    "RenderError",
    "EncodeError",
]

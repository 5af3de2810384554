"""
Error types and range validation for M8 song conversion.

Every stage of the pipeline fails with a subclass of M8MidiError:

    DecodeError  - the song buffer cannot be decoded
    RenderError  - the decoded song references tables out of range
    EncodeError  - the MIDI stream cannot be represented
"""

from typing import Optional


class M8MidiError(Exception):
    """Base class for all conversion errors."""

    pass


class DecodeError(M8MidiError):
    """
    Raised when an M8 song buffer cannot be decoded.

    Attributes:
        offset: Absolute buffer offset where decoding failed, if known
    """

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at offset 0x{offset:05X})"
        super().__init__(message)
        self.offset = offset


class TooShortError(DecodeError):
    """Buffer is smaller than the minimum size for its version."""

    pass


class ReadPastEndError(DecodeError):
    """A read would run past the end of the buffer."""

    pass


class InvalidUtf8Error(DecodeError):
    """A text field is not valid UTF-8 up to its terminator."""

    pass


class UnknownInstrumentKindError(DecodeError):
    """An instrument slot starts with an unrecognised kind byte."""

    pass


class RenderError(M8MidiError):
    """Raised when a song references chains, phrases or grooves out of range."""

    pass


class EncodeError(M8MidiError):
    """Raised when events cannot be serialized as a Standard MIDI File."""

    pass


def validate_table_index(index: int, size: int, name: str = "index") -> int:
    """
    Validate an index into a fixed-size song table.

    Args:
        index: The index to check
        size: Number of entries in the table
        name: Name of the table for error messages

    Returns:
        The index, unchanged

    Raises:
        RenderError: If index is outside 0..size-1
    """
    if not 0 <= index < size:
        raise RenderError(f"{name} {index} out of range (0-{size - 1})")
    return index


def validate_ticks_per_quarter_note(ticks: int) -> int:
    """
    Validate the MIDI header time division.

    Values with bit 15 set select SMPTE timing, which is not supported.

    Raises:
        EncodeError: If ticks is not in 1..0x7FFF
    """
    if not 0 < ticks <= 0x7FFF:
        raise EncodeError(f"Ticks per quarter note must be 1-{0x7FFF}, got {ticks}")
    return ticks


def validate_track_number(track: int) -> int:
    """
    Validate a 1-based M8 track number.

    Raises:
        ValueError: If track is not in 1..8
    """
    if not 1 <= track <= 8:
        raise ValueError(f"Track number must be 1-8, got {track}")
    return track

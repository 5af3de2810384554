"""
Sequential byte reader over an in-memory buffer.

The M8 song format is a fixed layout of little-endian fields, read
mostly front to back with a few absolute seeks. ByteCursor keeps the
read position and turns any read past the end of the buffer into a
DecodeError instead of returning short data.
"""

import struct
from typing import Union

from m8midi.utils.validation import InvalidUtf8Error, ReadPastEndError


class ByteCursor:
    """
    Read cursor over a byte buffer.

    Example:
        cursor = ByteCursor(data)
        tempo = cursor.read_f32()
        name = cursor.read_string(12, "name")
    """

    def __init__(self, data: Union[bytes, bytearray], position: int = 0):
        self.data = bytes(data)
        self.position = position

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        """Number of bytes left after the current position."""
        return max(0, len(self.data) - self.position)

    def _take(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {n}")
        end = self.position + n
        if end > len(self.data):
            raise ReadPastEndError(
                f"Read of {n} bytes runs past end of {len(self.data)}-byte buffer",
                self.position,
            )
        chunk = self.data[self.position : end]
        self.position = end
        return chunk

    def read(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def read_i8(self) -> int:
        """Read one signed byte."""
        return struct.unpack("<b", self._take(1))[0]

    def read_bool(self) -> bool:
        """Read one byte as a flag (non-zero is True)."""
        return self.read() != 0

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes."""
        return self._take(n)

    def read_u16(self) -> int:
        """Read a little-endian unsigned 16-bit word."""
        return struct.unpack("<H", self._take(2))[0]

    def read_f32(self) -> float:
        """Read a little-endian IEEE 754 single-precision float."""
        return struct.unpack("<f", self._take(4))[0]

    def read_string(self, n: int, field: str = "string") -> str:
        """
        Read a fixed-width text field.

        The field ends at the first 0x00 or 0xFF byte, or fills all n
        bytes if neither occurs. All n bytes are consumed either way.

        Args:
            n: Width of the field in bytes
            field: Field name for error messages

        Returns:
            Decoded text

        Raises:
            InvalidUtf8Error: If the text before the terminator is not UTF-8
        """
        start = self.position
        raw = self._take(n)

        end = n
        for i, b in enumerate(raw):
            if b in (0x00, 0xFF):
                end = i
                break

        try:
            return raw[:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(f"Invalid UTF-8 in {field}: {e.reason}", start) from e

    def skip(self, n: int) -> None:
        """Advance the position by n bytes."""
        self._take(n)

    def seek(self, position: int) -> None:
        """
        Move to an absolute position.

        Raises:
            ReadPastEndError: If position lies beyond the end of the buffer
        """
        if not 0 <= position <= len(self.data):
            raise ReadPastEndError(
                f"Seek beyond end of {len(self.data)}-byte buffer", position
            )
        self.position = position

    def tell(self) -> int:
        """Return the current absolute position."""
        return self.position

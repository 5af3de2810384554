"""
MIDI variable-length quantity (VLQ) encoding/decoding.

Standard MIDI Files store delta-times as big-endian groups of 7 bits.
Every byte except the last has bit 7 set as a continuation flag.

Encoding scheme:
- Split the value into 7-bit groups, most significant first
- Set bit 7 on every group except the final one
- At most 4 bytes, so the largest value is 0x0FFFFFFF

Example:
    0x80    -> [0x81, 0x00]
    0x4000  -> [0x81, 0x80, 0x00]
"""

from typing import List, Tuple, Union

from m8midi.utils.validation import EncodeError

MAX_VLQ_VALUE = 0x0FFFFFFF
MAX_VLQ_BYTES = 4


def encode_vlq(value: int) -> bytes:
    """
    Encode an integer as a MIDI variable-length quantity.

    Args:
        value: Value in range 0..0x0FFFFFFF

    Returns:
        1 to 4 encoded bytes

    Raises:
        EncodeError: If value is negative or above 0x0FFFFFFF

    Example:
        >>> encode_vlq(0x2000)
        b'\\xc0\\x00'
    """
    if value < 0 or value > MAX_VLQ_VALUE:
        raise EncodeError(
            f"Cannot encode {value} as a variable-length quantity (max 0x{MAX_VLQ_VALUE:08X})"
        )

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7

    return bytes(reversed(groups))


def decode_vlq(data: Union[bytes, List[int]], offset: int = 0) -> Tuple[int, int]:
    """
    Decode a MIDI variable-length quantity.

    Args:
        data: Buffer containing the encoded value
        offset: Position of the first encoded byte

    Returns:
        Tuple of (value, number of bytes consumed)

    Raises:
        ValueError: If the quantity is truncated or longer than 4 bytes
    """
    value = 0
    for i in range(MAX_VLQ_BYTES):
        if offset + i >= len(data):
            raise ValueError(f"Truncated variable-length quantity at offset {offset}")
        byte = data[offset + i]
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, i + 1

    raise ValueError(f"Variable-length quantity at offset {offset} exceeds {MAX_VLQ_BYTES} bytes")

"""
Standard MIDI File writer.

Serializes rendered track timelines to SMF bytes.

File Structure:
    MThd chunk:
        4   "MThd"
        4   Header length (always 6, big-endian)
        2   Format (0 = single track, 1 = simultaneous, 2 = independent)
        2   Number of tracks
        2   Ticks per quarter note (bit 15 clear)
    MTrk chunk (one per track):
        4   "MTrk"
        4   Body length (big-endian)
        ... 00 FF 03 <len> <name>      (if the track has a name)
        ... <delta VLQ> <event bytes>  (per event)
        ... <delta VLQ> FF 2F 00       (end of track)

The final delta is total_ticks - last_event_tick + 1, so it is always
positive even when the last event lands on the end of the track.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import List, Union

from m8midi.models.timeline import TrackTimeline
from m8midi.utils.validation import EncodeError, validate_ticks_per_quarter_note
from m8midi.utils.vlq import encode_vlq

MAX_TRACK_NAME_LENGTH = 127

META_TRACK_NAME = 0x03
META_END_OF_TRACK = bytes([0xFF, 0x2F, 0x00])


class MidiFileFormat(IntEnum):
    """SMF format codes."""

    SINGLE_TRACK = 0
    SIMULTANEOUS_TRACKS = 1
    INDEPENDENT_TRACKS = 2


@dataclass(frozen=True)
class MidiHeader:
    """MThd chunk contents (the track count comes from the track list)."""

    format: MidiFileFormat = MidiFileFormat.SIMULTANEOUS_TRACKS
    ticks_per_quarter_note: int = 24


class MidiWriter:
    """
    Writer for Standard MIDI Files.

    Example:
        header = MidiHeader(MidiFileFormat.SIMULTANEOUS_TRACKS, 24)
        data = MidiWriter(header).to_bytes(timelines)
    """

    HEADER_TAG = b"MThd"
    TRACK_TAG = b"MTrk"
    HEADER_LENGTH = 6

    def __init__(self, header: MidiHeader):
        self.header = header

    @classmethod
    def write(
        cls, header: MidiHeader, tracks: List[TrackTimeline], filepath: Union[str, Path]
    ) -> None:
        """
        Write tracks to a .mid file.

        Args:
            header: File format and time division
            tracks: Track timelines to write
            filepath: Output file path
        """
        data = cls(header).to_bytes(tracks)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            f.write(data)

    def to_bytes(self, tracks: List[TrackTimeline]) -> bytes:
        """
        Serialize a complete MIDI file.

        Args:
            tracks: Track timelines, in file order

        Returns:
            SMF file data

        Raises:
            EncodeError: If the header or any track cannot be represented
        """
        division = validate_ticks_per_quarter_note(self.header.ticks_per_quarter_note)
        if len(tracks) > 0xFFFF:
            raise EncodeError(f"Too many tracks for a MIDI file: {len(tracks)}")

        buffer = bytearray()
        buffer += self.HEADER_TAG
        buffer += struct.pack(
            ">IHHH", self.HEADER_LENGTH, int(self.header.format), len(tracks), division
        )

        for track in tracks:
            body = self._encode_track_body(track)
            buffer += self.TRACK_TAG
            buffer += struct.pack(">I", len(body))
            buffer += body

        return bytes(buffer)

    def _encode_track_body(self, track: TrackTimeline) -> bytes:
        """Encode the events of one MTrk chunk."""
        body = bytearray()

        if track.name is not None:
            name = track.name.encode("utf-8")[:MAX_TRACK_NAME_LENGTH]
            body += bytes([0x00, 0xFF, META_TRACK_NAME, len(name)])
            body += name

        last_tick = 0
        for tick, event in track.events:
            if tick < last_tick:
                raise EncodeError(
                    f"Events out of order in {track.name or 'track'}: "
                    f"tick {tick} after tick {last_tick}"
                )
            body += encode_vlq(tick - last_tick)
            body += event.to_bytes()
            last_tick = tick

        end_delta = track.total_ticks - last_tick + 1
        if end_delta < 1:
            raise EncodeError(
                f"Track length {track.total_ticks} is before last event at tick {last_tick}"
            )
        body += encode_vlq(end_delta)
        body += META_END_OF_TRACK

        return bytes(body)


def encode_midi(header: MidiHeader, tracks: List[TrackTimeline]) -> bytes:
    """
    Convenience function to serialize tracks as a MIDI file.

    Args:
        header: File format and time division
        tracks: Track timelines

    Returns:
        SMF file data
    """
    return MidiWriter(header).to_bytes(tracks)

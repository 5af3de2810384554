"""
MIDI event and track timeline data models.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple

import mido


class EventType(IntEnum):
    """MIDI channel voice event types."""

    NOTE_OFF = 0x80
    NOTE_ON = 0x90


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI channel voice event.

    Attributes:
        event_type: Type of MIDI event
        channel: MIDI channel (0-15)
        note: Note number
        velocity: Note velocity
    """

    event_type: EventType
    channel: int = 0
    note: int = 0
    velocity: int = 0

    @property
    def is_note_on(self) -> bool:
        """Check if this is a note-on event with velocity > 0."""
        return self.event_type == EventType.NOTE_ON and self.velocity > 0

    @property
    def is_note_off(self) -> bool:
        """Check if this is a note-off event (or note-on with velocity 0)."""
        return self.event_type == EventType.NOTE_OFF or (
            self.event_type == EventType.NOTE_ON and self.velocity == 0
        )

    def to_message(self) -> mido.Message:
        """
        Convert to a mido message.

        Note and velocity are clamped to the 7-bit MIDI data range.
        """
        msg_type = "note_on" if self.event_type == EventType.NOTE_ON else "note_off"
        return mido.Message(
            msg_type,
            channel=self.channel & 0x0F,
            note=min(self.note, 127),
            velocity=min(self.velocity, 127),
        )

    def to_bytes(self) -> bytes:
        """
        Convert event to raw MIDI bytes (without delta time).

        Returns:
            MIDI event bytes
        """
        return bytes(self.to_message().bytes())

    @classmethod
    def note_on(cls, channel: int, note: int, velocity: int) -> "MidiEvent":
        """Create a note-on event."""
        return cls(event_type=EventType.NOTE_ON, channel=channel, note=note, velocity=velocity)

    @classmethod
    def note_off(cls, channel: int, note: int, velocity: int = 0) -> "MidiEvent":
        """Create a note-off event."""
        return cls(event_type=EventType.NOTE_OFF, channel=channel, note=note, velocity=velocity)


@dataclass
class TrackTimeline:
    """
    Events of one rendered track, in absolute ticks.

    Attributes:
        name: Track name written as a sequence/track name meta-event
        events: (tick, event) pairs in non-decreasing tick order
        total_ticks: Length of the track in ticks
    """

    name: Optional[str] = None
    events: List[Tuple[int, MidiEvent]] = field(default_factory=list)
    total_ticks: int = 0

    @property
    def note_count(self) -> int:
        """Count note-on events."""
        return sum(1 for _, e in self.events if e.is_note_on)

    def sort_events(self) -> None:
        """Sort events by tick, keeping the order of events on the same tick."""
        self.events.sort(key=lambda pair: pair[0])

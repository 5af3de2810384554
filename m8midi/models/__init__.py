"""Data models for M8 song representation."""

from m8midi.models.song import Song, Version, Groove, SongSteps, Scale
from m8midi.models.phrase import FX, FXCommand, Step, Phrase, ChainStep, Chain, TableStep, Table
from m8midi.models.instrument import Instrument, InstrumentKind
from m8midi.models.timeline import MidiEvent, EventType, TrackTimeline

__all__ = [
    "Song",
    "Version",
    "Groove",
    "SongSteps",
    "Scale",
    "FX",
    "FXCommand",
    "Step",
    "Phrase",
    "ChainStep",
    "Chain",
    "TableStep",
    "Table",
    "Instrument",
    "InstrumentKind",
    "MidiEvent",
    "EventType",
    "TrackTimeline",
]

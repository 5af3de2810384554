"""
Song data model: the root of a decoded M8 song file.
"""

from dataclasses import dataclass, field
from typing import List

from m8midi.models.instrument import Instrument
from m8midi.models.phrase import EMPTY, Chain, Phrase, Table
from m8midi.models.settings import EffectsSettings, MidiMapping, MidiSettings, MixerSettings

N_TRACKS = 8
N_SONG_ROWS = 256
N_GROOVES = 32
N_PHRASES = 255
N_CHAINS = 255
N_TABLES = 256
N_INSTRUMENTS = 128
N_SCALES = 16
N_MIDI_MAPPINGS = 128

STEPS_PER_GROOVE = 16
NOTES_PER_SCALE = 12


@dataclass(frozen=True, order=True)
class Version:
    """Firmware version that wrote the song."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    def at_least(self, major: int, minor: int) -> bool:
        return (self.major, self.minor) >= (major, minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class Groove:
    """
    Per-row tick lengths.

    Rows cycle through the active steps: the steps before the first 255,
    or all 16 if there is no 255.
    """

    number: int = 0
    steps: List[int] = field(default_factory=lambda: [6, 6] + [EMPTY] * 14)

    def active_steps(self) -> List[int]:
        """Return the active step lengths. Never empty."""
        end = STEPS_PER_GROOVE
        for i, ticks in enumerate(self.steps):
            if ticks == EMPTY:
                end = i
                break
        return list(self.steps[: max(end, 1)])

    def __str__(self) -> str:
        return f"Groove {self.number}:{self.active_steps()}"


@dataclass
class SongSteps:
    """
    The song arrangement grid: 256 rows by 8 tracks of chain indices.

    Cell value 255 means the track has nothing at that row.
    """

    steps: bytes = field(default_factory=lambda: bytes([EMPTY]) * (N_SONG_ROWS * N_TRACKS))

    def get(self, row: int, track: int) -> int:
        """Chain index at (row, track), track 0-based."""
        return self.steps[row * N_TRACKS + track]

    def print_row(self, row: int) -> str:
        cells = [self.get(row, track) for track in range(N_TRACKS)]
        return f"{row:02x} " + "".join("-- " if v == EMPTY else f"{v:02x} " for v in cells)

    def print_screen(self, start: int = 0) -> str:
        """Render 16 rows of the grid starting at the given row."""
        lines = ["   1  2  3  4  5  6  7  8  "]
        for row in range(start, min(start + 16, N_SONG_ROWS)):
            lines.append(self.print_row(row))
        return "\n".join(lines) + "\n"


@dataclass
class NoteOffset:
    semitones: int = 0
    cents: int = 0


@dataclass
class Scale:
    """
    A 12-note scale with per-note enable bits and tuning offsets.

    The default is chromatic: all notes enabled, no offsets.
    """

    number: int = 0
    note_mask: int = 0x0FFF
    offsets: List[NoteOffset] = field(
        default_factory=lambda: [NoteOffset() for _ in range(NOTES_PER_SCALE)]
    )
    name: str = ""

    def is_enabled(self, note: int) -> bool:
        return bool(self.note_mask >> (note % NOTES_PER_SCALE) & 1)

    @property
    def is_chromatic(self) -> bool:
        return self.note_mask & 0x0FFF == 0x0FFF and all(
            o.semitones == 0 and o.cents == 0 for o in self.offsets
        )


def default_scales() -> List[Scale]:
    """16 chromatic scales, used for songs written before 2.5."""
    return [Scale(number=i) for i in range(N_SCALES)]


@dataclass
class Song:
    """
    A decoded M8 song.

    Attributes:
        version: Firmware version of the file
        directory: Sample directory
        transpose: Song transpose (signed)
        tempo: Tempo in BPM (metadata only, not used for MIDI timing)
        quantize: Live quantize setting
        name: Song name
        key: Song key
        grooves: 32 grooves
        song: Arrangement grid
        phrases: 255 phrases
        chains: 255 chains
        tables: 256 tables
        instruments: 128 instrument slots
        scales: 16 scales
    """

    version: Version = field(default_factory=Version)
    directory: str = ""
    transpose: int = 0
    tempo: float = 120.0
    quantize: int = 0
    name: str = ""
    key: int = 0
    midi_settings: MidiSettings = field(default_factory=MidiSettings)
    mixer_settings: MixerSettings = field(default_factory=MixerSettings)
    effects_settings: EffectsSettings = field(default_factory=EffectsSettings)
    grooves: List[Groove] = field(default_factory=list)
    song: SongSteps = field(default_factory=SongSteps)
    phrases: List[Phrase] = field(default_factory=list)
    chains: List[Chain] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    instruments: List[Instrument] = field(default_factory=list)
    scales: List[Scale] = field(default_factory=default_scales)
    midi_mappings: List[MidiMapping] = field(default_factory=list)

    def used_chains(self) -> List[int]:
        """Chain indices referenced anywhere in the song grid, sorted."""
        return sorted({v for v in self.song.steps if v != EMPTY})

    def used_phrases(self) -> List[int]:
        """Phrase indices referenced by the used chains, sorted."""
        phrases = set()
        for idx in self.used_chains():
            if idx < len(self.chains):
                phrases.update(step.phrase for step in self.chains[idx].active_steps())
        return sorted(phrases)

    def track_length_rows(self, track: int, start: int = 0) -> int:
        """Number of grid rows the track plays from start before its first empty cell."""
        rows = 0
        for row in range(start, N_SONG_ROWS):
            if self.song.get(row, track) == EMPTY:
                break
            rows += 1
        return rows

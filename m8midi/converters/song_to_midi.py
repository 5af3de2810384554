"""
M8 song to MIDI converter.

Replays each track of a decoded song through the song grid, its chains
and their phrases, and turns the notes into MIDI note-on/note-off events.

The replay of one track:
1. Walk the track's column of the song grid from the start row until
   the first empty cell
2. For each chain, play its entries until the first empty phrase slot,
   taking the entry's transpose
3. For each phrase row with a note, end the sounding note (capped at
   the track's maximum note length) and start the new one
4. Apply groove changes (GRV) from the row's FX columns, then advance
   by the groove's length for that row

Timing is fixed at 24 ticks per quarter note; the song tempo is not used.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from m8midi.formats.midi.writer import MidiFileFormat, MidiHeader, MidiWriter
from m8midi.models.phrase import EMPTY, FXCommand, Step
from m8midi.models.song import N_SONG_ROWS, N_TRACKS, Groove, Song
from m8midi.models.timeline import MidiEvent, TrackTimeline
from m8midi.utils.validation import validate_table_index, validate_track_number

logger = logging.getLogger(__name__)

TICKS_PER_QUARTER_NOTE = 24
MIN_TRACK_TICKS = 4 * TICKS_PER_QUARTER_NOTE
UNBOUNDED_NOTE_LENGTH = 0x7FFFFFFF
DEFAULT_GLOBAL_TRANSPOSE = 36
MIDI_CHANNEL = 0


@dataclass(frozen=True)
class RenderConfig:
    """
    Rendering options.

    Attributes:
        global_transpose: Semitones added to every note (M8 note 0 is MIDI 36 by default)
        max_note_length: Maximum note length in ticks, per track (8 values)
        tracks: 1-based track numbers to render, in output order
        start_from: Song grid row to start from
    """

    global_transpose: int = DEFAULT_GLOBAL_TRANSPOSE
    max_note_length: Tuple[int, ...] = (UNBOUNDED_NOTE_LENGTH,) * N_TRACKS
    tracks: Tuple[int, ...] = tuple(range(1, N_TRACKS + 1))
    start_from: int = 0

    def __post_init__(self):
        if len(self.max_note_length) != N_TRACKS:
            raise ValueError(
                f"max_note_length needs {N_TRACKS} values, got {len(self.max_note_length)}"
            )
        for length in self.max_note_length:
            if length < 0:
                raise ValueError(f"Max note length must not be negative, got {length}")
        for track in self.tracks:
            validate_track_number(track)
        if not 0 <= self.start_from < N_SONG_ROWS:
            raise ValueError(f"Start row must be 0-{N_SONG_ROWS - 1}, got {self.start_from}")

    def with_max_note_length(self, quarters: float) -> "RenderConfig":
        """
        Return a copy with every track's max note length set.

        Args:
            quarters: Length in quarter notes

        Returns:
            New RenderConfig
        """
        length = int(quarters * TICKS_PER_QUARTER_NOTE)
        return dataclasses.replace(self, max_note_length=(length,) * N_TRACKS)


def parse_track_selection(text: str) -> Tuple[int, ...]:
    """
    Parse a track selection such as "1-8", "1,3,5" or "2-4,7".

    Args:
        text: Comma-separated track numbers and inclusive ranges

    Returns:
        Track numbers in the order given

    Raises:
        ValueError: If the text is malformed or a track is out of range
    """
    tracks: List[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            first, _, last = part.partition("-")
            start, end = int(first), int(last)
            if end < start:
                raise ValueError(f"Invalid track range: {part}")
            tracks.extend(range(start, end + 1))
        else:
            tracks.append(int(part))

    if not tracks:
        raise ValueError(f"No tracks selected: {text!r}")

    return tuple(validate_track_number(t) for t in tracks)


@dataclass
class _TrackState:
    """Mutable replay state of one track."""

    global_transpose: int
    max_note_length: int
    groove: Groove
    ticks: int = 0
    transpose: int = 0
    last_note: Optional[int] = None
    last_note_tick: int = 0
    events: List[Tuple[int, MidiEvent]] = field(default_factory=list)

    def groove_ticks(self, row: int) -> int:
        steps = self.groove.active_steps()
        return steps[row % len(steps)]

    def note_off(self, at_tick: int) -> None:
        tick = min(at_tick, self.last_note_tick + self.max_note_length)
        self.events.append((tick, MidiEvent.note_off(MIDI_CHANNEL, self.last_note)))
        self.last_note = None

    def note_on(self, at_tick: int, note: int, velocity: int) -> None:
        actual_note = (note + self.transpose + self.global_transpose) & 0xFF
        self.last_note = actual_note
        self.last_note_tick = at_tick
        self.events.append((at_tick, MidiEvent.note_on(MIDI_CHANNEL, actual_note, velocity)))


class SequenceRenderer:
    """
    Renders a song's tracks to MIDI event timelines.

    Example:
        renderer = SequenceRenderer(song, RenderConfig(global_transpose=24))
        timelines = renderer.render()
    """

    def __init__(self, song: Song, config: Optional[RenderConfig] = None):
        self.song = song
        self.config = config or RenderConfig()

    def render(self) -> List[TrackTimeline]:
        """
        Render every selected track.

        Returns:
            One timeline per track in config.tracks

        Raises:
            RenderError: If the song references a chain, phrase or groove out of range
        """
        return [self.render_track(track - 1) for track in self.config.tracks]

    def render_track(self, track: int) -> TrackTimeline:
        """
        Render one track.

        Args:
            track: 0-based track index

        Returns:
            The track's timeline
        """
        song = self.song
        state = _TrackState(
            global_transpose=self.config.global_transpose,
            max_note_length=self.config.max_note_length[track],
            groove=self._groove(0),
        )

        for row in range(self.config.start_from, N_SONG_ROWS):
            chain_num = song.song.get(row, track)
            if chain_num == EMPTY:
                break
            self._render_chain(chain_num, state)

        if state.last_note is not None:
            state.note_off(state.ticks)

        timeline = TrackTimeline(
            name=f"Track {track + 1}",
            events=state.events,
            total_ticks=max(state.ticks, MIN_TRACK_TICKS),
        )
        logger.debug(
            "Track %d: %d notes, %d ticks", track + 1, timeline.note_count, timeline.total_ticks
        )
        return timeline

    def _groove(self, number: int) -> Groove:
        validate_table_index(number, len(self.song.grooves), "Groove")
        return self.song.grooves[number]

    def _render_chain(self, chain_num: int, state: _TrackState) -> None:
        validate_table_index(chain_num, len(self.song.chains), "Chain")
        chain = self.song.chains[chain_num]

        for step in chain.active_steps():
            state.transpose = step.signed_transpose
            self._render_phrase(step.phrase, state)

    def _render_phrase(self, phrase_num: int, state: _TrackState) -> None:
        validate_table_index(phrase_num, len(self.song.phrases), "Phrase")
        phrase = self.song.phrases[phrase_num]

        for row, step in enumerate(phrase.steps):
            if step.has_note:
                if state.last_note is not None:
                    state.note_off(state.ticks)
                state.note_on(state.ticks, step.note, step.velocity)

            self._change_groove(step, state)
            state.ticks += state.groove_ticks(row)

    def _change_groove(self, step: Step, state: _TrackState) -> None:
        # fx1, fx2, fx3 in order; the last GRV on the row wins
        for fx in step.fx:
            if fx.command == FXCommand.GRV:
                state.groove = self._groove(fx.value)


def render_song(song: Song, config: Optional[RenderConfig] = None) -> List[TrackTimeline]:
    """Render the selected tracks of a song to timelines."""
    return SequenceRenderer(song, config).render()


def song_to_midi(song: Song, config: Optional[RenderConfig] = None) -> bytes:
    """
    Convert a song to a format 1 MIDI file with one MIDI track per selected track.

    Args:
        song: Decoded song
        config: Render options (defaults to RenderConfig())

    Returns:
        SMF file data
    """
    header = MidiHeader(MidiFileFormat.SIMULTANEOUS_TRACKS, TICKS_PER_QUARTER_NOTE)
    return MidiWriter(header).to_bytes(render_song(song, config))


def song_to_track_midis(song: Song, config: Optional[RenderConfig] = None) -> Dict[int, bytes]:
    """
    Convert each selected track to its own single-track MIDI file.

    Tracks that play no notes are left out.

    Args:
        song: Decoded song
        config: Render options (defaults to RenderConfig())

    Returns:
        Mapping of 1-based track number to SMF file data
    """
    config = config or RenderConfig()
    header = MidiHeader(MidiFileFormat.SINGLE_TRACK, TICKS_PER_QUARTER_NOTE)
    writer = MidiWriter(header)

    files = {}
    for track, timeline in zip(config.tracks, render_song(song, config)):
        if timeline.note_count:
            files[track] = writer.to_bytes([timeline])
    return files

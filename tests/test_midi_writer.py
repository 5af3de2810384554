"""Tests for the Standard MIDI File writer."""

import io
import pytest
import sys
from pathlib import Path

import mido

sys.path.insert(0, str(Path(__file__).parent.parent))

from m8midi.converters.song_to_midi import song_to_midi, song_to_track_midis, RenderConfig
from m8midi.formats.m8.decoder import decode_song
from m8midi.formats.midi.writer import MidiFileFormat, MidiHeader, MidiWriter, encode_midi
from m8midi.models.timeline import MidiEvent, TrackTimeline
from m8midi.utils.validation import EncodeError


def _two_note_track(name):
    return TrackTimeline(
        name=name,
        events=[
            (0, MidiEvent.note_on(0, 72, 100)),
            (120, MidiEvent.note_off(0, 72, 100)),
        ],
        total_ticks=3840,
    )


def _track_chunk(name):
    body = (
        [0x00, 0xFF, 0x03, len(name)]
        + list(name.encode())
        + [0x00, 0x90, 0x48, 0x64]
        + [0x78, 0x80, 0x48, 0x64]
        + [0x9D, 0x09, 0xFF, 0x2F, 0x00]
    )
    return bytes([0x4D, 0x54, 0x72, 0x6B, 0, 0, 0, len(body)] + body)


class TestMidiWriter:
    """Test cases for SMF serialization."""

    def test_two_track_file(self):
        """Test exact bytes of a two-track file at 960 ticks per quarter note."""
        header = MidiHeader(MidiFileFormat.SIMULTANEOUS_TRACKS, 960)
        data = MidiWriter(header).to_bytes([_two_note_track("Track 1"), _two_note_track("Track 2")])

        expected = (
            bytes([0x4D, 0x54, 0x68, 0x64, 0, 0, 0, 6, 0, 1, 0, 2, 0x03, 0xC0])
            + _track_chunk("Track 1")
            + _track_chunk("Track 2")
        )
        assert data == expected
        assert data[18:22] == bytes([0, 0, 0, 0x18])

    def test_parsed_by_mido(self):
        """Test that the output is a well-formed MIDI file."""
        header = MidiHeader(MidiFileFormat.SIMULTANEOUS_TRACKS, 960)
        data = encode_midi(header, [_two_note_track("Track 1"), _two_note_track("Track 2")])

        midi = mido.MidiFile(file=io.BytesIO(data))

        assert midi.type == 1
        assert midi.ticks_per_beat == 960
        assert [t.name for t in midi.tracks] == ["Track 1", "Track 2"]

        notes = [m for m in midi.tracks[0] if m.type in ("note_on", "note_off")]
        assert [(m.type, m.note, m.time) for m in notes] == [
            ("note_on", 72, 0),
            ("note_off", 72, 120),
        ]

        end = midi.tracks[0][-1]
        assert end.type == "end_of_track"
        assert end.time == 3840 - 120 + 1

    def test_unnamed_track(self):
        """Test that a track without a name has no name meta-event."""
        data = MidiWriter(MidiHeader()).to_bytes([TrackTimeline(total_ticks=0)])

        assert data[14:] == bytes([0x4D, 0x54, 0x72, 0x6B, 0, 0, 0, 4, 0x01, 0xFF, 0x2F, 0x00])

    def test_one_end_of_track_per_chunk(self):
        """Test that every track ends with exactly one end-of-track."""
        data = MidiWriter(MidiHeader()).to_bytes([_two_note_track("A"), _two_note_track("B")])
        assert data.count(bytes([0xFF, 0x2F, 0x00])) == 2

    def test_long_name_truncated(self):
        """Test that track names are cut to 127 bytes."""
        data = MidiWriter(MidiHeader()).to_bytes([TrackTimeline(name="x" * 200)])

        assert data[22:26] == bytes([0x00, 0xFF, 0x03, 127])

    def test_division_out_of_range(self):
        """Test that SMPTE-style divisions are rejected."""
        with pytest.raises(EncodeError, match="32767"):
            MidiWriter(MidiHeader(ticks_per_quarter_note=0x8000)).to_bytes([])

    def test_events_out_of_order(self):
        """Test that decreasing ticks are rejected."""
        track = TrackTimeline(
            events=[(10, MidiEvent.note_on(0, 60, 100)), (5, MidiEvent.note_off(0, 60))],
            total_ticks=20,
        )
        with pytest.raises(EncodeError, match="out of order"):
            MidiWriter(MidiHeader()).to_bytes([track])

    def test_sort_events(self):
        """Test that sorting keeps same-tick events in order."""
        off = MidiEvent.note_off(0, 60)
        on = MidiEvent.note_on(0, 62, 100)
        track = TrackTimeline(events=[(12, off), (12, on), (0, MidiEvent.note_on(0, 60, 100))])
        track.sort_events()

        assert [e for _, e in track.events][1:] == [off, on]

    def test_write_file(self, tmp_path):
        """Test writing to disk."""
        path = tmp_path / "out" / "song.mid"
        MidiWriter.write(MidiHeader(), [_two_note_track("Track 1")], path)

        assert mido.MidiFile(path).ticks_per_beat == 24


class TestSongToMidi:
    """Test cases for the full song conversion."""

    def test_one_note_song(self, one_note_data):
        """Test the header and track of a one-track conversion."""
        song = decode_song(one_note_data)
        data = song_to_midi(song, RenderConfig(tracks=(1,), max_note_length=(6,) * 8))

        assert data[:14] == bytes(
            [0x4D, 0x54, 0x68, 0x64, 0x00, 0x00, 0x00, 0x06, 0x00, 0x01, 0x00, 0x01, 0x00, 0x18]
        )
        assert data[14:18] == b"MTrk"

        midi = mido.MidiFile(file=io.BytesIO(data))
        messages = [m for m in midi.tracks[0] if not m.is_meta]
        assert [(m.type, m.note, m.velocity, m.time) for m in messages] == [
            ("note_on", 72, 100, 0),
            ("note_off", 72, 0, 6),
        ]

    def test_all_tracks(self, one_note_data):
        """Test that all 8 tracks are written by default."""
        midi = mido.MidiFile(file=io.BytesIO(song_to_midi(decode_song(one_note_data))))

        assert len(midi.tracks) == 8
        assert midi.tracks[7].name == "Track 8"
        assert all(m.channel == 0 for t in midi.tracks for m in t if not m.is_meta)

    def test_silent_tracks(self, blank_song_data):
        """Test that tracks without notes still last one bar and end once."""
        data = song_to_midi(decode_song(blank_song_data))
        midi = mido.MidiFile(file=io.BytesIO(data))

        assert data.count(bytes([0xFF, 0x2F, 0x00])) == 8
        for track in midi.tracks:
            assert [m.type for m in track] == ["track_name", "end_of_track"]
            assert track[-1].time == 96 + 1

    def test_per_track_files(self, one_note_data):
        """Test that only tracks with notes get their own file."""
        files = song_to_track_midis(decode_song(one_note_data))

        assert list(files) == [1]
        midi = mido.MidiFile(file=io.BytesIO(files[1]))
        assert midi.type == 0
        assert len(midi.tracks) == 1

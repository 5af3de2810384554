"""Tests for the M8 song decoder."""

import pytest
import struct
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from song_builder import SongBuilder
from m8midi.formats.m8.decoder import M8Offsets, SongDecoder, decode_song
from m8midi.formats.m8.instrument_parser import INSTRUMENT_SIZE, SAMPLE_PATH_OFFSET
from m8midi.formats.m8.reader import M8SongReader
from m8midi.models.instrument import (
    FMSynth,
    InstrumentKind,
    MacroSynth,
    MIDIOut,
    NoInstrument,
    Sampler,
    WavSynth,
)
from m8midi.models.phrase import FX, FXCommand, note_name
from m8midi.models.song import Version
from m8midi.utils.validation import (
    DecodeError,
    InvalidUtf8Error,
    TooShortError,
    UnknownInstrumentKindError,
)


class TestSongDecoder:
    """Test cases for decoding whole songs."""

    def test_decode_blank_song(self, blank_song_data):
        """Test decoding an empty song."""
        song = SongDecoder(blank_song_data).decode()

        assert song.version == Version(3, 0, 0)
        assert song.tempo == 120.0
        assert song.name == ""
        assert len(song.grooves) == 32
        assert len(song.phrases) == 255
        assert len(song.chains) == 255
        assert len(song.tables) == 256
        assert len(song.instruments) == 128
        assert len(song.scales) == 16
        assert len(song.midi_mappings) == 128
        assert song.used_chains() == []

    def test_sequential_indices(self, blank_song_data):
        """Test that table entries carry their position as number."""
        song = decode_song(blank_song_data)

        assert [g.number for g in song.grooves] == list(range(32))
        assert song.phrases[254].number == 254
        assert song.chains[7].number == 7
        assert song.tables[255].number == 255
        assert song.scales[15].number == 15

    def test_header_fields(self):
        """Test name, directory, tempo and signed transpose."""
        data = (
            SongBuilder()
            .set_name("MYSONG")
            .set_directory("/Songs/live")
            .set_tempo(133.5)
            .set_transpose(-12)
            .build()
        )
        song = decode_song(data)

        assert song.name == "MYSONG"
        assert song.directory == "/Songs/live"
        assert song.tempo == 133.5
        assert song.transpose == -12

    def test_version_nibbles(self):
        """Test that version is taken from the low/high nibbles."""
        song = decode_song(SongBuilder(version=(2, 7, 8)).build())
        assert str(song.version) == "2.7.8"

    def test_groove_active_steps(self):
        """Test groove steps up to the first 255."""
        song = decode_song(SongBuilder().set_groove(3, [5, 7, 6]).build())

        assert song.grooves[3].active_steps() == [5, 7, 6]
        assert song.grooves[0].active_steps() == [6, 6]

    def test_groove_active_steps_never_empty(self):
        """Test grooves with no terminator and with only terminators."""
        full = list(range(1, 17))
        data = SongBuilder().set_groove(1, full).set_groove(2, [0xFF] * 16).build()
        song = decode_song(data)

        assert song.grooves[1].active_steps() == full
        assert song.grooves[2].active_steps() == [0xFF]

    def test_phrase_steps(self):
        """Test note, velocity, instrument and FX of a phrase row."""
        data = (
            SongBuilder()
            .set_step(4, 2, note=0x30, velocity=0x50, instrument=1, fx=[(FXCommand.GRV, 2)])
            .build()
        )
        song = decode_song(data)
        step = song.phrases[4].steps[2]

        assert step.note == 0x30
        assert step.velocity == 0x50
        assert step.instrument == 1
        assert step.fx1 == FX(FXCommand.GRV, 2)
        assert step.fx2.is_empty
        assert song.phrases[4].note_count == 1

    def test_chain_steps(self):
        """Test chain entries and signed transpose."""
        song = decode_song(SongBuilder().set_chain(2, [(0, 0), (5, -3)]).build())
        chain = song.chains[2]

        assert [s.phrase for s in chain.active_steps()] == [0, 5]
        assert chain.steps[1].signed_transpose == -3
        assert chain.steps[2].phrase == 0xFF

    def test_song_grid(self):
        """Test song grid cells by row and track."""
        song = decode_song(SongBuilder().set_song(3, 7, chain=0x12).build())

        assert song.song.get(3, 7) == 0x12
        assert song.song.get(3, 6) == 0xFF
        assert song.used_chains() == [0x12]


class TestVersionGating:
    """Test cases for size checks and version-dependent sections."""

    def test_too_short(self):
        """Test that a buffer below the pre-2.5 minimum is rejected."""
        with pytest.raises(TooShortError):
            decode_song(bytes(M8Offsets.MIN_SIZE_PRIOR_TO_2_5 - 1))

    def test_new_version_needs_scale_table(self):
        """Test that a 2.5+ song must include the scale table."""
        data = SongBuilder(version=(2, 5, 0)).build()[: M8Offsets.MIN_SIZE_PRIOR_TO_2_5]

        with pytest.raises(TooShortError, match="2.5.0"):
            decode_song(data)

    def test_old_version_default_scales(self):
        """Test that songs before 2.5 get 16 chromatic scales."""
        data = SongBuilder(version=(2, 4, 1)).build()
        assert len(data) == M8Offsets.MIN_SIZE_PRIOR_TO_2_5

        song = decode_song(data)

        assert len(song.scales) == 16
        assert all(s.is_chromatic for s in song.scales)
        assert [s.number for s in song.scales] == list(range(16))

    def test_old_version_ignores_trailing_bytes(self):
        """Test that bytes at the scale offset are not read before 2.5."""
        data = bytearray(SongBuilder(version=(2, 4, 0)).build())
        data += bytes([0x01, 0x00]) + bytes(M8Offsets.SCALE_SIZE * 16)

        song = decode_song(bytes(data))
        assert all(s.note_mask == 0x0FFF for s in song.scales)

    def test_scales_decoded_from_2_5(self):
        """Test scale table decoding for 2.5+ songs."""
        offsets = [(0, 0)] * 11 + [(1, 0x32)]
        data = SongBuilder(version=(2, 5, 0)).set_scale(1, 0x0AB5, offsets, "MAJOR").build()
        song = decode_song(data)

        scale = song.scales[1]
        assert scale.note_mask == 0x0AB5
        assert scale.name == "MAJOR"
        assert scale.offsets[11].semitones == 1
        assert scale.offsets[11].cents == 0x32
        assert scale.is_enabled(0)
        assert not scale.is_enabled(1)
        assert song.scales[0].is_chromatic


class TestDecodeErrors:
    """Test cases for malformed input."""

    def test_unknown_instrument_kind(self):
        """Test that an unknown kind byte is rejected with its offset."""
        data = SongBuilder().set_instrument(5, bytes([0x07])).build()

        with pytest.raises(UnknownInstrumentKindError) as excinfo:
            decode_song(data)

        assert excinfo.value.offset == M8Offsets.INSTRUMENTS + 5 * INSTRUMENT_SIZE

    def test_unknown_fx_command(self):
        """Test that an unlisted FX command byte is kept raw instead of failing the decode."""
        data = SongBuilder().set_step(0x40, 3, fx=[(0x3B, 0x07), (0x50, 0)]).build()
        step = decode_song(data).phrases[0x40].steps[3]

        assert step.fx1.command is None
        assert step.fx1.code == 0x3B
        assert step.fx1.value == 0x07
        assert str(step.fx1) == "?3b07"
        assert step.fx2.code == 0x50
        assert not step.fx2.is_empty

    def test_known_fx_by_code(self):
        """Test that FX entries compare equal whether built from the enum or the raw byte."""
        assert FX(FXCommand.GRV, 2) == FX(FXCommand.GRV.value, 2)
        assert FX(FXCommand.GRV.value, 2).command is FXCommand.GRV
        assert str(FX()) == "---00"

    def test_name_terminators_and_invalid_utf8(self):
        """Test that 0xFF ends a name and invalid UTF-8 is rejected."""
        data = SongBuilder().build()
        data = data[:0x94] + b"\xff\xfe" + data[0x96:]
        # 0xFF terminates the field, so the name is simply empty
        assert decode_song(data).name == ""

        data = data[:0x94] + b"\xc3\x28" + data[0x96:]
        with pytest.raises(InvalidUtf8Error):
            decode_song(data)

    def test_errors_share_base(self):
        """Test that all decode errors are DecodeError."""
        assert issubclass(TooShortError, DecodeError)
        assert issubclass(UnknownInstrumentKindError, DecodeError)


def _slot(kind, name=b"", body=b""):
    """Build an instrument slot: kind, 12-byte name, transpose, table tick, then body."""
    return bytes([kind]) + name + bytes(12 - len(name)) + bytes([1, 1]) + body


class TestInstruments:
    """Test cases for instrument slot variants."""

    def test_empty_slots(self, blank_song_data):
        """Test that 0xFF slots decode as empty instruments."""
        song = decode_song(blank_song_data)
        assert all(isinstance(i, NoInstrument) for i in song.instruments)
        assert song.instruments[9].number == 9

    def test_wavsynth(self):
        """Test a WavSynth with its voice and synth parameters."""
        body = bytes([0xC0, 0x00, 0x80]) + bytes([3, 0x20, 0x80, 0, 0]) + bytes([2, 0xA0])
        data = SongBuilder().set_instrument(0, _slot(0x00, b"LEAD", body)).build()
        inst = decode_song(data).instruments[0]

        assert isinstance(inst, WavSynth)
        assert inst.kind == InstrumentKind.WAVSYNTH
        assert inst.header.name == "LEAD"
        assert inst.header.transpose is True
        assert inst.shape == 3
        assert inst.synth_params.volume == 0xC0
        assert inst.synth_params.fine_tune == 0x80
        assert inst.synth_params.filter_type == 2
        assert inst.synth_params.filter_cutoff == 0xA0

    def test_macrosynth(self):
        """Test MacroSynth kind selection."""
        data = SongBuilder().set_instrument(1, _slot(0x01, b"PAD", bytes(8))).build()
        inst = decode_song(data).instruments[1]

        assert isinstance(inst, MacroSynth)
        assert inst.header.number == 1

    def test_sampler_path(self):
        """Test that the sample path is read from its fixed offset."""
        path = b"/Samples/kick.wav"
        slot = bytearray(_slot(0x02, b"KICK"))
        slot += bytes(SAMPLE_PATH_OFFSET - len(slot))
        slot += path

        data = SongBuilder().set_instrument(2, bytes(slot)).build()
        song = decode_song(data)
        inst = song.instruments[2]

        assert isinstance(inst, Sampler)
        assert inst.sample_path == "/Samples/kick.wav"
        assert isinstance(song.instruments[3], NoInstrument)

    def test_fmsynth_operators(self):
        """Test that FM operator columns are spread across operators."""
        voice = bytes([0x80, 0, 0x80])
        columns = bytes(range(1, 29))
        body = voice + bytes([5]) + columns
        data = SongBuilder().set_instrument(3, _slot(0x04, b"FM", body)).build()
        inst = decode_song(data).instruments[3]

        assert isinstance(inst, FMSynth)
        assert inst.algo == 5
        assert [op.shape for op in inst.operators] == [1, 2, 3, 4]
        assert [op.ratio for op in inst.operators] == [5, 6, 7, 8]
        assert inst.operators[3].mod_b == 28

    def test_midiout(self):
        """Test MIDI Out port, channel, program and custom CCs."""
        body = bytes([1, 9, 0xFF, 42, 0, 0, 0, 74, 100])
        data = SongBuilder().set_instrument(4, _slot(0x03, b"EXT", body)).build()
        inst = decode_song(data).instruments[4]

        assert isinstance(inst, MIDIOut)
        assert inst.port == 1
        assert inst.channel == 9
        assert inst.program_change == 42
        assert inst.custom_cc[0].number == 74
        assert inst.custom_cc[0].default_value == 100

    def test_following_slot_aligned(self):
        """Test that each slot starts on its own boundary whatever the kind consumed."""
        data = (
            SongBuilder()
            .set_instrument(0, _slot(0x04, b"FM"))
            .set_instrument(1, _slot(0x00, b"NEXT"))
            .build()
        )
        song = decode_song(data)
        assert song.instruments[1].header.name == "NEXT"


class TestNoteNames:
    """Test cases for M8 note names."""

    def test_names(self):
        """Test note names with hex octaves."""
        assert note_name(0) == "C-1"
        assert note_name(0x24) == "C-4"
        assert note_name(13) == "C#2"
        assert note_name(0x7F) == "G-B"
        assert note_name(0xFF) == "---"


class TestM8SongReader:
    """Test cases for reading songs from disk."""

    def test_read(self, song_file):
        """Test reading a song file."""
        song = M8SongReader.read(song_file)
        assert song.song.get(0, 0) == 0

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            M8SongReader.read(tmp_path / "missing.m8s")

    def test_can_read(self, song_file, tmp_path):
        """Test signature and size detection."""
        other = tmp_path / "other.bin"
        other.write_bytes(b"MThd" + bytes(0x20000))

        assert M8SongReader.can_read(song_file)
        assert not M8SongReader.can_read(other)
        assert not M8SongReader.can_read(tmp_path / "missing.m8s")

    def test_get_file_info(self, song_file):
        """Test quick file info without decoding."""
        info = M8SongReader.get_file_info(song_file)

        assert info["valid"] is True
        assert info["signature"] == "M8VERSION"
        assert info["version"] == "3.0.0"

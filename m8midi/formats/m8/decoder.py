"""
M8 song (.m8s) decoder.

Decodes the fixed-layout binary song file into a Song object.

File Structure (absolute offsets):
    0x00000: Version record (10 bytes "M8VERSION", lsb, msb, 2 reserved)
    0x0000E: Directory (128 bytes)
    0x0008E: Transpose (signed byte)
    0x0008F: Tempo (little-endian float)
    0x00093: Quantize
    0x00094: Name (12 bytes)
    0x000A0: MIDI settings (27 bytes)
    0x000BB: Key
    0x000BC: Reserved (18 bytes)
    0x000CE: Mixer settings (32 bytes)
    0x000EE: Grooves (32 x 16)
    0x002EE: Song grid (256 rows x 8 tracks)
    0x00AEE: Phrases (255 x 16 steps x 9 bytes)
    0x09A5E: Chains (255 x 16 steps x 2 bytes)
    0x0BA3E: Tables (256 x 16 steps x 8 bytes)
    0x13A3E: Instruments (128 x 215 bytes)
    0x1A5BE: Reserved (3 bytes)
    0x1A5C1: Effects settings
    0x1A5FE: MIDI mappings (128 x 9 bytes)
    0x1AA7E: Scales (16 x 42 bytes, firmware 2.5 and later)
"""

import logging
from typing import List

from m8midi.formats.m8.instrument_parser import parse_instrument
from m8midi.models.instrument import Instrument
from m8midi.models.phrase import (
    FX,
    STEPS_PER_CHAIN,
    STEPS_PER_PHRASE,
    STEPS_PER_TABLE,
    Chain,
    ChainStep,
    Phrase,
    Step,
    Table,
    TableStep,
)
from m8midi.models.settings import EffectsSettings, MidiMapping, MidiSettings, MixerSettings
from m8midi.models.song import (
    N_CHAINS,
    N_GROOVES,
    N_INSTRUMENTS,
    N_MIDI_MAPPINGS,
    N_PHRASES,
    N_SCALES,
    N_SONG_ROWS,
    N_TABLES,
    N_TRACKS,
    NOTES_PER_SCALE,
    STEPS_PER_GROOVE,
    Groove,
    NoteOffset,
    Scale,
    Song,
    SongSteps,
    Version,
    default_scales,
)
from m8midi.utils.byte_cursor import ByteCursor
from m8midi.utils.validation import TooShortError

logger = logging.getLogger(__name__)


class M8Offsets:
    """
    Offsets and sizes of the M8 song layout.
    """

    VERSION_SIZE = 14
    VERSION_SIGNATURE = b"M8VERSION"

    DIRECTORY_SIZE = 128
    NAME_SIZE = 12
    MIDI_SETTINGS_SIZE = 27
    RESERVED_AFTER_KEY = 18
    MIXER_SETTINGS_SIZE = 32
    RESERVED_AFTER_INSTRUMENTS = 3

    GROOVES = 0x000EE
    SONG_STEPS = 0x002EE
    PHRASES = 0x00AEE
    CHAINS = 0x09A5E
    TABLES = 0x0BA3E
    INSTRUMENTS = 0x13A3E
    EFFECTS_SETTINGS = 0x1A5C1
    MIDI_MAPPINGS = 0x1A5FE
    SCALES = 0x1AA7E

    MIDI_MAPPING_SIZE = 9
    SCALE_NAME_SIZE = 16
    SCALE_SIZE = 42

    # Smallest valid files: pre-2.5 songs end after the MIDI mappings,
    # 2.5+ songs append the scale table.
    MIN_SIZE_PRIOR_TO_2_5 = SCALES
    MIN_SIZE = SCALES + N_SCALES * SCALE_SIZE


class SongDecoder:
    """
    Decoder for M8 song files.

    Example:
        song = SongDecoder(data).decode()
        print(f"Song: {song.name}, version {song.version}")
    """

    def __init__(self, data: bytes):
        """
        Initialize decoder with song data.

        Args:
            data: Complete .m8s file contents
        """
        self.data = bytes(data)
        self.cursor = ByteCursor(self.data)

    def decode(self) -> Song:
        """
        Decode the song.

        Returns:
            Complete Song

        Raises:
            DecodeError: If the buffer is too short or malformed
        """
        size = len(self.data)
        if size < M8Offsets.MIN_SIZE_PRIOR_TO_2_5:
            raise TooShortError(
                f"File is not long enough to be an M8 song: {size} bytes "
                f"(need at least {M8Offsets.MIN_SIZE_PRIOR_TO_2_5})"
            )

        self.cursor.seek(0)
        version = self._decode_version()
        if version.at_least(2, 5) and size < M8Offsets.MIN_SIZE:
            raise TooShortError(
                f"Version {version} song is {size} bytes (need at least {M8Offsets.MIN_SIZE})"
            )
        logger.debug("Decoding M8 song version %s (%d bytes)", version, size)

        song = Song(version=version)
        cursor = self.cursor

        song.directory = cursor.read_string(M8Offsets.DIRECTORY_SIZE, "directory")
        song.transpose = cursor.read_i8()
        song.tempo = cursor.read_f32()
        song.quantize = cursor.read()
        song.name = cursor.read_string(M8Offsets.NAME_SIZE, "name")
        song.midi_settings = self._decode_midi_settings()
        song.key = cursor.read()
        cursor.skip(M8Offsets.RESERVED_AFTER_KEY)
        song.mixer_settings = self._decode_mixer_settings()

        song.grooves = [self._decode_groove(i) for i in range(N_GROOVES)]
        song.song = SongSteps(steps=cursor.read_bytes(N_SONG_ROWS * N_TRACKS))
        song.phrases = [self._decode_phrase(i) for i in range(N_PHRASES)]
        song.chains = [self._decode_chain(i) for i in range(N_CHAINS)]
        song.tables = [self._decode_table(i) for i in range(N_TABLES)]
        song.instruments = self._decode_instruments()

        cursor.skip(M8Offsets.RESERVED_AFTER_INSTRUMENTS)
        song.effects_settings = self._decode_effects_settings()

        cursor.seek(M8Offsets.MIDI_MAPPINGS)
        song.midi_mappings = [self._decode_midi_mapping() for _ in range(N_MIDI_MAPPINGS)]

        if version.at_least(2, 5):
            cursor.seek(M8Offsets.SCALES)
            song.scales = [self._decode_scale(i) for i in range(N_SCALES)]
        else:
            logger.debug("Version %s has no scale table, using chromatic defaults", version)
            song.scales = default_scales()

        return song

    def _decode_version(self) -> Version:
        """Decode the 14-byte version record."""
        cursor = self.cursor
        cursor.skip(10)
        lsb = cursor.read()
        msb = cursor.read()
        cursor.skip(2)
        return Version(major=msb & 0x0F, minor=(lsb >> 4) & 0x0F, patch=lsb & 0x0F)

    def _decode_midi_settings(self) -> MidiSettings:
        cursor = self.cursor
        return MidiSettings(
            receive_sync=cursor.read_bool(),
            receive_transport=cursor.read(),
            send_sync=cursor.read_bool(),
            send_transport=cursor.read(),
            record_note_channel=cursor.read(),
            record_note_velocity=cursor.read_bool(),
            record_note_delay_kill_commands=cursor.read(),
            control_map_channel=cursor.read(),
            song_row_cue_channel=cursor.read(),
            track_input_channel=list(cursor.read_bytes(N_TRACKS)),
            track_input_instrument=list(cursor.read_bytes(N_TRACKS)),
            track_input_program_change=cursor.read_bool(),
            track_input_mode=cursor.read(),
        )

    def _decode_mixer_settings(self) -> MixerSettings:
        cursor = self.cursor
        start = cursor.tell()
        settings = MixerSettings(
            master_volume=cursor.read(),
            master_limit=cursor.read(),
            track_volume=list(cursor.read_bytes(N_TRACKS)),
            chorus_volume=cursor.read(),
            delay_volume=cursor.read(),
            reverb_volume=cursor.read(),
            analog_input_volume=list(cursor.read_bytes(2)),
            usb_input_volume=cursor.read(),
            analog_input_chorus=cursor.read(),
            analog_input_delay=cursor.read(),
            analog_input_reverb=cursor.read(),
            usb_input_chorus=cursor.read(),
            usb_input_delay=cursor.read(),
            usb_input_reverb=cursor.read(),
            dj_filter=cursor.read(),
            dj_peak=cursor.read(),
        )
        cursor.seek(start + M8Offsets.MIXER_SETTINGS_SIZE)
        return settings

    def _decode_effects_settings(self) -> EffectsSettings:
        cursor = self.cursor
        settings = EffectsSettings()

        settings.chorus_mod_depth = cursor.read()
        settings.chorus_mod_freq = cursor.read()
        settings.chorus_width = cursor.read()
        settings.chorus_reverb_send = cursor.read()
        cursor.skip(3)

        settings.delay_hp = cursor.read()
        settings.delay_lp = cursor.read()
        settings.delay_time_l = cursor.read()
        settings.delay_time_r = cursor.read()
        settings.delay_feedback = cursor.read()
        settings.delay_width = cursor.read()
        settings.delay_reverb_send = cursor.read()
        cursor.skip(1)

        settings.reverb_hp = cursor.read()
        settings.reverb_lp = cursor.read()
        settings.reverb_size = cursor.read()
        settings.reverb_damping = cursor.read()
        settings.reverb_mod_depth = cursor.read()
        settings.reverb_mod_freq = cursor.read()
        settings.reverb_width = cursor.read()

        return settings

    def _decode_groove(self, number: int) -> Groove:
        return Groove(number=number, steps=list(self.cursor.read_bytes(STEPS_PER_GROOVE)))

    def _decode_fx(self) -> FX:
        """Decode a command/value pair, keeping unlisted command bytes raw."""
        offset = self.cursor.tell()
        fx = FX(code=self.cursor.read(), value=self.cursor.read())
        if fx.command is None:
            logger.debug("Unknown FX command 0x%02X at offset 0x%05X", fx.code, offset)
        return fx

    def _decode_step(self) -> Step:
        cursor = self.cursor
        return Step(
            note=cursor.read(),
            velocity=cursor.read(),
            instrument=cursor.read(),
            fx1=self._decode_fx(),
            fx2=self._decode_fx(),
            fx3=self._decode_fx(),
        )

    def _decode_phrase(self, number: int) -> Phrase:
        return Phrase(number=number, steps=[self._decode_step() for _ in range(STEPS_PER_PHRASE)])

    def _decode_chain(self, number: int) -> Chain:
        cursor = self.cursor
        steps = [
            ChainStep(phrase=cursor.read(), transpose=cursor.read()) for _ in range(STEPS_PER_CHAIN)
        ]
        return Chain(number=number, steps=steps)

    def _decode_table(self, number: int) -> Table:
        cursor = self.cursor
        steps = []
        for _ in range(STEPS_PER_TABLE):
            steps.append(
                TableStep(
                    transpose=cursor.read(),
                    velocity=cursor.read(),
                    fx1=self._decode_fx(),
                    fx2=self._decode_fx(),
                    fx3=self._decode_fx(),
                )
            )
        return Table(number=number, steps=steps)

    def _decode_instruments(self) -> List[Instrument]:
        return [parse_instrument(self.cursor, i) for i in range(N_INSTRUMENTS)]

    def _decode_midi_mapping(self) -> MidiMapping:
        cursor = self.cursor
        mapping = MidiMapping(
            channel=cursor.read(),
            control_number=cursor.read(),
            value=cursor.read(),
            typ=cursor.read(),
            param_index=cursor.read(),
            min_value=cursor.read(),
            max_value=cursor.read(),
        )
        cursor.skip(M8Offsets.MIDI_MAPPING_SIZE - 7)
        return mapping

    def _decode_scale(self, number: int) -> Scale:
        cursor = self.cursor
        note_mask = cursor.read_u16()
        offsets = [
            NoteOffset(semitones=cursor.read(), cents=cursor.read()) for _ in range(NOTES_PER_SCALE)
        ]
        name = cursor.read_string(M8Offsets.SCALE_NAME_SIZE, f"scale {number} name")
        return Scale(number=number, note_mask=note_mask, offsets=offsets, name=name)


def decode_song(data: bytes) -> Song:
    """
    Convenience function to decode M8 song bytes.

    Args:
        data: Complete .m8s file contents

    Returns:
        Decoded Song
    """
    return SongDecoder(data).decode()

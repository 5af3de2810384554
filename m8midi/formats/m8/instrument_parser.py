"""
M8 instrument slot parser.

Every instrument occupies a fixed 215-byte slot. The first byte selects
the kind and the rest of the slot is laid out per kind:

Slot Structure (offsets relative to slot start):
    Offset  Size  Description
    0x00    1     Kind (0x00-0x04, 0xFF = empty)
    0x01    12    Name
    0x0D    1     Transpose flag
    0x0E    1     Table tick
    0x0F    3     Volume, pitch, fine tune (not present for MIDI Out)
    0x12    ...   Kind-specific parameters, then synth parameters
    0x57    128   Sample path (Sampler only)

Synth parameters (30 bytes):
    filter type, cutoff, resonance, amp, limit,
    pan, dry, chorus, delay, reverb,
    2 x envelope (dest, amount, attack, hold, decay),
    2 x LFO (shape, dest, trigger mode, freq, amount)

Whatever a kind consumes, the cursor always ends on the next slot boundary.
"""

import logging

from m8midi.models.instrument import (
    LFO,
    ControlChange,
    Envelope,
    FMOperator,
    FMSynth,
    Instrument,
    InstrumentHeader,
    InstrumentKind,
    MacroSynth,
    MIDIOut,
    NoInstrument,
    Sampler,
    SynthParams,
    WavSynth,
)
from m8midi.utils.byte_cursor import ByteCursor
from m8midi.utils.validation import UnknownInstrumentKindError

logger = logging.getLogger(__name__)

INSTRUMENT_SIZE = 215
SAMPLE_PATH_OFFSET = 0x57
SAMPLE_PATH_SIZE = 128
NAME_SIZE = 12
N_FM_OPERATORS = 4
N_CUSTOM_CC = 10


def parse_synth_params(cursor: ByteCursor, volume: int, pitch: int, fine_tune: int) -> SynthParams:
    """
    Parse the shared synth parameter block.

    Args:
        cursor: Cursor positioned at the filter type byte
        volume: Volume from the instrument header
        pitch: Pitch from the instrument header
        fine_tune: Fine tune from the instrument header

    Returns:
        Parsed SynthParams
    """
    params = SynthParams(volume=volume, pitch=pitch, fine_tune=fine_tune)

    params.filter_type = cursor.read()
    params.filter_cutoff = cursor.read()
    params.filter_res = cursor.read()
    params.amp = cursor.read()
    params.limit = cursor.read()

    params.mixer_pan = cursor.read()
    params.mixer_dry = cursor.read()
    params.mixer_chorus = cursor.read()
    params.mixer_delay = cursor.read()
    params.mixer_reverb = cursor.read()

    params.envelopes = [
        Envelope(
            dest=cursor.read(),
            amount=cursor.read(),
            attack=cursor.read(),
            hold=cursor.read(),
            decay=cursor.read(),
        )
        for _ in range(2)
    ]
    params.lfos = [
        LFO(
            shape=cursor.read(),
            dest=cursor.read(),
            trigger_mode=cursor.read(),
            freq=cursor.read(),
            amount=cursor.read(),
        )
        for _ in range(2)
    ]

    return params


def _parse_wavsynth(cursor: ByteCursor, header: InstrumentHeader, voice: tuple) -> WavSynth:
    inst = WavSynth(header=header)
    inst.shape = cursor.read()
    inst.size = cursor.read()
    inst.mult = cursor.read()
    inst.warp = cursor.read()
    inst.mirror = cursor.read()
    inst.synth_params = parse_synth_params(cursor, *voice)
    return inst


def _parse_macrosynth(cursor: ByteCursor, header: InstrumentHeader, voice: tuple) -> MacroSynth:
    inst = MacroSynth(header=header)
    inst.shape = cursor.read()
    inst.timbre = cursor.read()
    inst.color = cursor.read()
    inst.degrade = cursor.read()
    inst.redux = cursor.read()
    inst.synth_params = parse_synth_params(cursor, *voice)
    return inst


def _parse_sampler(
    cursor: ByteCursor, header: InstrumentHeader, voice: tuple, slot_start: int
) -> Sampler:
    inst = Sampler(header=header)
    inst.play_mode = cursor.read()
    inst.slice = cursor.read()
    inst.start = cursor.read()
    inst.loop_start = cursor.read()
    inst.length = cursor.read()
    inst.degrade = cursor.read()
    inst.synth_params = parse_synth_params(cursor, *voice)

    cursor.seek(slot_start + SAMPLE_PATH_OFFSET)
    inst.sample_path = cursor.read_string(SAMPLE_PATH_SIZE, f"instrument {header.number} sample path")
    return inst


def _parse_fmsynth(cursor: ByteCursor, header: InstrumentHeader, voice: tuple) -> FMSynth:
    inst = FMSynth(header=header)
    inst.algo = cursor.read()

    # Operator parameters are stored column-wise: all shapes, then all ratios, ...
    columns = [cursor.read_bytes(N_FM_OPERATORS) for _ in range(7)]
    inst.operators = [
        FMOperator(
            shape=columns[0][i],
            ratio=columns[1][i],
            ratio_fine=columns[2][i],
            level=columns[3][i],
            feedback=columns[4][i],
            mod_a=columns[5][i],
            mod_b=columns[6][i],
        )
        for i in range(N_FM_OPERATORS)
    ]
    inst.mods = list(cursor.read_bytes(4))
    inst.synth_params = parse_synth_params(cursor, *voice)
    return inst


def _parse_midiout(cursor: ByteCursor, header: InstrumentHeader) -> MIDIOut:
    inst = MIDIOut(header=header)
    inst.port = cursor.read()
    inst.channel = cursor.read()
    inst.bank_select = cursor.read()
    inst.program_change = cursor.read()
    cursor.skip(3)
    inst.custom_cc = [
        ControlChange(number=cursor.read(), default_value=cursor.read())
        for _ in range(N_CUSTOM_CC)
    ]
    return inst


def parse_instrument(cursor: ByteCursor, number: int) -> Instrument:
    """
    Parse one instrument slot.

    Args:
        cursor: Cursor positioned at the start of the slot
        number: Index of the slot (0-127)

    Returns:
        The decoded instrument variant

    Raises:
        UnknownInstrumentKindError: If the kind byte is not a known kind
    """
    slot_start = cursor.tell()
    kind_byte = cursor.read()

    try:
        kind = InstrumentKind(kind_byte)
    except ValueError:
        raise UnknownInstrumentKindError(
            f"Unknown kind 0x{kind_byte:02X} for instrument {number}", slot_start
        ) from None

    if kind == InstrumentKind.NONE:
        cursor.seek(slot_start + INSTRUMENT_SIZE)
        return NoInstrument(number=number)

    header = InstrumentHeader(
        number=number,
        name=cursor.read_string(NAME_SIZE, f"instrument {number} name"),
        transpose=cursor.read_bool(),
        table_tick=cursor.read(),
    )

    if kind == InstrumentKind.MIDIOUT:
        instrument = _parse_midiout(cursor, header)
    else:
        voice = (cursor.read(), cursor.read(), cursor.read())
        if kind == InstrumentKind.WAVSYNTH:
            instrument = _parse_wavsynth(cursor, header, voice)
        elif kind == InstrumentKind.MACROSYNTH:
            instrument = _parse_macrosynth(cursor, header, voice)
        elif kind == InstrumentKind.SAMPLER:
            instrument = _parse_sampler(cursor, header, voice, slot_start)
        else:
            instrument = _parse_fmsynth(cursor, header, voice)

    logger.debug("Instrument %d: %s %r", number, kind.name, header.name)

    cursor.seek(slot_start + INSTRUMENT_SIZE)
    return instrument

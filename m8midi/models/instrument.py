"""
Instrument data models.

The M8 has a closed set of instrument kinds, selected by the first byte
of each 215-byte instrument slot:

    0x00 WavSynth    0x03 MIDIOut
    0x01 MacroSynth  0x04 FMSynth
    0x02 Sampler     0xFF (empty slot)

Instruments are decoded for completeness; MIDI rendering does not use them.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Union


class InstrumentKind(IntEnum):
    """Instrument slot kind byte."""

    WAVSYNTH = 0x00
    MACROSYNTH = 0x01
    SAMPLER = 0x02
    MIDIOUT = 0x03
    FMSYNTH = 0x04
    NONE = 0xFF


@dataclass
class Envelope:
    """AHD envelope routed to a modulation destination."""

    dest: int = 0
    amount: int = 0xFF
    attack: int = 0
    hold: int = 0
    decay: int = 0x80


@dataclass
class LFO:
    """Low frequency oscillator routed to a modulation destination."""

    shape: int = 0
    dest: int = 0
    trigger_mode: int = 0
    freq: int = 0x10
    amount: int = 0xFF


@dataclass
class SynthParams:
    """Voice parameters shared by every sound-producing instrument kind."""

    volume: int = 0
    pitch: int = 0
    fine_tune: int = 0x80

    filter_type: int = 0
    filter_cutoff: int = 0xFF
    filter_res: int = 0
    amp: int = 0
    limit: int = 0

    mixer_pan: int = 0x80
    mixer_dry: int = 0xC0
    mixer_chorus: int = 0
    mixer_delay: int = 0
    mixer_reverb: int = 0

    envelopes: List[Envelope] = field(default_factory=lambda: [Envelope(), Envelope()])
    lfos: List[LFO] = field(default_factory=lambda: [LFO(), LFO()])


@dataclass
class InstrumentHeader:
    """Fields common to every instrument slot."""

    number: int = 0
    name: str = ""
    transpose: bool = True
    table_tick: int = 1


@dataclass
class WavSynth:
    header: InstrumentHeader
    shape: int = 0
    size: int = 0x20
    mult: int = 0x80
    warp: int = 0
    mirror: int = 0
    synth_params: SynthParams = field(default_factory=SynthParams)

    kind = InstrumentKind.WAVSYNTH


@dataclass
class MacroSynth:
    header: InstrumentHeader
    shape: int = 0
    timbre: int = 0x80
    color: int = 0x80
    degrade: int = 0
    redux: int = 0
    synth_params: SynthParams = field(default_factory=SynthParams)

    kind = InstrumentKind.MACROSYNTH


@dataclass
class Sampler:
    header: InstrumentHeader
    play_mode: int = 0
    slice: int = 0
    start: int = 0
    loop_start: int = 0
    length: int = 0xFF
    degrade: int = 0
    synth_params: SynthParams = field(default_factory=SynthParams)
    sample_path: str = ""

    kind = InstrumentKind.SAMPLER


@dataclass
class FMOperator:
    shape: int = 0
    ratio: int = 1
    ratio_fine: int = 0
    level: int = 0
    feedback: int = 0
    mod_a: int = 0
    mod_b: int = 0


@dataclass
class FMSynth:
    header: InstrumentHeader
    algo: int = 0
    operators: List[FMOperator] = field(default_factory=lambda: [FMOperator() for _ in range(4)])
    mods: List[int] = field(default_factory=lambda: [0, 0, 0, 0])
    synth_params: SynthParams = field(default_factory=SynthParams)

    kind = InstrumentKind.FMSYNTH


@dataclass
class ControlChange:
    """A MIDI Out custom CC slot."""

    number: int = 0xFF
    default_value: int = 0xFF


@dataclass
class MIDIOut:
    header: InstrumentHeader
    port: int = 0
    channel: int = 0
    bank_select: int = 0xFF
    program_change: int = 0xFF
    custom_cc: List[ControlChange] = field(
        default_factory=lambda: [ControlChange() for _ in range(10)]
    )

    kind = InstrumentKind.MIDIOUT


@dataclass
class NoInstrument:
    """An empty instrument slot."""

    number: int = 0

    kind = InstrumentKind.NONE


Instrument = Union[WavSynth, MacroSynth, Sampler, FMSynth, MIDIOut, NoInstrument]


def instrument_name(instrument: Instrument) -> str:
    """Return the instrument's name, or an empty string for empty slots."""
    if isinstance(instrument, NoInstrument):
        return ""
    return instrument.header.name


def instrument_number(instrument: Instrument) -> int:
    if isinstance(instrument, NoInstrument):
        return instrument.number
    return instrument.header.number

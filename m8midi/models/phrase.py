"""
Phrase, chain and table data models.

A phrase is the M8's 16-row note pattern. Chains list phrases with a
per-entry transpose, and tables hold 16 rows of per-tick automation.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

EMPTY = 0xFF
STEPS_PER_PHRASE = 16
STEPS_PER_CHAIN = 16
STEPS_PER_TABLE = 16

NOTE_NAMES = ["C-", "C#", "D-", "D#", "E-", "F-", "F#", "G-", "G#", "A-", "A#", "B-"]


def note_name(note: int) -> str:
    """
    Format an M8 note number the way the M8 screen shows it.

    Args:
        note: Note number (255 = empty)

    Returns:
        Name like "C-4" or "---" for an empty note
    """
    if note == EMPTY:
        return "---"
    octave = note // 12 + 1
    return f"{NOTE_NAMES[note % 12]}{octave:X}"


def _byte_or_dashes(value: int) -> str:
    return "--" if value == EMPTY else f"{value:02x}"


class FXCommand(IntEnum):
    """FX command codes. 0x80-0xA2 are instrument parameter commands."""

    ARP = 0x00
    CHA = 0x01
    DEL = 0x02
    GRV = 0x03
    HOP = 0x04
    KIL = 0x05
    RAN = 0x06
    RET = 0x07
    REP = 0x08
    NTH = 0x09
    PSL = 0x0A
    PSN = 0x0B
    PVB = 0x0C
    PVX = 0x0D
    SCA = 0x0E
    SCG = 0x0F
    SED = 0x10
    SNG = 0x11
    TBL = 0x12
    THO = 0x13
    TIC = 0x14
    TPO = 0x15
    TSP = 0x16
    VMV = 0x17
    XCM = 0x18
    XCF = 0x19
    XCW = 0x1A
    XCR = 0x1B
    XDT = 0x1C
    XDF = 0x1D
    XDW = 0x1E
    XDR = 0x1F
    XRS = 0x20
    XRD = 0x21
    XRM = 0x22
    XRF = 0x23
    XRW = 0x24
    XRZ = 0x25
    VCH = 0x26
    VCD = 0x27
    VRE = 0x28
    VT1 = 0x29
    VT2 = 0x2A
    VT3 = 0x2B
    VT4 = 0x2C
    VT5 = 0x2D
    VT6 = 0x2E
    VT7 = 0x2F
    VT8 = 0x30
    DJF = 0x31
    IVO = 0x32
    ICH = 0x33
    IDE = 0x34
    IRE = 0x35
    IV2 = 0x36
    IC2 = 0x37
    ID2 = 0x38
    IR2 = 0x39
    USB = 0x3A
    I00 = 0x80
    I01 = 0x81
    I02 = 0x82
    I03 = 0x83
    I04 = 0x84
    I05 = 0x85
    I06 = 0x86
    I07 = 0x87
    I08 = 0x88
    I09 = 0x89
    I0A = 0x8A
    I0B = 0x8B
    I0C = 0x8C
    I0D = 0x8D
    I0E = 0x8E
    I8F = 0x8F
    I90 = 0x90
    I91 = 0x91
    I92 = 0x92
    I93 = 0x93
    I94 = 0x94
    I95 = 0x95
    I96 = 0x96
    I97 = 0x97
    I98 = 0x98
    I99 = 0x99
    I9A = 0x9A
    I9B = 0x9B
    I9C = 0x9C
    I9D = 0x9D
    I9E = 0x9E
    I9F = 0x9F
    IA0 = 0xA0
    IA1 = 0xA1
    IA2 = 0xA2
    NONE = 0xFF


@dataclass(frozen=True)
class FX:
    """
    An FX column entry: command byte plus its value byte.

    Command bytes that FXCommand does not list are kept as-is in `code`,
    and `command` is None for them.
    """

    code: int = FXCommand.NONE
    value: int = 0

    @property
    def command(self) -> Optional[FXCommand]:
        try:
            return FXCommand(self.code)
        except ValueError:
            return None

    @property
    def is_empty(self) -> bool:
        return self.code == FXCommand.NONE

    def __str__(self) -> str:
        if self.is_empty:
            return "---00"
        if self.command is None:
            return f"?{self.code:02x}{self.value:02x}"
        return f"{self.command.name}{self.value:02x}"


@dataclass
class Step:
    """
    One phrase row.

    Attributes:
        note: Note number, 255 = no note on this row
        velocity: Note velocity, 255 = unset
        instrument: Instrument index, 255 = unset
        fx1, fx2, fx3: The three FX columns
    """

    note: int = EMPTY
    velocity: int = EMPTY
    instrument: int = EMPTY
    fx1: FX = field(default_factory=FX)
    fx2: FX = field(default_factory=FX)
    fx3: FX = field(default_factory=FX)

    @property
    def has_note(self) -> bool:
        return self.note != EMPTY

    @property
    def fx(self) -> List[FX]:
        """FX columns in evaluation order."""
        return [self.fx1, self.fx2, self.fx3]

    def print(self, row: int) -> str:
        return (
            f"{row:02x} {note_name(self.note)} {_byte_or_dashes(self.velocity)} "
            f"{_byte_or_dashes(self.instrument)} {self.fx1} {self.fx2} {self.fx3}"
        )


@dataclass
class Phrase:
    """A 16-row phrase."""

    number: int = 0
    steps: List[Step] = field(default_factory=lambda: [Step() for _ in range(STEPS_PER_PHRASE)])

    @property
    def is_empty(self) -> bool:
        """True if no row has a note or an FX."""
        return not any(
            s.has_note or any(not fx.is_empty for fx in s.fx) for s in self.steps
        )

    @property
    def note_count(self) -> int:
        return sum(1 for s in self.steps if s.has_note)

    def print_screen(self) -> str:
        """Render the phrase as the M8 phrase screen."""
        lines = ["   N   V  I  FX1   FX2   FX3  "]
        lines.extend(step.print(row) for row, step in enumerate(self.steps))
        return "\n".join(lines) + "\n"


@dataclass
class ChainStep:
    """A chain entry. phrase 255 ends the chain."""

    phrase: int = EMPTY
    transpose: int = 0

    @property
    def signed_transpose(self) -> int:
        """Transpose byte as a signed 8-bit value."""
        return self.transpose - 0x100 if self.transpose >= 0x80 else self.transpose


@dataclass
class Chain:
    """A 16-entry chain of phrase references."""

    number: int = 0
    steps: List[ChainStep] = field(
        default_factory=lambda: [ChainStep() for _ in range(STEPS_PER_CHAIN)]
    )

    def active_steps(self) -> List[ChainStep]:
        """Entries before the first empty phrase slot."""
        active = []
        for step in self.steps:
            if step.phrase == EMPTY:
                break
            active.append(step)
        return active

    @property
    def is_empty(self) -> bool:
        return not self.active_steps()

    def print_screen(self) -> str:
        lines = ["   P  T"]
        for row, step in enumerate(self.steps):
            lines.append(f"{row:02x} {_byte_or_dashes(step.phrase)} {step.transpose:02x}")
        return "\n".join(lines) + "\n"


@dataclass
class TableStep:
    """One table row."""

    transpose: int = 0
    velocity: int = EMPTY
    fx1: FX = field(default_factory=FX)
    fx2: FX = field(default_factory=FX)
    fx3: FX = field(default_factory=FX)


@dataclass
class Table:
    """A 16-row instrument table."""

    number: int = 0
    steps: List[TableStep] = field(
        default_factory=lambda: [TableStep() for _ in range(STEPS_PER_TABLE)]
    )

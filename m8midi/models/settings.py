"""
Song-wide settings blocks: MIDI, mixer, effects and MIDI mappings.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class MidiSettings:
    """
    MIDI sync and input routing (27 bytes).

    Attributes:
        receive_sync: Follow external MIDI clock
        receive_transport: Transport receive mode
        send_sync: Send MIDI clock
        send_transport: Transport send mode
        record_note_channel: Channel used for note recording
        record_note_velocity: Record incoming velocities
        record_note_delay_kill_commands: DEL/KIL recording mode
        control_map_channel: Channel for the control map
        song_row_cue_channel: Channel for song row cueing
        track_input_channel: Input channel per track (8)
        track_input_instrument: Input instrument per track (8)
        track_input_program_change: Pass program changes to tracks
        track_input_mode: Track input mode
    """

    receive_sync: bool = False
    receive_transport: int = 0
    send_sync: bool = False
    send_transport: int = 0
    record_note_channel: int = 0
    record_note_velocity: bool = True
    record_note_delay_kill_commands: int = 0
    control_map_channel: int = 0
    song_row_cue_channel: int = 0
    track_input_channel: List[int] = field(default_factory=lambda: list(range(1, 9)))
    track_input_instrument: List[int] = field(default_factory=lambda: [0] * 8)
    track_input_program_change: bool = False
    track_input_mode: int = 0


@dataclass
class MixerSettings:
    """Mixer levels (32 bytes, the last 8 reserved)."""

    master_volume: int = 0xE0
    master_limit: int = 0
    track_volume: List[int] = field(default_factory=lambda: [0xE0] * 8)
    chorus_volume: int = 0xE0
    delay_volume: int = 0xE0
    reverb_volume: int = 0xE0
    analog_input_volume: List[int] = field(default_factory=lambda: [0, 0])
    usb_input_volume: int = 0
    analog_input_chorus: int = 0
    analog_input_delay: int = 0
    analog_input_reverb: int = 0
    usb_input_chorus: int = 0
    usb_input_delay: int = 0
    usb_input_reverb: int = 0
    dj_filter: int = 0x80
    dj_peak: int = 0


@dataclass
class EffectsSettings:
    """Send effect parameters for chorus, delay and reverb."""

    chorus_mod_depth: int = 0x40
    chorus_mod_freq: int = 0x80
    chorus_width: int = 0xFF
    chorus_reverb_send: int = 0

    delay_hp: int = 0
    delay_lp: int = 0xFF
    delay_time_l: int = 0x30
    delay_time_r: int = 0x30
    delay_feedback: int = 0x80
    delay_width: int = 0xFF
    delay_reverb_send: int = 0

    reverb_hp: int = 0
    reverb_lp: int = 0xFF
    reverb_size: int = 0xFF
    reverb_damping: int = 0xC0
    reverb_mod_depth: int = 0x10
    reverb_mod_freq: int = 0xFF
    reverb_width: int = 0xFF


@dataclass
class MidiMapping:
    """A MIDI CC to parameter mapping (9 bytes, the last 2 reserved)."""

    channel: int = 0
    control_number: int = 0
    value: int = 0
    typ: int = 0
    param_index: int = 0
    min_value: int = 0
    max_value: int = 0

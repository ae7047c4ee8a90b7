"""Ptvoice unit: one synthesis channel.

Wire layout:

  basic_key    var i32
  volume       var i32
  pan_volume   var i32
  tuning       var f32
  flags        var u32   VoiceFlags
  data_flags   var u32   DataFlags, says which blocks follow
  [wave]       present when DataFlags.WAVE is set
  [envelope]   present when DataFlags.ENVELOPE is set

Bits outside the known members of either flag field make the unit invalid.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .envelope import PtvEnvelope
from .errors import InvalidError
from .values import KEY_A4
from .varint import from_bits, read_var, to_bits, write_var
from .wave import CoordinateWave, PtvWave, read_wave, write_wave


class VoiceFlags(enum.IntFlag):
    WAVE_LOOP = 0x1  # repeat the waveform for the full note duration
    SMOOTH = 0x2  # slight fadeout on note release
    BEAT_FIT = 0x4  # stretch the sample to one beat


class DataFlags(enum.IntFlag):
    WAVE = 0x1
    ENVELOPE = 0x2


VOICE_FLAGS_KNOWN = 0x7
DATA_FLAGS_KNOWN = 0x3
VOICE_FLAGS_RESERVED = 0xFFFF_FFFF & ~VOICE_FLAGS_KNOWN
DATA_FLAGS_RESERVED = 0xFFFF_FFFF & ~DATA_FLAGS_KNOWN

DEFAULT_VOICE_FLAGS = VoiceFlags.WAVE_LOOP | VoiceFlags.SMOOTH


def _check_reserved(value: int, reserved: int, what: str) -> None:
    if value & reserved:
        raise InvalidError(
            f"{what} 0x{value:08X} has reserved bits set (0x{value & reserved:08X})"
        )


@dataclass
class PtvUnit:
    basic_key: int = KEY_A4
    volume: int = 128
    pan_volume: int = 64
    tuning: float = 1.0
    flags: VoiceFlags = DEFAULT_VOICE_FLAGS
    wave: Optional[PtvWave] = field(default_factory=CoordinateWave)
    envelope: Optional[PtvEnvelope] = field(default_factory=PtvEnvelope)

    def __post_init__(self) -> None:
        # Stored as f32 on the wire.
        self.tuning = from_bits(to_bits(self.tuning, "f32"), "f32")

    @property
    def data_flags(self) -> DataFlags:
        flags = DataFlags(0)
        if self.wave is not None:
            flags |= DataFlags.WAVE
        if self.envelope is not None:
            flags |= DataFlags.ENVELOPE
        return flags

    @classmethod
    def from_read(cls, source: BinaryIO) -> "PtvUnit":
        basic_key = read_var(source)
        volume = read_var(source)
        pan_volume = read_var(source)
        tuning = read_var(source, "f32")

        raw_flags = read_var(source, "u32")
        _check_reserved(raw_flags, VOICE_FLAGS_RESERVED, "voice flags")
        raw_data_flags = read_var(source, "u32")
        _check_reserved(raw_data_flags, DATA_FLAGS_RESERVED, "data flags")
        data_flags = DataFlags(raw_data_flags)

        wave = read_wave(source) if data_flags & DataFlags.WAVE else None
        envelope = (
            PtvEnvelope.from_read(source) if data_flags & DataFlags.ENVELOPE else None
        )
        return cls(
            basic_key=basic_key,
            volume=volume,
            pan_volume=pan_volume,
            tuning=tuning,
            flags=VoiceFlags(raw_flags),
            wave=wave,
            envelope=envelope,
        )

    def write_to(self, sink: BinaryIO) -> int:
        """Encode the unit and return the offset where it begins."""

        flags = int(self.flags)
        _check_reserved(flags, VOICE_FLAGS_RESERVED, "voice flags")

        start = write_var(sink, self.basic_key)
        write_var(sink, self.volume)
        write_var(sink, self.pan_volume)
        write_var(sink, self.tuning, "f32")
        write_var(sink, flags, "u32")
        data_flags = self.data_flags
        write_var(sink, int(data_flags), "u32")
        if self.wave is not None:
            write_wave(sink, self.wave)
        if self.envelope is not None:
            self.envelope.write_to(sink)
        return start

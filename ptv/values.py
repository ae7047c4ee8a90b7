"""Thin value types for pxtone quantities.

The codec stores these as plain i32/f32 scalars (``PtvUnit.basic_key``,
``PtvUnit.volume`` ...).  These helpers only convert to and from more
meaningful units:

  Key        256 steps per semitone, 0 = A(-4) (~1.72 Hz), A4 = 0x6000
  Volume     128 = 100%
  PanVolume  0 = full left, 64 = centre, 128 = full right
  Tuning     pitch multiplier, 1.0 = unchanged

Key approximations round through single precision at each step, as pxtone
does, so e.g. 261.62555 Hz lands exactly on C4.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import ClassVar, Tuple

KEY_STEPS_PER_SEMITONE = 256
A4_HERTZ = 440.0


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


@dataclass(frozen=True)
class Key:
    value: int

    A4: ClassVar["Key"]
    C4: ClassVar["Key"]

    @classmethod
    def from_a4_offset(cls, a4_offset: int) -> "Key":
        return cls(KEY_A4 + a4_offset)

    @classmethod
    def approx_from_semis(cls, semis: float) -> "Key":
        """Approximate key from the distance in semitones above A(-4)."""

        return cls(int(_f32(_f32(semis) * KEY_STEPS_PER_SEMITONE)))

    @classmethod
    def approx_from_a4_semis(cls, a4_semis: float) -> "Key":
        return cls.approx_from_semis(_f32(KEY_A4 / KEY_STEPS_PER_SEMITONE + _f32(a4_semis)))

    @classmethod
    def approx_from_hertz(cls, frequency: float) -> "Key":
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency}")
        ratio = _f32(_f32(frequency) / A4_HERTZ)
        return cls.approx_from_a4_semis(_f32(math.log2(ratio)) * 12.0)

    def as_a4_offset(self) -> int:
        return self.value - KEY_A4

    def as_semis(self) -> float:
        return self.value / KEY_STEPS_PER_SEMITONE

    def as_a4_semis(self) -> float:
        return self.as_a4_offset() / KEY_STEPS_PER_SEMITONE

    def as_hertz(self) -> float:
        return 2.0 ** (self.as_a4_semis() / 12.0) * A4_HERTZ


KEY_A4 = 96 * KEY_STEPS_PER_SEMITONE
KEY_C4 = 87 * KEY_STEPS_PER_SEMITONE
Key.A4 = Key(KEY_A4)
Key.C4 = Key(KEY_C4)


@dataclass(frozen=True)
class Volume:
    value: int = 128

    @classmethod
    def from_ratio(cls, ratio: float) -> "Volume":
        return cls(int(128 * ratio))

    def as_ratio(self) -> float:
        return self.value / 128

    def __mul__(self, factor: float) -> "Volume":
        return Volume.from_ratio(self.as_ratio() * factor)


@dataclass(frozen=True)
class PanVolume:
    """Relative stereo volume.

    Values below 0 or above 128 keep working in pxtone: they invert and
    gradually amplify the opposite channel.
    """

    value: int = 64

    LEFT: ClassVar["PanVolume"]
    CENTER: ClassVar["PanVolume"]
    RIGHT: ClassVar["PanVolume"]

    @classmethod
    def from_separate(cls, left: int, right: int) -> "PanVolume":
        """Build from separate left/right levels out of 64."""

        return cls(128 - left if left < 64 else right)

    @classmethod
    def from_ratios(cls, left: float, right: float) -> "PanVolume":
        return cls.from_separate(int(left * 64), int(right * 64))

    def as_separate(self) -> Tuple[int, int]:
        return min(64, 128 - self.value), min(64, self.value)

    def as_ratios(self) -> Tuple[float, float]:
        left, right = self.as_separate()
        return left / 64, right / 64


PanVolume.LEFT = PanVolume(0)
PanVolume.CENTER = PanVolume(64)
PanVolume.RIGHT = PanVolume(128)


@dataclass(frozen=True)
class Tuning:
    # Negative multipliers crash pxtone.
    value: float = 1.0

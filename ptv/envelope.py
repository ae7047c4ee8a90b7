"""Ptvoice volume envelope.

Wire layout (every field is a var-int i32):

  ticks_per_second
  point_count
  0                      sustain point count (always 0)
  1                      release point count (always 1)
  (dx, y) * point_count  dx relative to the previous point's x
  (release, 0)           release duration; y is hardcoded to 0

The two fixed counts are left over from a planned split into separate
attack/sustain/release envelopes.  Any other values make the envelope
invalid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, List, Tuple

from .data import I32_MAX
from .errors import InvalidError, OverMaxError
from .varint import read_var, read_var_pair, to_bits, write_var, write_var_pair

DEFAULT_TICKS_PER_SECOND = 1000
LEGACY_COUNTS = (0, 1)


def wrap_i32(value: int) -> int:
    value &= 0xFFFF_FFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def _default_points() -> List[Tuple[int, int]]:
    return [(0, 96)]


@dataclass
class PtvEnvelope:
    """Envelope made of absolute ``(x, y)`` points.

    x is time in ticks, y is volume.  The last point is sustained while a
    note is held, then the volume falls to zero over ``release`` ticks.
    """

    points: List[Tuple[int, int]] = field(default_factory=_default_points)
    release: int = 1
    ticks_per_second: int = DEFAULT_TICKS_PER_SECOND

    @classmethod
    def from_read(cls, source: BinaryIO) -> "PtvEnvelope":
        ticks_per_second = read_var(source)
        point_count = read_var(source)
        if point_count < 0:
            raise InvalidError(f"negative envelope point count {point_count}")

        legacy = (read_var(source), read_var(source))
        if legacy != LEGACY_COUNTS:
            raise InvalidError(
                f"envelope sustain/release counts must be {LEGACY_COUNTS}, got {legacy}"
            )

        points: List[Tuple[int, int]] = []
        x = 0
        for _ in range(point_count):
            dx, y = read_var_pair(source)
            x = wrap_i32(x + dx)
            points.append((x, y))

        release, _release_y = read_var_pair(source)
        return cls(points=points, release=release, ticks_per_second=ticks_per_second)

    def write_to(self, sink: BinaryIO) -> int:
        """Encode the envelope and return the offset where it begins."""

        if len(self.points) > I32_MAX:
            raise OverMaxError(f"too many envelope points ({len(self.points)})")

        start = write_var(sink, self.ticks_per_second)
        write_var(sink, len(self.points))
        for count in LEGACY_COUNTS:
            write_var(sink, count)

        prev_x = 0
        for x, y in self.points:
            to_bits(x, "i32")  # raises OverMaxError outside i32
            write_var_pair(sink, (wrap_i32(x - prev_x), y))
            prev_x = x
        write_var_pair(sink, (self.release, 0))
        return start

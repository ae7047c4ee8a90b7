"""Ptvoice waveforms.

A waveform is one of two variants, selected by a leading var-int tag:

  0  coordinate  count, x_width, then count * (x: u8, y: i8) fixed-width
  1  oscillator  count, then count * (overtone: var i32, amplitude: var i32)

Coordinate points are the only fixed-width fields inside a ptvoice body;
everything else is LEB128.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Dict, List, Sequence, Tuple, Type, Union

from .data import I32_MAX, read_pair, scalar_reader, scalar_writer, write_pair
from .errors import InvalidError, OverMaxError
from .varint import read_var, read_var_pair, write_var, write_var_pair

COORDINATE = 0
OSCILLATOR = 1
DEFAULT_X_WIDTH = 256

_read_x = scalar_reader("u8")
_read_y = scalar_reader("i8")
_write_x = scalar_writer("u8")
_write_y = scalar_writer("i8")


def _read_count(source: BinaryIO, what: str) -> int:
    count = read_var(source)
    if count < 0:
        raise InvalidError(f"negative {what} count {count}")
    return count


def _write_count(sink: BinaryIO, items: Sequence, what: str) -> None:
    if len(items) > I32_MAX:
        raise OverMaxError(f"too many {what} ({len(items)})")
    write_var(sink, len(items))


@dataclass
class CoordinateWave:
    """Waveform drawn from ``(x, y)`` points over ``x_width``."""

    points: List[Tuple[int, int]] = field(default_factory=lambda: [(0, 0)])
    x_width: int = DEFAULT_X_WIDTH

    tag = COORDINATE

    @classmethod
    def read_body(cls, source: BinaryIO) -> "CoordinateWave":
        count = _read_count(source, "coordinate point")
        x_width = read_var(source)
        points = [read_pair(source, _read_x, _read_y) for _ in range(count)]
        return cls(points=points, x_width=x_width)

    def write_body(self, sink: BinaryIO) -> None:
        _write_count(sink, self.points, "coordinate points")
        write_var(sink, self.x_width)
        for point in self.points:
            write_pair(sink, point, _write_x, _write_y)


@dataclass
class OscillatorWave:
    """Waveform built from ``(overtone_number, amplitude)`` sine partials."""

    overtones: List[Tuple[int, int]] = field(default_factory=list)

    tag = OSCILLATOR

    @classmethod
    def read_body(cls, source: BinaryIO) -> "OscillatorWave":
        count = _read_count(source, "overtone")
        return cls(overtones=[read_var_pair(source) for _ in range(count)])

    def write_body(self, sink: BinaryIO) -> None:
        _write_count(sink, self.overtones, "overtones")
        for overtone in self.overtones:
            write_var_pair(sink, overtone)


PtvWave = Union[CoordinateWave, OscillatorWave]

WAVE_TYPES: Dict[int, Type[PtvWave]] = {
    COORDINATE: CoordinateWave,
    OSCILLATOR: OscillatorWave,
}


def read_wave(source: BinaryIO) -> PtvWave:
    tag = read_var(source)
    wave_cls = WAVE_TYPES.get(tag)
    if wave_cls is None:
        raise InvalidError(f"unknown wave type {tag}")
    return wave_cls.read_body(source)


def write_wave(sink: BinaryIO, wave: PtvWave) -> int:
    """Write the tag and body of ``wave``; returns the offset of the tag."""

    if WAVE_TYPES.get(getattr(wave, "tag", None)) is not type(wave):
        raise TypeError(f"not a ptvoice wave: {wave!r}")
    start = write_var(sink, wave.tag)
    wave.write_body(sink)
    return start


def new_coordinate(
    points: Sequence[Tuple[int, int]], x_width: int = DEFAULT_X_WIDTH
) -> CoordinateWave:
    return CoordinateWave(points=list(points), x_width=x_width)


def new_oscillator(overtones: Sequence[Tuple[int, int]]) -> OscillatorWave:
    return OscillatorWave(overtones=list(overtones))


def default_sine() -> OscillatorWave:
    return new_oscillator([(1, 128)])


def default_triangle() -> CoordinateWave:
    return new_coordinate([(0, 0), (64, 64), (192, -64)])


def default_sawtooth() -> CoordinateWave:
    return new_coordinate([(0, 0), (0, 32), (255, -32)])


def default_square() -> CoordinateWave:
    return new_coordinate([(0, 0), (0, 32), (128, 32), (128, -32), (255, -32)])

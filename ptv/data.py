"""Fixed-width little-endian scalar codec.

Every reader takes a binary stream positioned at the value and consumes
exactly the value's width.  Every writer returns the stream offset where it
started writing so callers can come back and patch the value later.

Supported kinds:
  u8 / i8    1 byte
  u16 / i16  2 bytes
  u32 / i32  4 bytes
  f32        4 bytes, IEEE-754 single precision
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Callable, Tuple, TypeVar

from .errors import OverMaxError, PtvIOError

X = TypeVar("X")
Y = TypeVar("Y")

I32_MAX = 0x7FFF_FFFF

SCALAR_FORMATS = {
    "u8": struct.Struct("<B"),
    "i8": struct.Struct("<b"),
    "u16": struct.Struct("<H"),
    "i16": struct.Struct("<h"),
    "u32": struct.Struct("<I"),
    "i32": struct.Struct("<i"),
    "f32": struct.Struct("<f"),
}


def _scalar_struct(kind: str) -> struct.Struct:
    try:
        return SCALAR_FORMATS[kind]
    except KeyError:
        raise ValueError(f"unknown scalar kind {kind!r}") from None


def tell(stream: BinaryIO) -> int:
    try:
        return stream.tell()
    except OSError as exc:
        raise PtvIOError(f"cannot query stream position: {exc}") from exc


def seek(stream: BinaryIO, offset: int) -> None:
    try:
        stream.seek(offset)
    except OSError as exc:
        raise PtvIOError(f"cannot seek to 0x{offset:X}: {exc}") from exc


def read_exact(source: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, raising PtvIOError on a short read."""

    buf = bytearray()
    while len(buf) < size:
        try:
            chunk = source.read(size - len(buf))
        except OSError as exc:
            raise PtvIOError(f"read failed: {exc}") from exc
        if not chunk:
            raise PtvIOError(
                f"unexpected end of data (wanted {size} bytes, got {len(buf)})"
            )
        buf.extend(chunk)
    return bytes(buf)


def write_raw(sink: BinaryIO, data: bytes) -> None:
    """Write ``data`` in full without asking the sink for its position."""

    try:
        written = sink.write(data)
    except OSError as exc:
        raise PtvIOError(f"write failed: {exc}") from exc
    # Raw streams may accept fewer bytes than offered.
    if written is not None and written < len(data):
        raise PtvIOError(f"short write ({written} of {len(data)} bytes)")


def write_bytes(sink: BinaryIO, data: bytes) -> int:
    """Write ``data`` in full and return the offset where it begins."""

    start = tell(sink)
    write_raw(sink, data)
    return start


def read_scalar(source: BinaryIO, kind: str):
    fmt = _scalar_struct(kind)
    return fmt.unpack(read_exact(source, fmt.size))[0]


def pack_scalar(kind: str, value) -> bytes:
    fmt = _scalar_struct(kind)
    try:
        return fmt.pack(value)
    except (struct.error, OverflowError) as exc:
        raise OverMaxError(f"{value!r} does not fit in {kind}: {exc}") from exc


def write_scalar(sink: BinaryIO, kind: str, value) -> int:
    return write_bytes(sink, pack_scalar(kind, value))


def scalar_reader(kind: str) -> Callable[[BinaryIO], object]:
    """Return a one-argument reader for ``kind``, for use with read_pair."""

    def _read(source: BinaryIO):
        return read_scalar(source, kind)

    return _read


def scalar_writer(kind: str) -> Callable[[BinaryIO, object], int]:
    def _write(sink: BinaryIO, value) -> int:
        return write_scalar(sink, kind, value)

    return _write


def read_pair(
    source: BinaryIO,
    read_x: Callable[[BinaryIO], X],
    read_y: Callable[[BinaryIO], Y],
) -> Tuple[X, Y]:
    """Decode two values in order; the first is fully consumed before the second."""

    x = read_x(source)
    y = read_y(source)
    return x, y


def write_pair(
    sink: BinaryIO,
    pair: Tuple[X, Y],
    write_x: Callable[[BinaryIO, X], int],
    write_y: Callable[[BinaryIO, Y], int],
) -> int:
    x, y = pair
    start = write_x(sink, x)
    write_y(sink, y)
    return start

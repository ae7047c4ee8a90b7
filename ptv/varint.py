"""Unsigned LEB128 codec restricted to 32-bit values.

pxtone stores nearly every integer and float field as an unsigned LEB128
sequence of the value's raw 32-bit pattern:

  byte i carries bits [7*i, 7*i + 7) of the pattern in its low 7 bits
  high bit set   -> another byte follows
  high bit clear -> last byte

At most 5 bytes are read (35 bits); only the low 4 bits of a 5th byte land
in the 32-bit result.  Signed and float values are reinterpreted bit-for-bit,
so ``-1`` is stored as ``FF FF FF FF 0F`` and ``1.0`` as ``80 80 80 FC 03``.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Tuple

from .data import read_exact, write_bytes
from .errors import OverMaxError, PtvIOError

MAX_VAR_BYTES = 5
U32_MASK = 0xFFFF_FFFF

VAR_KINDS = {
    "u32": struct.Struct("<I"),
    "i32": struct.Struct("<i"),
    "f32": struct.Struct("<f"),
}


def _var_struct(kind: str) -> struct.Struct:
    try:
        return VAR_KINDS[kind]
    except KeyError:
        raise ValueError(f"unsupported var-int kind {kind!r}") from None


def to_bits(value, kind: str = "i32") -> int:
    """Return the raw u32 bit pattern of ``value`` interpreted as ``kind``."""

    try:
        raw = _var_struct(kind).pack(value)
    except (struct.error, OverflowError) as exc:
        raise OverMaxError(f"{value!r} does not fit in {kind}: {exc}") from exc
    return int.from_bytes(raw, "little")


def from_bits(bits: int, kind: str = "i32"):
    """Reinterpret a u32 bit pattern as ``kind``."""

    return _var_struct(kind).unpack((bits & U32_MASK).to_bytes(4, "little"))[0]


def encode_var(value, kind: str = "i32") -> bytes:
    bits = to_bits(value, kind)
    out = bytearray()
    for _ in range(MAX_VAR_BYTES):
        byte = bits & 0x7F
        bits >>= 7
        if bits:
            byte |= 0x80
        out.append(byte)
        if bits == 0:
            break
    return bytes(out)


def decode_var(data: bytes, offset: int = 0, kind: str = "i32") -> Tuple[object, int]:
    """Decode one value from ``data`` at ``offset``.  Returns (value, next_offset)."""

    bits = 0
    pos = offset
    for i in range(MAX_VAR_BYTES):
        if pos >= len(data):
            raise PtvIOError(f"truncated var-int at 0x{offset:X}")
        byte = data[pos]
        pos += 1
        bits |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            break
    return from_bits(bits, kind), pos


def read_var(source: BinaryIO, kind: str = "i32"):
    bits = 0
    for i in range(MAX_VAR_BYTES):
        byte = read_exact(source, 1)[0]
        bits |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            break
    return from_bits(bits, kind)


def write_var(sink: BinaryIO, value, kind: str = "i32") -> int:
    """Write ``value`` as LEB128 and return the offset where it begins."""

    return write_bytes(sink, encode_var(value, kind))


def read_var_pair(
    source: BinaryIO, x_kind: str = "i32", y_kind: str = "i32"
) -> Tuple[object, object]:
    x = read_var(source, x_kind)
    y = read_var(source, y_kind)
    return x, y


def write_var_pair(
    sink: BinaryIO, pair: Tuple[object, object], x_kind: str = "i32", y_kind: str = "i32"
) -> int:
    x, y = pair
    start = write_var(sink, x, x_kind)
    write_var(sink, y, y_kind)
    return start

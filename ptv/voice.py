"""Ptvoice container: signature, version gate, length prefix, units.

Layout:

  0x00  "PTVOICE-"           8-byte signature
  0x08  version      i32     must be <= VERSION
  0x0C  data_len     i32     bytes after this field; never verified on read
  0x10  legacy_key   var i32
        0, 0         var i32 reserved
        unit_count   var i32
        PtvUnit * unit_count

``data_len`` precedes the data it measures, so encoding writes a zero
placeholder and patches it once the body is written.  Sinks that cannot
seek get the body buffered in memory instead.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from .data import (
    I32_MAX,
    read_exact,
    read_scalar,
    seek,
    tell,
    write_bytes,
    write_raw,
    write_scalar,
)
from .errors import InvalidError, OverMaxError, UnsupportedError
from .unit import PtvUnit
from .varint import read_var, write_var

logger = logging.getLogger(__name__)

SIGNATURE = b"PTVOICE-"
VERSION = 20060111  # newest format version understood
HEADER_SIZE = len(SIGNATURE) + 4 + 4


def _default_units() -> List[PtvUnit]:
    return [PtvUnit()]


@dataclass
class Ptvoice:
    """Synthesized instrument made up of one or more units.

    ``legacy_basic_key`` applied to the whole voice in old pxtone versions;
    newer versions give each unit its own key and write 0 here.

    The official editor refuses voices with more than two units, but
    playback renders all of them.
    """

    units: List[PtvUnit] = field(default_factory=_default_units)
    legacy_basic_key: int = 0

    @classmethod
    def from_read(cls, source: BinaryIO) -> "Ptvoice":
        signature = read_exact(source, len(SIGNATURE))
        if signature != SIGNATURE:
            raise InvalidError(f"bad signature: {signature!r}")
        version = read_scalar(source, "i32")
        if version > VERSION:
            raise UnsupportedError(
                f"ptvoice version {version} is newer than supported {VERSION}"
            )
        data_len = read_scalar(source, "i32")
        logger.debug("ptvoice header: version=%d data_len=%d", version, data_len)

        legacy_basic_key = read_var(source)
        for idx in range(2):
            reserved = read_var(source)
            if reserved != 0:
                raise InvalidError(f"reserved field {idx} is {reserved}, expected 0")

        unit_count = read_var(source)
        if unit_count < 0:
            raise InvalidError(f"negative unit count {unit_count}")
        units = [PtvUnit.from_read(source) for _ in range(unit_count)]
        return cls(units=units, legacy_basic_key=legacy_basic_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ptvoice":
        return cls.from_read(io.BytesIO(data))

    def write_to(self, sink: BinaryIO) -> Optional[int]:
        """Encode the voice into ``sink``; returns the offset of the signature.

        Seekable sinks get the length field backpatched in place.  Other
        sinks receive a fully buffered copy and None is returned, since
        they cannot report a position.
        """

        seekable = getattr(sink, "seekable", None)
        if seekable is None or not seekable():
            buf = io.BytesIO()
            self.write_to(buf)
            write_raw(sink, buf.getvalue())
            return None

        start = write_bytes(sink, SIGNATURE)
        write_scalar(sink, "i32", VERSION)
        data_len_pos = write_scalar(sink, "i32", 0)

        data_start = write_var(sink, self.legacy_basic_key)
        write_var(sink, 0)
        write_var(sink, 0)
        if len(self.units) > I32_MAX:
            raise OverMaxError(f"too many units ({len(self.units)})")
        write_var(sink, len(self.units))
        for unit in self.units:
            unit.write_to(sink)

        data_end = tell(sink)
        data_len = data_end - data_start
        if data_len > I32_MAX:
            raise OverMaxError(f"ptvoice body too long ({data_len} bytes)")
        seek(sink, data_len_pos)
        write_scalar(sink, "i32", data_len)
        seek(sink, data_end)
        logger.debug("patched data_len=%d at 0x%X", data_len, data_len_pos)
        return start

    def to_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()


def read_ptvoice(path: Union[str, Path]) -> Ptvoice:
    with open(path, "rb") as fh:
        return Ptvoice.from_read(fh)


def write_ptvoice(path: Union[str, Path], voice: Ptvoice) -> None:
    """Write ``voice`` to a new file at ``path`` (length backpatched in place)."""

    with open(path, "wb") as fh:
        voice.write_to(fh)

#!/usr/bin/env python3
"""Check that ptvoice files survive a decode + re-encode pass.

For every file the original bytes are split into header fields and unit
blocks, then compared with a fresh encode of the decoded voice.  A mismatch
is reported against the region that changed:

  OK   lead.ptvoice (2 units, data_len 57)
  FAIL lead.ptvoice: data_len declared 1, actual 57
  FAIL lead.ptvoice: unit 2 differs at +0x05 (orig=0x03 new=0x01)
  ERR  broken.ptvoice: unexpected end of data (wanted 4 bytes, got 2)
"""

from __future__ import annotations

import argparse
import io
import logging
from pathlib import Path
import sys
from typing import List, NamedTuple, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.data import read_exact, tell  # noqa: E402
from ptv.errors import PtvError  # noqa: E402
from ptv.unit import PtvUnit  # noqa: E402
from ptv.varint import read_var  # noqa: E402
from ptv.voice import HEADER_SIZE, Ptvoice  # noqa: E402


class Region(NamedTuple):
    name: str
    start: int
    end: int


def layout(data: bytes) -> List[Region]:
    """Return the byte regions of an encoded voice, in file order."""

    regions = [
        Region("signature", 0, 8),
        Region("version", 8, 12),
        Region("data_len", 12, HEADER_SIZE),
    ]
    source = io.BytesIO(data)
    read_exact(source, HEADER_SIZE)
    for _ in range(3):
        read_var(source)
    unit_count = read_var(source)
    regions.append(Region("voice fields", HEADER_SIZE, tell(source)))
    for idx in range(1, unit_count + 1):
        start = tell(source)
        PtvUnit.from_read(source)
        regions.append(Region(f"unit {idx}", start, tell(source)))
    if tell(source) < len(data):
        regions.append(Region("trailing data", tell(source), len(data)))
    return regions


def describe_mismatch(original: bytes, rebuilt: bytes) -> Optional[str]:
    if original == rebuilt:
        return None

    old_regions = layout(original)
    new_regions = {region.name: region for region in layout(rebuilt)}
    for region in old_regions:
        if region.name == "data_len":
            continue
        other = new_regions.get(region.name)
        if other is None:
            return f"{region.name} dropped on re-encode ({region.end - region.start} bytes)"
        old_chunk = original[region.start : region.end]
        new_chunk = rebuilt[other.start : other.end]
        if old_chunk == new_chunk:
            continue
        for rel, (left, right) in enumerate(zip(old_chunk, new_chunk)):
            if left != right:
                return f"{region.name} differs at +0x{rel:02X} (orig=0x{left:02X} new=0x{right:02X})"
        return f"{region.name} size changed ({len(old_chunk)} -> {len(new_chunk)} bytes)"
    declared = int.from_bytes(original[12:HEADER_SIZE], "little", signed=True)
    actual = len(rebuilt) - HEADER_SIZE
    if declared != actual:
        return f"data_len declared {declared}, actual {actual}"
    return f"size mismatch (orig={len(original)} new={len(rebuilt)})"


def check_file(path: Path) -> tuple[bool, str]:
    data = path.read_bytes()
    try:
        voice = Ptvoice.from_bytes(data)
        rebuilt = voice.to_bytes()
        problem = describe_mismatch(data, rebuilt)
    except PtvError as exc:
        return False, f"ERR  {path}: {exc}"
    if problem is not None:
        return False, f"FAIL {path}: {problem}"
    data_len = len(data) - HEADER_SIZE
    return True, f"OK   {path} ({len(voice.units)} units, data_len {data_len})"


def expand(patterns: Sequence[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        candidate = Path(pattern)
        if candidate.exists():
            paths.append(candidate)
        else:
            paths.extend(sorted(Path().glob(pattern)))
    return list(dict.fromkeys(paths))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Re-encode .ptvoice files and report which region changed."
    )
    parser.add_argument("paths", nargs="+", help="Files or glob patterns relative to the cwd.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    targets = expand(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    failures = 0
    for path in targets:
        ok, line = check_file(path)
        print(line)
        failures += not ok
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())

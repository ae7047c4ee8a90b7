#!/usr/bin/env python3
"""Human-readable ptvoice inspector.

Prints the container header (signature, version, declared data length
against the actual body size) followed by every unit's parameters, flags,
waveform and envelope.  The declared length is reported, never enforced.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.errors import PtvError  # noqa: E402
from ptv.unit import PtvUnit, VoiceFlags  # noqa: E402
from ptv.values import Key, PanVolume, Volume  # noqa: E402
from ptv.voice import HEADER_SIZE, SIGNATURE, Ptvoice  # noqa: E402
from ptv.wave import CoordinateWave, OscillatorWave  # noqa: E402


def describe_flags(flags: VoiceFlags) -> str:
    names = [flag.name.lower() for flag in VoiceFlags if flags & flag]
    return ", ".join(names) if names else "none"


def describe_unit(index: int, unit: PtvUnit) -> List[str]:
    key = Key(unit.basic_key)
    left, right = PanVolume(unit.pan_volume).as_ratios()
    lines = [
        f"Unit {index}:",
        f"  basic_key   0x{unit.basic_key & 0xFFFFFFFF:X} ({key.as_hertz():.2f} Hz)",
        f"  volume      {unit.volume} ({Volume(unit.volume).as_ratio():.0%})",
        f"  pan_volume  {unit.pan_volume} (L {left:.2f} / R {right:.2f})",
        f"  tuning      {unit.tuning:g}",
        f"  flags       {describe_flags(unit.flags)}",
    ]

    wave = unit.wave
    if wave is None:
        lines.append("  wave        none")
    elif isinstance(wave, CoordinateWave):
        lines.append(f"  wave        coordinate x_width={wave.x_width} points={len(wave.points)}")
        for x, y in wave.points:
            lines.append(f"    ({x:3d}, {y:4d})")
    elif isinstance(wave, OscillatorWave):
        lines.append(f"  wave        oscillator overtones={len(wave.overtones)}")
        for overtone, amplitude in wave.overtones:
            lines.append(f"    #{overtone} amp={amplitude}")

    env = unit.envelope
    if env is None:
        lines.append("  envelope    none")
    else:
        lines.append(
            f"  envelope    {len(env.points)} points, release={env.release}, "
            f"ticks/s={env.ticks_per_second}"
        )
        for x, y in env.points:
            lines.append(f"    t={x} vol={y}")
    return lines


def inspect(data: bytes) -> List[str]:
    voice = Ptvoice.from_bytes(data)
    version = int.from_bytes(data[8:12], "little", signed=True)
    declared = int.from_bytes(data[12:16], "little", signed=True)
    actual = len(data) - HEADER_SIZE
    lines = [
        f"Signature   {SIGNATURE.decode('ascii')}",
        f"Version     {version}",
        f"Data length {declared} declared / {actual} present"
        + ("" if declared == actual else "  (mismatch)"),
        f"Legacy key  {voice.legacy_basic_key}",
        f"Units       {len(voice.units)}",
    ]
    for idx, unit in enumerate(voice.units, start=1):
        lines.extend(describe_unit(idx, unit))
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the contents of a .ptvoice file.")
    parser.add_argument("path", type=Path, help="Path to the .ptvoice file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        lines = inspect(args.path.read_bytes())
    except PtvError as exc:
        print(f"ERR  {args.path}: {exc}")
        return 1
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

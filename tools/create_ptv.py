#!/usr/bin/env python3
"""Build a two-unit ptvoice from scratch.

Unit 1 is a single-point coordinate wave at A4 with no envelope.  Unit 2 is
an oscillator pitched 7 semitones higher that fades in over 96 ms and
releases over 100 ms.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.envelope import PtvEnvelope  # noqa: E402
from ptv.unit import PtvUnit  # noqa: E402
from ptv.values import Key  # noqa: E402
from ptv.voice import Ptvoice, write_ptvoice  # noqa: E402
from ptv.wave import new_coordinate, new_oscillator  # noqa: E402


def build_voice() -> Ptvoice:
    unit_1 = PtvUnit(
        basic_key=Key.A4.value,
        wave=new_coordinate([(0, 0)]),
        envelope=None,
    )
    unit_2 = PtvUnit(
        basic_key=Key.approx_from_a4_semis(7.0).value,
        wave=new_oscillator([(1, 128), (2, 64), (4, 32)]),
        envelope=PtvEnvelope(points=[(0, 0), (96, 96)], release=100),
    )
    return Ptvoice(units=[unit_1, unit_2])


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write an example two-unit ptvoice.")
    parser.add_argument("output", nargs="?", type=Path, help="Destination .ptvoice file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    voice = build_voice()
    if args.output is None:
        print(voice)
        return 0

    write_ptvoice(args.output, voice)
    print(f"wrote {args.output} ({args.output.stat().st_size} bytes, {len(voice.units)} units)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""Load a ptvoice, scale every unit's volume, and write a modified copy."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ptv.errors import PtvError  # noqa: E402
from ptv.values import Volume  # noqa: E402
from ptv.voice import Ptvoice, read_ptvoice, write_ptvoice  # noqa: E402


def scale_volumes(voice: Ptvoice, factor: float) -> None:
    for unit in voice.units:
        unit.volume = (Volume(unit.volume) * factor).value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scale the volume of every unit in a ptvoice.")
    parser.add_argument("input", type=Path, help="Source .ptvoice file.")
    parser.add_argument(
        "--scale",
        type=float,
        default=2.0,
        help="Volume multiplier applied to each unit (default: 2.0).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help='Destination file (default: "modified <input name>" beside the input).',
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    output = args.output or args.input.with_name(f"modified {args.input.name}")
    try:
        voice = read_ptvoice(args.input)
    except PtvError as exc:
        print(f"ERR  {args.input}: {exc}")
        return 1

    scale_volumes(voice, args.scale)
    write_ptvoice(output, voice)
    print(f"wrote {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

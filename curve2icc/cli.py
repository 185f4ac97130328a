from __future__ import annotations

import argparse
import logging
from pathlib import Path

from curve2icc.config import DEFAULT_DESCRIPTION, DEFAULT_OUTPUT
from curve2icc.export.profile import write_calibration_profile
from curve2icc.parser.errors import ParseError
from curve2icc.parser.pipeline import load_channel_tables
from curve2icc.sampling.axis import AxisWeighting


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="curve2icc",
        description="Convert a GIMP curves export or a .cube 3D LUT into an ICC profile with a vcgt tag.",
    )
    p.add_argument("input", help="GIMP curves file (or .cube file with --cube)")
    p.add_argument("output", nargs="?", default=DEFAULT_OUTPUT, help=f"Output ICC path (default: {DEFAULT_OUTPUT})")
    p.add_argument("--cube", action="store_true", help="Read INPUT as a .cube 3D LUT instead of a curves file")
    p.add_argument(
        "-d",
        "--description",
        default=DEFAULT_DESCRIPTION,
        help="Description or name shown in the OS colour management menu",
    )
    p.add_argument(
        "--linear-interp",
        action="store_true",
        help="With --cube, use conventional linear interpolation weights along each lattice axis",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    in_path = Path(args.input).expanduser().resolve()
    if not in_path.exists():
        print(f"[ERROR] File not found: {in_path}")
        return 2
    if not in_path.is_file():
        print(f"[ERROR] Not a file: {in_path}")
        return 2

    kind = "lattice" if args.cube else "curve samples"
    weighting = AxisWeighting.LINEAR if args.linear_interp else AxisWeighting.REFERENCE
    print(f"reading {kind} from {in_path}...")
    try:
        res = load_channel_tables(in_path, lattice=args.cube, weighting=weighting)
    except ParseError as e:
        print(f"[ERROR] {e}")
        return 2
    except UnicodeDecodeError as e:
        print(f"[ERROR] {in_path} is not UTF-8 text: {e}")
        return 2

    for note in res.notes:
        print(f"[WARN] {note.message}")
    if res.title:
        print(f"  LUT title: {res.title}")

    out_path = Path(args.output).expanduser().resolve()
    print(f"saving profile to {out_path}...")
    write_calibration_profile(res.tables, out_path, description=args.description)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

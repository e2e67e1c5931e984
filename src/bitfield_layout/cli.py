"""Print a register layout from the command line.

    python -m src.bitfield_layout CTRL=[7:6] STATUS=[3:0]=5 --size 8
    python -m src.bitfield_layout A=[7:6] B=[3:0] --size 8 --move A --to 2
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

import numpy as np

from . import codec, config
from .logutil import set_analysis
from .model import FieldRecord, LayoutError, apply_range_updates, with_reset_value
from .ranges import FREE_BIT, bit_owner_array, format_bits, owner_at, parse_bits_range
from .reorder import compute_reorder_preview
from .segments import FieldSegment, Segment, build_segments


def parse_field_spec(spec: str) -> FieldRecord:
    """``name=[hi:lo]`` or ``name=[n]``, optionally followed by ``=reset``."""
    parts = spec.split("=")
    if len(parts) not in (2, 3) or not parts[0]:
        raise LayoutError(f"bad field {spec!r}; expected name=[hi:lo][=reset]")
    bounds = parse_bits_range(parts[1])
    if bounds is None:
        raise LayoutError(f"bad bit range {parts[1]!r} in {spec!r}")
    bounds = (max(bounds), min(bounds))
    reset = None
    if len(parts) == 3:
        reset = codec.parse_register_value(parts[2])
        if reset is None or codec.validate_register_value(reset, bounds[0] - bounds[1] + 1):
            raise LayoutError(f"bad reset value {parts[2]!r} in {spec!r}")
    return FieldRecord(name=parts[0], bit_range=bounds, reset_value=reset)


def render_segments(segments: Sequence[Segment]) -> List[str]:
    lines = []
    for seg in segments:
        label = seg.name if isinstance(seg, FieldSegment) else "-"
        lines.append(f"{format_bits(seg.end, seg.start):>9} {label}")
    return lines


def _check_layout(fields: Sequence[FieldRecord], size: int) -> None:
    for i, f in enumerate(fields):
        hi, lo = f.bit_range
        if hi >= size:
            raise LayoutError(f"field {f.name!r} does not fit in {size} bits")
        owners = bit_owner_array(fields[:i], size)
        taken = np.flatnonzero(owners[lo:hi + 1] != FREE_BIT)
        if taken.size:
            bit = lo + int(taken[0])
            other = fields[owner_at(owners, bit)].name
            raise LayoutError(f"fields {other!r} and {f.name!r} overlap at bit {bit}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitfield_layout", description="Show the segment layout of a register."
    )
    parser.add_argument("fields", nargs="+", metavar="FIELD",
                        help="name=[hi:lo] or name=[n], optionally =reset")
    parser.add_argument("--size", type=int, default=config.DEFAULT_REGISTER_SIZE,
                        help="register width in bits")
    parser.add_argument("--move", metavar="NAME", help="field to drag")
    parser.add_argument("--to", type=int, metavar="BIT", help="cursor bit for --move")
    parser.add_argument("--value", help="register value to spread over the fields")
    parser.add_argument("--analysis", action="store_true", help="trace engine decisions")
    return parser


def main(argv: Optional[Sequence[str]] = None, out=None) -> int:
    out = out or sys.stdout
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.analysis:
        set_analysis(True)
    if (args.move is None) != (args.to is None):
        parser.error("--move and --to go together")

    try:
        if args.size < 1:
            raise LayoutError("--size must be at least 1")
        fields = [parse_field_spec(s) for s in args.fields]
        _check_layout(fields, args.size)
    except LayoutError as exc:
        parser.error(str(exc))

    if args.value is not None:
        value = codec.parse_register_value(args.value)
        err = codec.validate_register_value(value, args.size)
        if err:
            parser.error(f"--value: {err}")
        for idx, sub in codec.decompose_register_value(fields, value):
            fields[idx] = with_reset_value(fields[idx], sub)

    if args.move is not None:
        names = [f.name for f in fields]
        if args.move not in names:
            parser.error(f"no field named {args.move!r}")
        preview = compute_reorder_preview(args.to, names.index(args.move), fields, args.size)
        fields = apply_range_updates(fields, preview.updates)

    for line in render_segments(build_segments(fields, args.size)):
        print(line, file=out)
    value = codec.compose_register_value(fields, args.size)
    print(f"value {codec.format_register_value(value)}", file=out)
    return 0

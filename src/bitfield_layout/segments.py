"""Register partition into field and gap segments.

A segment list is ordered MSB-first (strictly decreasing ``end``), its
members are disjoint, and together they cover ``[0, N-1]`` exactly once.
:func:`build_segments` derives such a list from the field list alone;
:func:`repack` takes any ordered list and assigns contiguous positions that
respect the order while keeping every width.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, List, Sequence, Union

from .colors import field_color
from .model import RangeUpdate, field_name
from .ranges import field_range

logger = logging.getLogger("bitfield_layout.segments")


@dataclass(frozen=True)
class FieldSegment:
    idx: int
    start: int
    end: int
    name: str = ""
    color: str = ""

    @property
    def width(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class GapSegment:
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start + 1


Segment = Union[FieldSegment, GapSegment]


def build_segments(fields: Sequence[Any], register_size: int) -> List[Segment]:
    """Partition the register into segments, MSB first.

    Fields whose range cannot be resolved take no part in the layout.
    """
    placed = []
    for idx, field in enumerate(fields):
        r = field_range(field)
        if r is None:
            logger.debug("field %d has no usable range; left out of layout", idx)
            continue
        name = field_name(field, idx)
        placed.append(FieldSegment(idx, r.lo, r.hi, name, field_color(name)))
    placed.sort(key=lambda s: (-s.end, -s.start))

    segments: List[Segment] = []
    cursor = register_size - 1
    for seg in placed:
        if cursor > seg.end:
            segments.append(GapSegment(seg.end + 1, cursor))
        segments.append(seg)
        cursor = seg.start - 1
    if cursor >= 0:
        segments.append(GapSegment(0, cursor))
    logger.debug("layout of %d bits: %d segments", register_size, len(segments))
    return segments


def place(seg: Segment, start: int) -> Segment:
    """Return ``seg`` moved so that it begins at ``start``."""
    end = start + seg.width - 1
    match seg:
        case FieldSegment():
            return dataclasses.replace(seg, start=start, end=end)
        case GapSegment():
            return GapSegment(start, end)
        case _:
            raise TypeError(f"not a segment: {seg!r}")


def repack(segments: Sequence[Segment]) -> List[Segment]:
    """Reassign contiguous positions from bit 0, honouring list order."""
    current_bit = 0
    packed = []
    for seg in reversed(segments):
        packed.append(place(seg, current_bit))
        current_bit += seg.width
    packed.reverse()
    return packed


def to_range_updates(segments: Sequence[Segment]) -> List[RangeUpdate]:
    updates = []
    for seg in segments:
        match seg:
            case FieldSegment(idx=idx, start=start, end=end):
                updates.append(RangeUpdate(idx, (end, start)))
            case GapSegment():
                pass
    return updates


def total_width(segments: Sequence[Segment]) -> int:
    return sum(seg.width for seg in segments)


def is_partition(segments: Sequence[Segment], register_size: int) -> bool:
    """True when ``segments`` tile ``[0, register_size - 1]`` MSB first."""
    expected_end = register_size - 1
    for seg in segments:
        if seg.start > seg.end or seg.end != expected_end:
            return False
        expected_end = seg.start - 1
    return expected_end == -1


def find_field_segment(segments: Sequence[Segment], field_index: int) -> int:
    """Position of ``field_index``'s segment in ``segments`` or -1."""
    for pos, seg in enumerate(segments):
        if isinstance(seg, FieldSegment) and seg.idx == field_index:
            return pos
    return -1

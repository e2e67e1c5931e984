"""Reordering fields along the bit axis.

Two entry points:

* :func:`keyboard_reorder_updates` swaps a field's segment with the entry
  next to it (field or gap) and repacks.  Gaps are never split, so a swap
  across a gap of a different width is not undone by swapping back.
* :func:`compute_reorder_preview` plans a pointer drag.  The dragged field
  is lifted out, the remaining segments are packed into a virtual space of
  ``N - width`` bits, and the cursor picks the insertion point there:
  beside a neighbouring field (whichever side of its midpoint the cursor is
  on) or between the two halves of a gap split at the cursor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .boundaries import LSB, MSB
from .model import RangeUpdate
from .segments import (
    FieldSegment,
    GapSegment,
    Segment,
    build_segments,
    find_field_segment,
    repack,
    to_range_updates,
    total_width,
)

logger = logging.getLogger("bitfield_layout.reorder")


@dataclass
class ReorderPreview:
    segments: List[Segment]
    updates: List[RangeUpdate]


def keyboard_reorder_updates(
    fields: Sequence[Any], register_size: int, field_index: int, direction: str
) -> Optional[List[RangeUpdate]]:
    if direction not in (MSB, LSB):
        raise ValueError(f"direction must be 'msb' or 'lsb', got {direction!r}")
    segments = build_segments(fields, register_size)
    source = find_field_segment(segments, field_index)
    if source == -1:
        return None
    target = source - 1 if direction == MSB else source + 1
    if target < 0 or target >= len(segments):
        return None

    reordered = list(segments)
    moved = reordered.pop(source)
    reordered.insert(target, moved)
    return to_range_updates(repack(reordered))


def _locate(segments: Sequence[Segment], bit: int) -> int:
    for pos, seg in enumerate(segments):
        if seg.start <= bit <= seg.end:
            return pos
    return -1


def _splice(target: Segment, offset: int, dragged: FieldSegment) -> List[Segment]:
    """Arrangement replacing ``target`` once ``dragged`` is dropped into it."""
    match target:
        case FieldSegment():
            if offset > target.width / 2:
                return [dragged, target]
            return [target, dragged]
        case GapSegment():
            top_width = target.width - offset
            arrangement: List[Segment] = []
            if top_width > 0:
                arrangement.append(GapSegment(0, top_width - 1))
            arrangement.append(dragged)
            if offset > 0:
                arrangement.append(GapSegment(0, offset - 1))
            return arrangement
        case _:
            raise TypeError(f"not a segment: {target!r}")


def compute_reorder_preview(
    bit: int, dragged_index: int, fields: Sequence[Any], register_size: int
) -> Optional[ReorderPreview]:
    """Layout that results from dropping ``dragged_index`` at cursor ``bit``."""
    original = build_segments(fields, register_size)
    source = find_field_segment(original, dragged_index)
    if source == -1:
        return None
    dragged = original[source]

    clean = original[:source] + original[source + 1:]
    virtual = repack(clean)
    effective_cursor = min(max(bit, 0), total_width(virtual))
    target = _locate(virtual, effective_cursor)

    if target == -1:
        arranged = [dragged] + clean
    else:
        offset = effective_cursor - virtual[target].start
        arranged = clean[:target] + _splice(virtual[target], offset, dragged) + clean[target + 1:]

    final = repack(arranged)
    updates = to_range_updates(final)
    logger.debug(
        "reorder field %d to bit %d: target=%d updates=%s",
        dragged_index, bit, target, updates,
    )
    return ReorderPreview(final, updates)

"""Collision boundaries for resizing fields and carving new ones from gaps."""
from __future__ import annotations

from typing import Any, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .ranges import FREE_BIT, field_range

MSB = "msb"
LSB = "lsb"


class BitSpan(NamedTuple):
    min_bit: int
    max_bit: int


class EdgeCapability(NamedTuple):
    can_shrink: bool
    can_expand: bool


class ResizableEdges(NamedTuple):
    lsb: EdgeCapability
    msb: EdgeCapability


def _check_edge(edge: str) -> None:
    if edge not in (MSB, LSB):
        raise ValueError(f"edge must be 'msb' or 'lsb', got {edge!r}")


def resize_boundary(fields: Sequence[Any], field_index: int, edge: str, register_size: int) -> int:
    """Furthest bit the ``edge`` of a field may reach before hitting a neighbour."""
    _check_edge(edge)
    this = field_range(fields[field_index]) if 0 <= field_index < len(fields) else None
    if this is None:
        return register_size - 1 if edge == MSB else 0

    if edge == MSB:
        limit = register_size - 1
        for i, field in enumerate(fields):
            if i == field_index:
                continue
            r = field_range(field)
            if r is not None and r.lo > this.hi:
                limit = min(limit, r.lo - 1)
        return limit

    limit = 0
    for i, field in enumerate(fields):
        if i == field_index:
            continue
        r = field_range(field)
        if r is not None and r.hi < this.lo:
            limit = max(limit, r.hi + 1)
    return limit


def resize_span(fields: Sequence[Any], field_index: int, register_size: int) -> BitSpan:
    return BitSpan(
        resize_boundary(fields, field_index, LSB, register_size),
        resize_boundary(fields, field_index, MSB, register_size),
    )


def gap_boundary(start_bit: int, owners: np.ndarray, register_size: int) -> BitSpan:
    """Extent of the run of free bits around ``start_bit``."""
    min_bit = max_bit = max(0, min(start_bit, register_size - 1))
    while max_bit < register_size - 1 and owners[max_bit + 1] == FREE_BIT:
        max_bit += 1
    while min_bit > 0 and owners[min_bit - 1] == FREE_BIT:
        min_bit -= 1
    return BitSpan(min_bit, max_bit)


def resizable_edges(field_start: int, field_end: int, owners: np.ndarray, register_size: int) -> ResizableEdges:
    msb_bit = max(field_start, field_end)
    lsb_bit = min(field_start, field_end)
    can_shrink = msb_bit > lsb_bit
    gap_below = lsb_bit > 0 and owners[lsb_bit - 1] == FREE_BIT
    gap_above = msb_bit < register_size - 1 and owners[msb_bit + 1] == FREE_BIT
    return ResizableEdges(
        lsb=EdgeCapability(can_shrink, bool(gap_below)),
        msb=EdgeCapability(can_shrink, bool(gap_above)),
    )


def keyboard_resize_range(
    fields: Sequence[Any], register_size: int, field_index: int, edge: str
) -> Optional[Tuple[int, int]]:
    """One-bit resize of ``edge``, as ``(hi, lo)``.

    The edge grows toward its collision boundary; once it is there, the same
    command shrinks it by one bit instead.  Returns ``None`` when the field
    cannot change (unresolvable, or a single bit pinned at its boundary).
    """
    _check_edge(edge)
    if not 0 <= field_index < len(fields):
        return None
    r = field_range(fields[field_index])
    if r is None:
        return None

    lo, hi = r.lo, r.hi
    if edge == MSB:
        max_msb = resize_boundary(fields, field_index, MSB, register_size)
        if r.hi < max_msb:
            hi = r.hi + 1
        elif r.hi > r.lo:
            hi = r.hi - 1
    else:
        min_lsb = resize_boundary(fields, field_index, LSB, register_size)
        if r.lo > min_lsb:
            lo = r.lo - 1
        elif r.hi > r.lo:
            lo = r.lo + 1

    if (lo, hi) == (r.lo, r.hi):
        return None
    return (hi, lo)

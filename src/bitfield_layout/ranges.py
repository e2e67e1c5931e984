"""Field range resolution and per-bit ownership.

Unresolvable ranges (missing, non-numeric, non-finite or fractional bit
positions) resolve to ``None`` and every consumer in this package skips
such fields.
"""
from __future__ import annotations

import math
import re
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from .model import FieldRange, field_attr

FREE_BIT = -1

_BRACKETED = re.compile(r"^\[(\d+)(?::(\d+))?\]$")
_BARE = re.compile(r"^(\d+)(?::(\d+))?$")


def _finite_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def field_range(field: Any) -> Optional[FieldRange]:
    """Resolve the inclusive ``(lo, hi)`` range of ``field``."""
    if field is None:
        return None
    bit_range = field_attr(field, "bit_range")
    if isinstance(bit_range, (list, tuple)) and len(bit_range) == 2:
        hi = _finite_int(bit_range[0])
        lo = _finite_int(bit_range[1])
        if hi is None or lo is None:
            return None
        return FieldRange(min(lo, hi), max(lo, hi))
    bit = field_attr(field, "bit")
    if bit is not None:
        b = _finite_int(bit)
        if b is None:
            return None
        return FieldRange(b, b)
    return None


def _parse_bounds(text: str, require_brackets: bool) -> Optional[Tuple[int, int]]:
    source = re.sub(r"\s+", "", str(text or ""))
    if not source:
        return None
    m = _BRACKETED.match(source)
    if m is None and not require_brackets:
        m = _BARE.match(source)
    if m is None:
        return None
    hi = int(m.group(1))
    lo = int(m.group(2)) if m.group(2) is not None else hi
    return hi, lo


def parse_bits_range(text: str) -> Optional[Tuple[int, int]]:
    """Parse ``"[hi:lo]"`` or ``"[n]"`` into ``(hi, lo)``."""
    return _parse_bounds(text, True)


def parse_bits_like(text: str) -> Optional[Tuple[int, int]]:
    """Parse a bracketed or bare bits string into ``(offset, width)``."""
    bounds = _parse_bounds(text, False)
    if bounds is None:
        return None
    msb, lsb = max(bounds), min(bounds)
    return lsb, msb - lsb + 1


def format_bits(hi: int, lo: int) -> str:
    if hi == lo:
        return f"[{hi}]"
    return f"[{hi}:{lo}]"


def bit_owner_array(fields: Sequence[Any], register_size: int) -> np.ndarray:
    """Map every bit of the register to its owning field index.

    Unowned bits hold :data:`FREE_BIT`.  Bits of a field that fall outside
    the register are ignored.
    """
    owners = np.full(register_size, FREE_BIT, dtype=np.int64)
    for idx, field in enumerate(fields):
        r = field_range(field)
        if r is None:
            continue
        lo = max(r.lo, 0)
        hi = min(r.hi, register_size - 1)
        if lo <= hi:
            owners[lo:hi + 1] = idx
    return owners


def owner_at(owners: np.ndarray, bit: int) -> Optional[int]:
    """Field index owning ``bit`` or ``None`` for free / out-of-range bits."""
    if bit < 0 or bit >= len(owners):
        return None
    idx = int(owners[bit])
    return None if idx == FREE_BIT else idx

"""
Bit and value codec for register fields.

Bit 0 is the low-order bit, with value 1 = 2^0.  Values are treated as
unsigned: anything non-finite or negative reads as 0, so every function here
is total and never raises for bad numeric input.

Register values are composed from the reset values of the fields and
decomposed back into them.  Bits that no field covers read as 0 and are
dropped on decomposition, so a round trip through a register with gaps is
lossy.
"""
from __future__ import annotations

import math
import re
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from . import config
from .model import ResetUpdate, field_attr
from .ranges import field_range

Number = Union[int, float]

_INT_LITERAL = re.compile(r"^[+-]?(0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|\d[\d_]*)$")


def _whole(value: Any) -> Optional[int]:
    """Floor of a finite non-negative ``value``; ``None`` otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return math.floor(number)


def bit_at(value: Number, bit_index: int) -> int:
    if bit_index < 0:
        return 0
    n = _whole(value)
    if n is None:
        return 0
    return (n >> bit_index) & 1


def set_bit(value: Number, bit_index: int, desired: int) -> int:
    """Return ``value`` with bit ``bit_index`` forced to ``desired``."""
    base = _whole(value)
    if base is None:
        base = 0
    if bit_index < 0:
        return base
    if bit_at(base, bit_index) == desired:
        return base
    delta = 1 << bit_index
    return base + delta if desired else max(0, base - delta)


def parse_register_value(text: str) -> Optional[Number]:
    """Parse a decimal or ``0x``/``0b``/``0o`` literal.

    Negative and fractional results are returned as-is; rejecting them is
    :func:`validate_register_value`'s job.
    """
    s = (text or "").strip()
    if not s:
        return None
    if _INT_LITERAL.match(s):
        # base 0 rejects leading zeros ("010"), base 10 reads them
        for base in (0, 10):
            try:
                return int(s, base)
            except ValueError:
                continue
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    if not math.isfinite(v):
        return None
    return int(v) if v.is_integer() else v


def max_for_bits(bit_count: int) -> int:
    if bit_count <= 0:
        return 0
    if bit_count >= config.PRECISION_BITS:
        return config.safe_integer_max()
    return (1 << bit_count) - 1


def validate_register_value(value: Optional[Number], register_size: int) -> Optional[str]:
    """Return an error message for ``value`` or ``None`` when it is usable."""
    if value is None:
        return "Value is required"
    if isinstance(value, float) and not math.isfinite(value):
        return "Invalid number"
    if value < 0:
        return "Value must be >= 0"
    if isinstance(value, float) and not value.is_integer():
        return "Value must be an integer"
    if value > max_for_bits(register_size):
        return f"Value too large for {register_size} bit(s)"
    return None


def format_register_value(value: Number, view: str = "hex") -> str:
    n = _whole(value) or 0
    if view == "dec":
        return str(n)
    return f"0x{n:X}"


def extract_bits(value: Number, lo: int, width: int) -> int:
    """Return the ``width``-bit slice of ``value`` starting at bit ``lo``."""
    if width <= 0:
        return 0
    n = _whole(value)
    if n is None:
        return 0
    shifted = n >> lo if lo >= 0 else n << -lo
    mask = config.safe_integer_max() if width >= config.PRECISION_BITS else (1 << width) - 1
    return shifted % (mask + 1)


def reset_value_of(field: Any) -> Number:
    raw = field_attr(field, "reset_value")
    if raw is None:
        return 0
    if isinstance(raw, str):
        parsed = parse_register_value(raw)
        return parsed if parsed is not None else 0
    return raw


def bit_values(fields: Sequence[Any], register_size: int) -> np.ndarray:
    """Per-bit view (``uint8``) of the reset values placed at their ranges."""
    values = np.zeros(register_size, dtype=np.uint8)
    for field in fields:
        r = field_range(field)
        if r is None:
            continue
        field_value = reset_value_of(field)
        for bit in range(max(r.lo, 0), min(r.hi, register_size - 1) + 1):
            values[bit] = bit_at(field_value, bit - r.lo)
    return values


def compose_register_value(fields: Sequence[Any], register_size: int) -> int:
    values = bit_values(fields, register_size)
    return sum(1 << int(bit) for bit in np.flatnonzero(values))


def decompose_register_value(fields: Sequence[Any], value: Number) -> List[ResetUpdate]:
    """Split ``value`` into one reset value per resolvable field.

    Bits outside every field range are discarded.
    """
    updates = []
    for idx, field in enumerate(fields):
        r = field_range(field)
        if r is None:
            continue
        updates.append(ResetUpdate(idx, extract_bits(value, r.lo, r.width)))
    return updates

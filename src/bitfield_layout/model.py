"""Records shared by every stage of the layout engine.

Fields belong to the host document.  They arrive either as
:class:`FieldRecord` instances or as plain mappings carrying the same keys
(``name``, ``bit_range``, ``bit``, ``reset_value``), and the engine never
mutates them.  Every change leaves the engine as a :class:`RangeUpdate` or a
reset-value update handed to a sink.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from . import config


class LayoutError(ValueError):
    pass


@dataclass(frozen=True)
class Register:
    """A fixed-width bit container.  Bit 0 is the least significant bit."""

    width: int = config.DEFAULT_REGISTER_SIZE

    def __post_init__(self) -> None:
        if not isinstance(self.width, int) or self.width < 1:
            raise LayoutError(f"register width must be a positive integer, got {self.width!r}")


@dataclass(frozen=True)
class FieldRecord:
    name: str = ""
    bit_range: Optional[Tuple[Any, Any]] = None  # (hi, lo)
    bit: Optional[Any] = None
    reset_value: Optional[int] = None


class FieldRange(NamedTuple):
    lo: int
    hi: int

    @property
    def width(self) -> int:
        return self.hi - self.lo + 1

    def as_bit_range(self) -> Tuple[int, int]:
        return (self.hi, self.lo)


class RangeUpdate(NamedTuple):
    idx: int
    range: Tuple[int, int]  # (hi, lo)


class ResetUpdate(NamedTuple):
    idx: int
    value: Optional[int]


def field_attr(field: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a record or a mapping."""
    if isinstance(field, Mapping):
        return field.get(key, default)
    return getattr(field, key, default)


def field_name(field: Any, idx: int) -> str:
    name = field_attr(field, "name")
    return name if name is not None else f"field{idx}"


def with_range(field: Any, new_range: Tuple[int, int]) -> Any:
    """Return a copy of ``field`` occupying ``new_range`` (hi, lo)."""
    hi, lo = new_range
    if isinstance(field, Mapping):
        updated = dict(field)
        updated.pop("bit", None)
        updated["bit_range"] = [hi, lo]
        return updated
    return dataclasses.replace(field, bit_range=(hi, lo), bit=None)


def with_reset_value(field: Any, value: Optional[int]) -> Any:
    if isinstance(field, Mapping):
        updated = dict(field)
        updated["reset_value"] = value
        return updated
    return dataclasses.replace(field, reset_value=value)


def apply_range_updates(fields: Sequence[Any], updates: Sequence[RangeUpdate]) -> List[Any]:
    """Apply a batch of range updates to a copy of ``fields``.

    This is what a host document does with a committed batch; the engine
    itself only proposes updates.
    """
    result = list(fields)
    for idx, new_range in updates:
        result[idx] = with_range(result[idx], new_range)
    return result

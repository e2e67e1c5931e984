"""Outbound interface of the layout engine.

Every commit and preview leaves the engine through a :class:`LayoutSink`.
The base class does nothing, so a host overrides only the capabilities it
has.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from .model import RangeUpdate

BitRange = Tuple[int, int]  # (hi, lo)


class LayoutSink:
    """No-op sink.  Subclass and override what the host supports."""

    #: controllers prefer :meth:`batch_update_ranges` when this is true
    supports_batch = False

    def update_range(self, field_index: int, new_range: BitRange) -> None:
        pass

    def batch_update_ranges(self, updates: Sequence[RangeUpdate]) -> None:
        pass

    def update_reset_value(self, field_index: int, value: Optional[int]) -> None:
        pass

    def create_field(self, new_range: BitRange, name: str) -> None:
        pass

    def preview(self, updates: Optional[Sequence[RangeUpdate]]) -> None:
        pass

    # ------------------------------------------------------------------
    def commit_ranges(self, updates: Sequence[RangeUpdate]) -> None:
        """Hand ``updates`` over as one batch when possible."""
        if not updates:
            return
        if self.supports_batch:
            self.batch_update_ranges(list(updates))
            return
        for idx, new_range in updates:
            self.update_range(idx, new_range)


class CallbackSink(LayoutSink):
    """Adapter for hosts that hand over loose callables."""

    def __init__(
        self,
        on_range: Optional[Callable[[int, BitRange], None]] = None,
        on_batch: Optional[Callable[[List[RangeUpdate]], None]] = None,
        on_reset: Optional[Callable[[int, Optional[int]], None]] = None,
        on_create: Optional[Callable[[BitRange, str], None]] = None,
        on_preview: Optional[Callable[[Optional[List[RangeUpdate]]], None]] = None,
    ):
        self._on_range = on_range
        self._on_batch = on_batch
        self._on_reset = on_reset
        self._on_create = on_create
        self._on_preview = on_preview
        self.supports_batch = on_batch is not None

    def update_range(self, field_index, new_range):
        if self._on_range:
            self._on_range(field_index, new_range)

    def batch_update_ranges(self, updates):
        if self._on_batch:
            self._on_batch(list(updates))

    def update_reset_value(self, field_index, value):
        if self._on_reset:
            self._on_reset(field_index, value)

    def create_field(self, new_range, name):
        if self._on_create:
            self._on_create(new_range, name)

    def preview(self, updates):
        if self._on_preview:
            self._on_preview(None if updates is None else list(updates))

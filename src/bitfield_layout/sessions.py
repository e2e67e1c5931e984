"""Gesture state machines for resizing, creating and reordering fields.

All three controllers drive one explicit :class:`DragSession`.  Its ``state``
is one of :class:`Idle`, :class:`ActiveResize`, :class:`ActiveCreate` or
:class:`ActiveReorder`; a gesture exists only between ``begin`` and
``commit``/``cancel``.  Nothing reaches the sink before commit except the
reorder preview, and cancelling always lands back on :class:`Idle` with the
field list untouched.

Controllers sharing a session cannot overlap: ``begin`` is ignored while any
gesture is active.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple, Union

from . import config
from .boundaries import gap_boundary, resize_span
from .logutil import analysis_logger
from .model import FieldRange
from .ranges import bit_owner_array, field_range, owner_at
from .reorder import compute_reorder_preview
from .segments import Segment, build_segments, to_range_updates
from .sink import LayoutSink

logger = logging.getLogger("bitfield_layout.sessions")


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class ActiveResize:
    target_field_index: int
    original_range: FieldRange
    anchor_bit: int
    current_bit: int
    min_bit: int
    max_bit: int


@dataclass(frozen=True)
class ActiveCreate:
    anchor_bit: int
    current_bit: int
    min_bit: int
    max_bit: int

    @property
    def target_field_index(self) -> None:
        return None


@dataclass(frozen=True)
class ActiveReorder:
    dragged_field_index: int
    preview_segments: Tuple[Segment, ...]
    initial_segments: Tuple[Segment, ...]
    fields: Tuple[Any, ...] = field(repr=False)
    register_size: int = 0


SessionState = Union[Idle, ActiveResize, ActiveCreate, ActiveReorder]
IDLE = Idle()


@dataclass
class DragSession:
    """The single mutable record of an in-progress gesture."""

    state: SessionState = IDLE

    @property
    def active(self) -> bool:
        return not isinstance(self.state, Idle)

    def reset(self) -> None:
        self.state = IDLE


def _selected_span(state: Union[ActiveResize, ActiveCreate]) -> Tuple[int, int]:
    lo = min(state.anchor_bit, state.current_bit)
    hi = max(state.anchor_bit, state.current_bit)
    return lo, hi


class _DragController:
    state_type: type = Idle

    def __init__(self, session: Optional[DragSession] = None, sink: Optional[LayoutSink] = None):
        self.session = session if session is not None else DragSession()
        self.sink = sink if sink is not None else LayoutSink()

    @property
    def active(self) -> bool:
        return isinstance(self.session.state, self.state_type)

    def _can_begin(self, register_size: int, bit: int) -> bool:
        if self.session.active:
            logger.debug("%s ignored: gesture already active", type(self).__name__)
            return False
        return 0 <= bit < register_size

    def _clamped_move(self, bit: int) -> None:
        state = self.session.state
        if not isinstance(state, self.state_type):
            return
        clamped = max(state.min_bit, min(bit, state.max_bit))
        if clamped != state.current_bit:
            self.session.state = dataclasses.replace(state, current_bit=clamped)

    def cancel(self) -> None:
        if self.active:
            analysis_logger.analysis("%s cancel", type(self).__name__)
            self.session.reset()

    # losing input focus is a cancel
    blur = cancel


class ResizeDrag(_DragController):
    """Redefine a field's range by dragging one of its edges."""

    state_type = ActiveResize

    def begin(self, fields: Sequence[Any], register_size: int, bit: int) -> bool:
        if not self._can_begin(register_size, bit):
            return False
        idx = owner_at(bit_owner_array(fields, register_size), bit)
        if idx is None:
            return False
        r = field_range(fields[idx])
        if r is None:
            return False
        span = resize_span(fields, idx, register_size)
        # the edge nearer the grab point moves, the other one stays put
        grabbing_msb = bit >= (r.lo + r.hi) / 2
        anchor = r.lo if grabbing_msb else r.hi
        self.session.state = ActiveResize(idx, r, anchor, bit, span.min_bit, span.max_bit)
        analysis_logger.analysis(
            "resize begin field=%d anchor=%d span=[%d,%d]", idx, anchor, span.min_bit, span.max_bit
        )
        return True

    def move(self, bit: int) -> None:
        self._clamped_move(bit)

    def commit(self) -> Optional[Tuple[int, int]]:
        state = self.session.state
        if not isinstance(state, ActiveResize):
            return None
        self.session.reset()
        lo, hi = _selected_span(state)
        if lo > hi:
            return None
        logger.info("resize field %d to [%d:%d]", state.target_field_index, hi, lo)
        self.sink.update_range(state.target_field_index, (hi, lo))
        return (hi, lo)


class CreateDrag(_DragController):
    """Carve a new field out of the gap under the pointer."""

    state_type = ActiveCreate

    def begin(self, fields: Sequence[Any], register_size: int, bit: int) -> bool:
        if not self._can_begin(register_size, bit):
            return False
        owners = bit_owner_array(fields, register_size)
        if owner_at(owners, bit) is not None:
            return False
        span = gap_boundary(bit, owners, register_size)
        self.session.state = ActiveCreate(bit, bit, span.min_bit, span.max_bit)
        analysis_logger.analysis("create begin bit=%d gap=[%d,%d]", bit, span.min_bit, span.max_bit)
        return True

    def move(self, bit: int) -> None:
        self._clamped_move(bit)

    def commit(self) -> Optional[Tuple[int, int]]:
        state = self.session.state
        if not isinstance(state, ActiveCreate):
            return None
        self.session.reset()
        lo, hi = _selected_span(state)
        if lo > hi:
            return None
        logger.info("create field %r at [%d:%d]", config.NEW_FIELD_NAME, hi, lo)
        self.sink.create_field((hi, lo), config.NEW_FIELD_NAME)
        return (hi, lo)


class ReorderDrag(_DragController):
    """Move a field along the register, previewing every step."""

    state_type = ActiveReorder

    def begin(self, fields: Sequence[Any], register_size: int, bit: int) -> bool:
        if not self._can_begin(register_size, bit):
            return False
        idx = owner_at(bit_owner_array(fields, register_size), bit)
        if idx is None:
            return False
        segments = tuple(build_segments(fields, register_size))
        self.session.state = ActiveReorder(idx, segments, segments, tuple(fields), register_size)
        analysis_logger.analysis("reorder begin field=%d", idx)
        return True

    def move(self, bit: int) -> None:
        state = self.session.state
        if not isinstance(state, ActiveReorder):
            return
        preview = compute_reorder_preview(bit, state.dragged_field_index, state.fields, state.register_size)
        if preview is None:
            return
        self.session.state = dataclasses.replace(state, preview_segments=tuple(preview.segments))
        self.sink.preview(preview.updates)

    @property
    def preview_updates(self) -> Optional[list]:
        state = self.session.state
        if not isinstance(state, ActiveReorder):
            return None
        return to_range_updates(state.preview_segments)

    def commit(self) -> Optional[list]:
        state = self.session.state
        if not isinstance(state, ActiveReorder):
            return None
        self.session.reset()
        updates = None
        if state.preview_segments != state.initial_segments:
            updates = to_range_updates(state.preview_segments)
            logger.info("reorder field %d: %s", state.dragged_field_index, updates)
            self.sink.commit_ranges(updates)
        else:
            analysis_logger.analysis("reorder release without movement")
        self.sink.preview(None)
        return updates

    def cancel(self) -> None:
        if self.active:
            analysis_logger.analysis("ReorderDrag cancel")
            self.session.reset()
            self.sink.preview(None)

    blur = cancel

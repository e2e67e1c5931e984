"""Host-facing facade over the layout engine.

:class:`BitFieldEditor` binds one authoritative field list, a register and
a :class:`~.sink.LayoutSink`.  It is what a view talks to: bit clicks,
keyboard commands, modifier drags and the register value text box all come
through here and leave as sink calls.  The editor never edits its own field
list; the host answers sink calls by pushing a new list with
:meth:`BitFieldEditor.replace_fields`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import numpy as np

from . import codec, config
from .boundaries import keyboard_resize_range, resizable_edges, ResizableEdges
from .model import Register
from .ranges import bit_owner_array, field_range, owner_at
from .reorder import keyboard_reorder_updates
from .segments import Segment, build_segments
from .sessions import CreateDrag, DragSession, ReorderDrag, ResizeDrag
from .sink import LayoutSink

logger = logging.getLogger("bitfield_layout.editor")

SHIFT = "shift"
CTRL = "ctrl"


@dataclass
class RegisterValueDraft:
    """Text box state for typing a whole-register value."""

    editor: "BitFieldEditor" = field(repr=False)
    view: str = "hex"
    text: str = ""
    editing: bool = False
    error: Optional[str] = None

    def __post_init__(self) -> None:
        self.refresh()

    def refresh(self) -> None:
        """Show the current register value unless the user is typing."""
        if self.editing:
            return
        self.text = codec.format_register_value(self.editor.register_value(), self.view)
        self.error = None

    def toggle_view(self) -> None:
        self.view = "dec" if self.view == "hex" else "hex"
        self.refresh()

    def edit(self, text: str) -> Optional[str]:
        self.editing = True
        self.text = text
        self.error = codec.validate_register_value(
            codec.parse_register_value(text), self.editor.register.width
        )
        return self.error

    def commit(self) -> bool:
        parsed = codec.parse_register_value(self.text)
        self.error = codec.validate_register_value(parsed, self.editor.register.width)
        self.editing = False
        if self.error is not None or parsed is None:
            return False
        self.editor.apply_register_value(parsed)
        return True


class BitFieldEditor:
    def __init__(self, fields: Sequence[Any], register_size: Optional[int] = None, sink: Optional[LayoutSink] = None):
        self.register = Register(register_size if register_size is not None else config.DEFAULT_REGISTER_SIZE)
        self.sink = sink if sink is not None else LayoutSink()
        self.fields: List[Any] = list(fields)
        self.session = DragSession()
        self.resize = ResizeDrag(self.session, self.sink)
        self.create = CreateDrag(self.session, self.sink)
        self.reorder = ReorderDrag(self.session, self.sink)
        self.value_draft = RegisterValueDraft(self)

    @property
    def register_size(self) -> int:
        return self.register.width

    def replace_fields(self, fields: Sequence[Any]) -> None:
        self.fields = list(fields)
        self.value_draft.refresh()

    # ------------------------------------------------------------------
    # derived views
    # ------------------------------------------------------------------
    def segments(self) -> List[Segment]:
        return build_segments(self.fields, self.register_size)

    def owners(self) -> np.ndarray:
        return bit_owner_array(self.fields, self.register_size)

    def bit_values(self) -> np.ndarray:
        return codec.bit_values(self.fields, self.register_size)

    def register_value(self) -> int:
        return codec.compose_register_value(self.fields, self.register_size)

    def edges(self, field_index: int) -> Optional[ResizableEdges]:
        if not 0 <= field_index < len(self.fields):
            return None
        r = field_range(self.fields[field_index])
        if r is None:
            return None
        return resizable_edges(r.lo, r.hi, self.owners(), self.register_size)

    # ------------------------------------------------------------------
    # bit and value edits
    # ------------------------------------------------------------------
    def set_bit(self, bit: int, desired: int) -> bool:
        """Write one register bit through the reset value of its field."""
        idx = owner_at(self.owners(), bit)
        if idx is None:
            return False
        r = field_range(self.fields[idx])
        current = codec.reset_value_of(self.fields[idx])
        self.sink.update_reset_value(idx, codec.set_bit(current, bit - r.lo, desired))
        return True

    def toggle_bit(self, bit: int) -> bool:
        values = self.bit_values()
        if not 0 <= bit < len(values):
            return False
        return self.set_bit(bit, 0 if values[bit] else 1)

    def apply_register_value(self, value) -> None:
        for idx, sub in codec.decompose_register_value(self.fields, value):
            self.sink.update_reset_value(idx, sub)

    # ------------------------------------------------------------------
    # keyboard commands
    # ------------------------------------------------------------------
    def resize_edge(self, field_index: int, edge: str) -> bool:
        new_range = keyboard_resize_range(self.fields, self.register_size, field_index, edge)
        if new_range is None:
            return False
        self.sink.update_range(field_index, new_range)
        return True

    def move_field(self, field_index: int, direction: str) -> bool:
        updates = keyboard_reorder_updates(self.fields, self.register_size, field_index, direction)
        if not updates:
            return False
        self.sink.commit_ranges(updates)
        return True

    # ------------------------------------------------------------------
    # pointer gestures
    # ------------------------------------------------------------------
    def begin_drag(self, bit: int, modifier: str) -> bool:
        if modifier == CTRL:
            return self.reorder.begin(self.fields, self.register_size, bit)
        if modifier == SHIFT:
            if owner_at(self.owners(), bit) is not None:
                return self.resize.begin(self.fields, self.register_size, bit)
            return self.create.begin(self.fields, self.register_size, bit)
        return False

    def _active_controller(self):
        for controller in (self.resize, self.create, self.reorder):
            if controller.active:
                return controller
        return None

    def drag_to(self, bit: int) -> None:
        controller = self._active_controller()
        if controller is not None:
            controller.move(bit)

    def release(self):
        controller = self._active_controller()
        if controller is None:
            return None
        return controller.commit()

    def cancel(self) -> None:
        controller = self._active_controller()
        if controller is not None:
            controller.cancel()

    def blur(self) -> None:
        self.cancel()

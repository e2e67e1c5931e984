from .model import (
    LayoutError, Register, FieldRecord, FieldRange, RangeUpdate, ResetUpdate,
    apply_range_updates,
)
from .ranges import (
    FREE_BIT, field_range, parse_bits_range, parse_bits_like, format_bits,
    bit_owner_array,
)
from .codec import (
    bit_at, set_bit, parse_register_value, validate_register_value,
    format_register_value, max_for_bits, extract_bits, bit_values,
    compose_register_value, decompose_register_value,
)
from .segments import (
    FieldSegment, GapSegment, Segment, build_segments, repack,
    to_range_updates, is_partition,
)
from .boundaries import (
    MSB, LSB, resize_boundary, gap_boundary, resizable_edges,
    keyboard_resize_range,
)
from .reorder import ReorderPreview, keyboard_reorder_updates, compute_reorder_preview
from .sink import LayoutSink, CallbackSink
from .sessions import (
    DragSession, Idle, ActiveResize, ActiveCreate, ActiveReorder,
    ResizeDrag, CreateDrag, ReorderDrag,
)
from .editor import BitFieldEditor, RegisterValueDraft

__all__ = [
    'LayoutError', 'Register', 'FieldRecord', 'FieldRange', 'RangeUpdate',
    'ResetUpdate', 'apply_range_updates',
    'FREE_BIT', 'field_range', 'parse_bits_range', 'parse_bits_like',
    'format_bits', 'bit_owner_array',
    'bit_at', 'set_bit', 'parse_register_value', 'validate_register_value',
    'format_register_value', 'max_for_bits', 'extract_bits', 'bit_values',
    'compose_register_value', 'decompose_register_value',
    'FieldSegment', 'GapSegment', 'Segment', 'build_segments', 'repack',
    'to_range_updates', 'is_partition',
    'MSB', 'LSB', 'resize_boundary', 'gap_boundary', 'resizable_edges',
    'keyboard_resize_range',
    'ReorderPreview', 'keyboard_reorder_updates', 'compute_reorder_preview',
    'LayoutSink', 'CallbackSink',
    'DragSession', 'Idle', 'ActiveResize', 'ActiveCreate', 'ActiveReorder',
    'ResizeDrag', 'CreateDrag', 'ReorderDrag',
    'BitFieldEditor', 'RegisterValueDraft',
]

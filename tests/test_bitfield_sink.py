from src.bitfield_layout import config
from src.bitfield_layout.editor import BitFieldEditor
from src.bitfield_layout.model import RangeUpdate
from src.bitfield_layout.sessions import ReorderDrag
from src.bitfield_layout.sink import CallbackSink


DRAG_UPDATES = [RangeUpdate(1, (5, 2)), RangeUpdate(0, (1, 0))]


def recording_callbacks(calls, names):
    makers = {
        "on_range": lambda i, r: calls.append(("range", i, r)),
        "on_batch": lambda u: calls.append(("batch", u)),
        "on_reset": lambda i, v: calls.append(("reset", i, v)),
        "on_create": lambda r, n: calls.append(("create", r, n)),
        "on_preview": lambda u: calls.append(("preview", u)),
    }
    return {name: makers[name] for name in names}


def drag_a_to_bit_two(fields, sink):
    drag = ReorderDrag(sink=sink)
    assert drag.begin(fields, 8, 7)
    drag.move(2)
    return drag.commit()


def test_batch_callback_enables_batching(worked_fields):
    calls = []
    sink = CallbackSink(**recording_callbacks(calls, ["on_range", "on_batch"]))
    assert sink.supports_batch

    assert drag_a_to_bit_two(worked_fields, sink) == DRAG_UPDATES
    assert calls == [("batch", DRAG_UPDATES)]


def test_range_callback_alone_gets_one_call_per_field(worked_fields):
    calls = []
    sink = CallbackSink(**recording_callbacks(calls, ["on_range", "on_preview"]))
    assert not sink.supports_batch

    drag_a_to_bit_two(worked_fields, sink)
    assert calls == [
        ("preview", DRAG_UPDATES),
        ("range", 1, (5, 2)),
        ("range", 0, (1, 0)),
        ("preview", None),
    ]


def test_missing_callbacks_are_skipped(worked_fields):
    sink = CallbackSink()
    assert not sink.supports_batch
    assert drag_a_to_bit_two(worked_fields, sink) == DRAG_UPDATES

    editor = BitFieldEditor(worked_fields, 8, sink)
    assert editor.move_field(1, "msb")
    assert editor.set_bit(0, 0)
    assert editor.begin_drag(4, "shift")
    assert editor.release() == (4, 4)


def test_preview_callback_gets_a_list_then_none(worked_fields):
    calls = []
    sink = CallbackSink(**recording_callbacks(calls, ["on_preview"]))
    drag = ReorderDrag(sink=sink)
    drag.begin(worked_fields, 8, 7)
    drag.move(2)
    drag.cancel()
    assert calls == [("preview", DRAG_UPDATES), ("preview", None)]
    assert isinstance(calls[0][1], list)


def test_editor_routes_through_callbacks(worked_fields):
    calls = []
    sink = CallbackSink(**recording_callbacks(
        calls, ["on_range", "on_batch", "on_reset", "on_create"]
    ))
    editor = BitFieldEditor(worked_fields, 8, sink)

    assert editor.move_field(1, "msb")
    assert editor.resize_edge(1, "msb")
    assert editor.set_bit(1, 1)
    editor.begin_drag(4, "shift")
    editor.drag_to(5)
    editor.release()

    assert calls == [
        ("batch", [RangeUpdate(0, (7, 6)), RangeUpdate(1, (5, 2))]),
        ("range", 1, (4, 0)),
        ("reset", 1, 7),
        ("create", (5, 4), config.NEW_FIELD_NAME),
    ]

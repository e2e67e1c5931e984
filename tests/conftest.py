import os

import pytest

from src.bitfield_layout.logutil import set_analysis
from src.bitfield_layout.model import FieldRecord
from src.bitfield_layout.sink import LayoutSink


def pytest_addoption(parser):
    parser.addoption(
        "--bitfield-analysis",
        action="store_true",
        help="Print gesture analysis lines while tests run",
    )


def pytest_configure(config):
    if config.getoption("--bitfield-analysis"):
        os.environ["BITFIELD_ANALYSIS"] = "1"
        set_analysis(True)


class RecordingSink(LayoutSink):
    """Keeps every call in order as ``(kind, *args)`` tuples."""

    def __init__(self, batch=True):
        self.calls = []
        self.supports_batch = batch

    def update_range(self, field_index, new_range):
        self.calls.append(("range", field_index, new_range))

    def batch_update_ranges(self, updates):
        self.calls.append(("batch", list(updates)))

    def update_reset_value(self, field_index, value):
        self.calls.append(("reset", field_index, value))

    def create_field(self, new_range, name):
        self.calls.append(("create", new_range, name))

    def preview(self, updates):
        self.calls.append(("preview", None if updates is None else list(updates)))

    def kinds(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def unbatched_sink():
    return RecordingSink(batch=False)


@pytest.fixture
def worked_fields():
    """Register of 8 bits: A=[7:6], gap [5:4], B=[3:0]."""
    return [
        FieldRecord(name="A", bit_range=(7, 6), reset_value=1),
        FieldRecord(name="B", bit_range=(3, 0), reset_value=5),
    ]

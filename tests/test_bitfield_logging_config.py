import logging

import pytest

from src.bitfield_layout import config
from src.bitfield_layout.logutil import ANALYSIS, analysis_logger, set_analysis
from src.bitfield_layout.model import LayoutError, Register
from src.bitfield_layout.sessions import CreateDrag, ResizeDrag


@pytest.fixture
def analysis_records(caplog):
    analysis_logger.addHandler(caplog.handler)
    set_analysis(True)
    yield caplog
    analysis_logger.removeHandler(caplog.handler)
    set_analysis(config.ANALYSIS_ENABLED)


def test_env_int(monkeypatch):
    monkeypatch.setenv("BITFIELD_TEST_INT", "0x10")
    assert config._env_int("BITFIELD_TEST_INT", 7) == 16
    monkeypatch.setenv("BITFIELD_TEST_INT", "wide")
    assert config._env_int("BITFIELD_TEST_INT", 7) == 7
    monkeypatch.delenv("BITFIELD_TEST_INT")
    assert config._env_int("BITFIELD_TEST_INT", 7) == 7


@pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("0", False), ("false", False), ("", False)])
def test_env_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("BITFIELD_TEST_FLAG", raw)
    assert config._env_flag("BITFIELD_TEST_FLAG") is expected


def test_safe_integer_max(monkeypatch):
    assert config.safe_integer_max() == 2 ** 53 - 1
    monkeypatch.setattr(config, "PRECISION_BITS", 32)
    assert config.safe_integer_max() == 0xFFFFFFFF


def test_register_defaults_and_validation():
    assert Register().width == config.DEFAULT_REGISTER_SIZE
    with pytest.raises(LayoutError):
        Register(0)
    with pytest.raises(ValueError):
        Register("8")


def test_new_field_name_is_configurable(monkeypatch, worked_fields, sink):
    monkeypatch.setattr(config, "NEW_FIELD_NAME", "fresh")
    drag = CreateDrag(sink=sink)
    drag.begin(worked_fields, 8, 4)
    drag.commit()
    assert sink.calls == [("create", (4, 4), "fresh")]


def test_analysis_lines_follow_gestures(analysis_records, worked_fields):
    drag = ResizeDrag()
    drag.begin(worked_fields, 8, 3)
    drag.cancel()
    records = [r for r in analysis_records.records if r.levelno == ANALYSIS]
    assert [r.levelname for r in records] == ["ANALYSIS", "ANALYSIS"]
    assert records[0].getMessage() == "resize begin field=1 anchor=0 span=[0,5]"
    assert records[1].getMessage() == "ResizeDrag cancel"


def test_analysis_is_silent_when_disabled(analysis_records, worked_fields):
    set_analysis(False)
    drag = ResizeDrag()
    drag.begin(worked_fields, 8, 3)
    assert not [r for r in analysis_records.records if r.levelno == ANALYSIS]


def test_commits_log_at_info(caplog, worked_fields):
    drag = ResizeDrag()
    drag.begin(worked_fields, 8, 3)
    with caplog.at_level(logging.INFO, logger="bitfield_layout"):
        drag.commit()
    assert "resize field 1 to [3:0]" in caplog.text

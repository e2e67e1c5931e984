import math

import numpy as np
import pytest

from src.bitfield_layout import codec, config
from src.bitfield_layout.model import FieldRecord, ResetUpdate, with_reset_value


@pytest.mark.parametrize("value,bit,expected", [
    (5, 0, 1),
    (5, 1, 0),
    (5, 2, 1),
    (5, 40, 0),
    (5.9, 0, 1),
    (math.nan, 0, 0),
    (math.inf, 3, 0),
    (-1, 0, 0),
    (5, -1, 0),
])
def test_bit_at(value, bit, expected):
    assert codec.bit_at(value, bit) == expected


@pytest.mark.parametrize("value,bit,desired,expected", [
    (5, 1, 1, 7),
    (5, 0, 0, 4),
    (5, 0, 1, 5),
    (math.nan, 3, 1, 8),
    (-3, 0, 1, 1),
    (4.7, 0, 1, 5),
    (6, -2, 1, 6),
])
def test_set_bit(value, bit, desired, expected):
    assert codec.set_bit(value, bit, desired) == expected


@pytest.mark.parametrize("text,expected", [
    (" 42 ", 42),
    ("0x1F", 31),
    ("0X1f", 31),
    ("0b101", 5),
    ("0o17", 15),
    ("010", 10),
    ("-3", -3),
    ("2.5", 2.5),
    ("1e3", 1000),
    ("", None),
    ("   ", None),
    ("abc", None),
    ("0x", None),
    ("nan", None),
    ("inf", None),
])
def test_parse_register_value(text, expected):
    assert codec.parse_register_value(text) == expected


def test_validate_register_value():
    assert codec.validate_register_value(None, 8) == "Value is required"
    assert codec.validate_register_value(math.nan, 8) == "Invalid number"
    assert codec.validate_register_value(-1, 8) == "Value must be >= 0"
    assert codec.validate_register_value(2.5, 8) == "Value must be an integer"
    assert codec.validate_register_value(256, 8) == "Value too large for 8 bit(s)"
    assert codec.validate_register_value(255, 8) is None


def test_max_for_bits_saturates_at_precision_ceiling():
    assert codec.max_for_bits(0) == 0
    assert codec.max_for_bits(-4) == 0
    assert codec.max_for_bits(1) == 1
    assert codec.max_for_bits(8) == 255
    assert codec.max_for_bits(52) == 2 ** 52 - 1
    assert codec.max_for_bits(53) == 2 ** 53 - 1
    assert codec.max_for_bits(64) == 2 ** 53 - 1


def test_precision_ceiling_follows_config(monkeypatch):
    monkeypatch.setattr(config, "PRECISION_BITS", 8)
    assert codec.max_for_bits(16) == 255
    assert codec.extract_bits(0x1234, 0, 16) == 0x1234 % 256


def test_extract_bits():
    assert codec.extract_bits(0b110100, 2, 3) == 0b101
    assert codec.extract_bits(0xFF, 4, 0) == 0
    assert codec.extract_bits(math.nan, 0, 4) == 0
    # wide slices lose everything above the precision ceiling
    assert codec.extract_bits(2 ** 60 + 5, 0, 64) == 5


def test_format_register_value():
    assert codec.format_register_value(31) == "0x1F"
    assert codec.format_register_value(31, "dec") == "31"
    assert codec.format_register_value(0) == "0x0"


def test_bit_values_and_compose(worked_fields):
    values = codec.bit_values(worked_fields, 8)
    assert values.dtype == np.uint8
    assert values.tolist() == [1, 0, 1, 0, 0, 0, 1, 0]
    assert codec.compose_register_value(worked_fields, 8) == 0b01000101


def test_compose_skips_unresolvable_fields():
    fields = [
        {"name": "ok", "bit_range": [1, 0], "reset_value": 3},
        {"name": "broken", "bit_range": [math.nan, 2], "reset_value": 7},
        {"name": "unset", "bit": 4, "reset_value": None},
    ]
    assert codec.compose_register_value(fields, 8) == 3
    assert codec.decompose_register_value(fields, 0xFF) == [ResetUpdate(0, 3), ResetUpdate(2, 1)]


def test_full_coverage_round_trip_is_lossless():
    fields = [FieldRecord("all", bit_range=(3, 0), reset_value=5)]
    value = codec.compose_register_value(fields, 4)
    assert value == 5
    updates = codec.decompose_register_value(fields, value)
    assert updates == [ResetUpdate(0, 5)]
    restored = [with_reset_value(fields[idx], v) for idx, v in updates]
    assert restored == fields


def test_round_trip_through_gap_is_lossy():
    fields = [FieldRecord("hi", bit_range=(3, 2), reset_value=2)]
    assert codec.compose_register_value(fields, 4) == 8

    updates = codec.decompose_register_value(fields, 11)  # 0b1011
    assert updates == [ResetUpdate(0, 2)]
    fields = [with_reset_value(fields[0], updates[0].value)]
    assert fields[0].reset_value == 2
    # the low two bits had no field to live in
    assert codec.compose_register_value(fields, 4) == 8

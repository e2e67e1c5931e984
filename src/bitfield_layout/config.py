"""Environment-driven settings for the layout engine.

Values are read once at import time.  Tests and hosts that need different
values can patch the module attributes directly.
"""
from __future__ import annotations

import os

_FALSY = ("0", "false", "False", "no", "No", "")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        return default


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default) not in _FALSY


DEFAULT_REGISTER_SIZE = _env_int("BITFIELD_DEFAULT_REGISTER_SIZE", 32)
NEW_FIELD_NAME = os.environ.get("BITFIELD_NEW_FIELD_NAME", "new_field")
# Hosts exchange values as IEEE doubles; integers past 53 bits lose precision.
PRECISION_BITS = _env_int("BITFIELD_PRECISION_BITS", 53)
ANALYSIS_ENABLED = _env_flag("BITFIELD_ANALYSIS")


def safe_integer_max() -> int:
    """Largest integer the host can represent exactly."""
    return (1 << PRECISION_BITS) - 1

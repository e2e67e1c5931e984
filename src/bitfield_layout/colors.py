"""Stable colour tokens for field segments.

A field's colour depends on its name only, so a field keeps its colour while
it is being resized or moved around the register.
"""
from __future__ import annotations

FIELD_COLORS = {
    # primary
    "blue": "#3b82f6",
    "red": "#ef4444",
    "green": "#10b981",
    "yellow": "#eab308",
    "purple": "#a855f7",
    "pink": "#ec4899",
    "cyan": "#06b6d4",
    "orange": "#f97316",
    # secondary
    "indigo": "#6366f1",
    "violet": "#8b5cf6",
    "fuchsia": "#d946ef",
    "rose": "#f43f5e",
    "sky": "#0ea5e9",
    "teal": "#14b8a6",
    "emerald": "#059669",
    "lime": "#84cc16",
    # tertiary
    "amber": "#f59e0b",
    "coral": "#ff6b6b",
    "mint": "#4ade80",
    "lavender": "#c084fc",
    "peach": "#fb923c",
    "aqua": "#22d3ee",
    "salmon": "#fb7185",
    "olive": "#a3e635",
    # extra
    "plum": "#9333ea",
    "turquoise": "#2dd4bf",
    "crimson": "#dc2626",
    "chartreuse": "#bef264",
    "periwinkle": "#818cf8",
    "tangerine": "#f97316",
    "jade": "#22c55e",
    "magenta": "#e879f9",
}

FIELD_COLOR_KEYS = list(FIELD_COLORS)


def _int32(value: int) -> int:
    return (value + 0x80000000) % 0x100000000 - 0x80000000


def field_color(name: str) -> str:
    """Return the palette key for ``name``."""
    h = 0
    for ch in name:
        h = _int32((h << 5) - h + ord(ch))
    return FIELD_COLOR_KEYS[abs(h) % len(FIELD_COLOR_KEYS)]

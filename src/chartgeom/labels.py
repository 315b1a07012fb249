"""Value formatting, label elision, and tooltip text for cell labels."""

from __future__ import annotations

import math
from typing import Iterable

from .theme import LABELS


def format_value(value: float) -> str:
    """Integer with thousands grouping, like d3.format(",d")."""
    if value is None or not math.isfinite(value):
        return "0"
    return f"{int(round(value)):,}"


def abbreviate_value(value: float) -> str:
    """Short form for cramped cells: 1.2M, 3.4K, or the plain integer."""
    num = int(round(value)) if math.isfinite(value) else 0
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def label_visible(width: float, height: float) -> bool:
    return width > LABELS["min_width"] and height > LABELS["min_height"]


def elide_name(name: str, width: float) -> str:
    """Fit a name into a cell of the given width.

    Below 40 units only the initial is kept, below 80 the middle is cut
    ("Sta...ion"), below 120 the tail is cut ("Station ..."). Wider cells
    keep the full name.
    """
    if not name:
        return name
    if width < LABELS["initial_below"]:
        return name[0].upper()

    max_length = math.floor(width / LABELS["char_width"])
    if width < LABELS["middle_below"]:
        if len(name) <= max_length:
            return name
        keep = max(0, max_length // 2 - 1)
        end = name[len(name) - keep:] if keep else ""
        return f"{name[:keep]}...{end}"
    if width < LABELS["truncate_below"]:
        return name if len(name) <= max_length else name[:max_length - 3] + "..."
    return name


def cell_value_text(value: float, width: float) -> str:
    if width < LABELS["abbreviate_below"]:
        return abbreviate_value(value)
    return format_value(value)


def tooltip(path: Iterable[str], value: float, sep: str = ".") -> str:
    """'<ancestor path or category>\\n<formatted value>'."""
    return f"{sep.join(str(p) for p in path)}\n{format_value(value)}"

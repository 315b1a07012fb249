"""Legend rows: one swatch and one caption per color-domain entry."""

from __future__ import annotations

from typing import Hashable, Sequence

from .geometry import Primitive, Rect, Text
from .scales import ColorScale
from .theme import COLORS, LAYOUT


def legend_row(
    keys: Sequence[Hashable],
    color: ColorScale,
    x: float,
    y: float,
    spacing: float = LAYOUT["legend_spacing"],
    caption_gap: float = 20,
) -> tuple[Primitive, ...]:
    """Swatches laid left to right from (x, y), in surface coordinates."""
    size = LAYOUT["legend_swatch"]
    items: list[Primitive] = []
    for i, key in enumerate(keys):
        fill = color(key)
        items.append(Rect(
            x + i * spacing, y, size, size,
            fill=fill, label=str(key), key=f"legend:{i}:{key}", role="legend",
        ))
        items.append(Text(
            x + i * spacing + caption_gap, y + 10, str(key),
            fill=COLORS["muted"], key=f"legend-text:{i}:{key}", role="legend",
        ))
    return tuple(items)

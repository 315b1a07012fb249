"""Chart configuration threaded explicitly through every layout call."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from .theme import MARGIN, PALETTE, LAYOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Margin:
    top: float = MARGIN["top"]
    right: float = MARGIN["right"]
    bottom: float = MARGIN["bottom"]
    left: float = MARGIN["left"]

    @classmethod
    def from_mapping(cls, values: Mapping[str, float] | None) -> Margin:
        """Build a margin, keeping defaults for any side not given."""
        if not values:
            return cls()
        return cls(**{side: float(values[side]) for side in ("top", "right", "bottom", "left") if side in values})

    def inner(self, width: float, height: float) -> tuple[float, float]:
        """Drawable (width, height) after subtracting the margins, never negative."""
        return (
            max(0.0, width - self.left - self.right),
            max(0.0, height - self.top - self.bottom),
        )


# camelCase option name -> ChartConfig field
_OPTION_NAMES = {
    "margin": "margin",
    "colorPalette": "color_palette",
    "showAxisX": "show_axis_x",
    "showAxisY": "show_axis_y",
    "showLegend": "show_legend",
    "showLabels": "show_labels",
    "animationsEnabled": "animations_enabled",
    "hexRadius": "hex_radius",
    "valueField": "value_field",
    "binCountHint": "bin_count_hint",
}


@dataclass(frozen=True)
class ChartConfig:
    margin: Margin = field(default_factory=Margin)
    color_palette: tuple[str, ...] = PALETTE
    show_axis_x: bool = True
    show_axis_y: bool = True
    show_legend: bool = True
    show_labels: bool = True
    animations_enabled: bool = True
    hex_radius: float | None = None
    value_field: str = "value"
    bin_count_hint: int | None = None
    treemap_padding: float = LAYOUT["treemap_padding"]
    round: bool = True

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> ChartConfig:
        """Parse a recognised option bundle; unknown keys fall back to defaults.

        Accepts both the camelCase names of the option bundle (``showLegend``)
        and the dataclass field names (``show_legend``).
        """
        if not options:
            return cls()

        fields: dict[str, Any] = {}
        known = set(_OPTION_NAMES.values()) | {"treemap_padding", "round"}
        for key, value in options.items():
            name = _OPTION_NAMES.get(key, key)
            if name not in known:
                logger.debug("Ignoring unrecognised chart option %r", key)
                continue
            if value is None and name not in ("hex_radius", "bin_count_hint"):
                continue
            fields[name] = value

        if "margin" in fields and not isinstance(fields["margin"], Margin):
            fields["margin"] = Margin.from_mapping(fields["margin"])
        if "color_palette" in fields:
            fields["color_palette"] = tuple(fields["color_palette"])
        return cls(**fields)

    def with_options(self, **changes: Any) -> ChartConfig:
        return replace(self, **changes)

"""
Hexagonal binning over a bounded plane.

Points are assigned to cells by converting Cartesian coordinates to
fractional axial coordinates and rounding in cube space, so each point costs
O(1) regardless of how many cells exist. Only non-empty cells are emitted.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from .config import ChartConfig
from .errors import InvalidRadiusError
from .geometry import Dimensions, Hexagon, Primitive, Scene, Text, check_radius
from .labels import format_value
from .scales import LinearScale, ScaleDomainBuilder
from .theme import COLORS, LAYOUT

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3)
ORIENTATIONS = ("pointy", "flat")


class HexGrid:
    """Axial-coordinate hex grid with a given circumradius."""

    def __init__(self, radius: float, orientation: str = "pointy"):
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown hex orientation {orientation!r}")
        self.radius = check_radius(radius)
        self.orientation = orientation

    def to_axial(self, xs: Sequence[float], ys: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
        """Nearest cell (q, r) for each point."""
        x = np.asarray(xs, dtype=float) / self.radius
        y = np.asarray(ys, dtype=float) / self.radius
        if self.orientation == "pointy":
            qf = SQRT3 / 3 * x - y / 3
            rf = 2 / 3 * y
        else:
            qf = 2 / 3 * x
            rf = -x / 3 + SQRT3 / 3 * y
        return _cube_round(qf, rf)

    def center(self, q: int, r: int) -> tuple[float, float]:
        if self.orientation == "pointy":
            return self.radius * SQRT3 * (q + r / 2), self.radius * 1.5 * r
        return self.radius * 1.5 * q, self.radius * SQRT3 * (r + q / 2)


def _cube_round(qf: np.ndarray, rf: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    sf = -qf - rf
    q, r, s = np.rint(qf), np.rint(rf), np.rint(sf)
    dq, dr, ds = np.abs(q - qf), np.abs(r - rf), np.abs(s - sf)
    fix_q = (dq > dr) & (dq > ds)
    fix_r = ~fix_q & (dr > ds)
    q = np.where(fix_q, -r - s, q)
    r = np.where(fix_r, -q - s, r)
    return q.astype(int), r.astype(int)


@dataclass
class HexBin:
    q: int
    r: int
    x: float
    y: float
    points: list[Mapping[str, Any]] = field(default_factory=list)

    @property
    def first(self) -> Mapping[str, Any]:
        return self.points[0]


def bin_points(points: Sequence[Mapping[str, Any]], grid: HexGrid,
               xs: Sequence[float], ys: Sequence[float]) -> list[HexBin]:
    """Group points by cell; bins and their point lists keep input order."""
    qs, rs = grid.to_axial(xs, ys)
    bins: dict[tuple[int, int], HexBin] = {}
    for point, q, r in zip(points, qs.tolist(), rs.tolist()):
        hexbin = bins.get((q, r))
        if hexbin is None:
            cx, cy = grid.center(q, r)
            hexbin = bins[(q, r)] = HexBin(q, r, cx, cy)
        hexbin.points.append(point)
    return list(bins.values())


def resolve_radius(radius: Optional[float], config: ChartConfig, width: float, height: float) -> float:
    """Explicit radius, then config.hex_radius, then one derived from bin_count_hint."""
    if radius is not None:
        return check_radius(radius)
    if config.hex_radius is not None:
        return check_radius(config.hex_radius)
    if config.bin_count_hint and width > 0 and height > 0:
        # a pointy hex of circumradius R covers 3*sqrt(3)/2 * R^2
        return math.sqrt(width * height / (config.bin_count_hint * 1.5 * SQRT3))
    return float(LAYOUT["hex_radius"])


def _coordinate(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def hexbin_layout(
    points: Sequence[Mapping[str, Any]],
    dimensions: Dimensions,
    config: Optional[ChartConfig] = None,
    radius: Optional[float] = None,
    orientation: str = "pointy",
    fit_points: bool = False,
) -> Scene:
    """Hex cells for ``{x, y, value, label}`` points.

    By default point coordinates are already in the drawing extent's space.
    With ``fit_points`` they are mapped from their data extent onto the
    drawing extent (y inverted) and tick labels are emitted for enabled axes.
    """
    config = config or ChartConfig()
    if radius is not None and not radius > 0:
        raise InvalidRadiusError(f"Radius must be positive, got {radius}")
    if dimensions.is_empty or not points:
        return Scene.empty(dimensions.width, dimensions.height)

    width, height = config.margin.inner(dimensions.width, dimensions.height)
    if width == 0 or height == 0:
        return Scene.empty(dimensions.width, dimensions.height)

    grid = HexGrid(resolve_radius(radius, config, width, height), orientation)
    builder = ScaleDomainBuilder(config)

    xs = [_coordinate(p.get("x")) for p in points]
    ys = [_coordinate(p.get("y")) for p in points]
    x_scale = y_scale = None
    if fit_points:
        x_scale = builder.extent_scale(xs, width)
        y_scale = builder.extent_scale(ys, height, invert=True)
        xs = [x_scale(x) for x in xs]
        ys = [y_scale(y) for y in ys]

    bins = bin_points(points, grid, xs, ys)
    color = builder.color_scale(range(len(bins)))

    primitives: list[Primitive] = []
    for i, hexbin in enumerate(bins):
        first = hexbin.first
        value, label = first.get("value"), first.get("label")
        key = f"hex:{hexbin.q},{hexbin.r}"
        primitives.append(Hexagon(
            hexbin.x, hexbin.y, grid.radius, orientation,
            fill=color(i),
            label=label,
            key=key,
            tooltip=f"{label if label else f'{hexbin.q},{hexbin.r}'}\n{format_value(_coordinate(value))}",
            role="hex",
            opacity=LAYOUT["hex_opacity"],
            value=value,
        ))
        if config.show_labels:
            primitives.append(Text(hexbin.x, hexbin.y + 4, _display(value), fill=COLORS["text"],
                                   key=f"{key}#value", role="value-label", anchor="middle"))
            primitives.append(Text(hexbin.x, hexbin.y + grid.radius / 2, label or "", fill=COLORS["muted"],
                                   key=f"{key}#label", role="label", anchor="middle"))

    if x_scale is not None and config.show_axis_x:
        primitives.extend(_axis_ticks(x_scale, "x", height, max(4, math.floor(width / 80))))
    if y_scale is not None and config.show_axis_y:
        primitives.extend(_axis_ticks(y_scale, "y", 0.0, max(4, math.floor(height / 50))))

    logger.debug("Hexbin: %d points into %d cells (radius %.2f)", len(points), len(bins), grid.radius)
    return Scene(
        primitives=tuple(primitives),
        width=dimensions.width,
        height=dimensions.height,
        translate=((dimensions.width - width) / 2, (dimensions.height - height) / 2),
    )


def _axis_ticks(scale: LinearScale, axis: str, baseline: float, count: int) -> list[Text]:
    ticks = scale.ticks(count)
    if axis == "x":
        return [Text(scale(t), baseline + 12, f"{t:g}", fill=COLORS["muted"], key=f"axis-x:{t:g}",
                     role="axis", anchor="middle", value=t) for t in ticks]
    return [Text(baseline - 6, scale(t), f"{t:g}", fill=COLORS["muted"], key=f"axis-y:{t:g}",
                 role="axis", anchor="end", value=t) for t in ticks]

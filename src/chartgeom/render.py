"""Preview adapter: paint a Scene with matplotlib, then figure() / draw() / save()."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
from matplotlib import patches, transforms
from matplotlib.path import Path as MplPath

from . import geometry
from .style import PREVIEW, apply

_DEFAULT_DIR = Path.cwd() / "charts"

_CODES = {
    "M": [MplPath.MOVETO],
    "L": [MplPath.LINETO],
    "C": [MplPath.CURVE4] * 3,
    "Z": [MplPath.CLOSEPOLY],
}

_ANCHORS = {"start": "left", "middle": "center", "end": "right"}


def figure(width: float, height: float) -> tuple[plt.Figure, plt.Axes]:
    """Create a styled (fig, ax) pair in surface units: origin top-left, y down."""
    apply()
    dpi = PREVIEW["dpi"]
    fig = plt.figure(figsize=(max(width, 1) / dpi, max(height, 1) / dpi))
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, max(width, 1))
    ax.set_ylim(max(height, 1), 0)
    ax.set_aspect("equal", adjustable="box")
    return fig, ax


def save(
    fig: plt.Figure,
    filename: str,
    output_dir: str | Path | None = None,
) -> Path:
    """Save a figure to ./charts/ (or a custom directory).

    Returns the path to the saved file.
    """
    dest = Path(output_dir) if output_dir else _DEFAULT_DIR
    dest.mkdir(parents=True, exist_ok=True)
    path = dest / filename
    fig.savefig(path)
    plt.close(fig)
    return path


def _patch(primitive: geometry.Primitive) -> patches.Patch | None:
    style = {"facecolor": primitive.fill or "none", "alpha": primitive.opacity}
    if isinstance(primitive, geometry.Rect):
        return patches.Rectangle((primitive.x, primitive.y), primitive.width, primitive.height, **style)
    if isinstance(primitive, geometry.Hexagon):
        return patches.Polygon(primitive.corners(), closed=True, **style)
    if isinstance(primitive, geometry.Arc):
        # angles run clockwise from 12 o'clock; with y pointing down that is theta - 90
        return patches.Wedge(
            (primitive.cx, primitive.cy), primitive.outer_radius,
            math.degrees(primitive.start_angle) - 90, math.degrees(primitive.end_angle) - 90,
            width=primitive.outer_radius - primitive.inner_radius, **style,
        )
    if isinstance(primitive, geometry.Path):
        vertices: list[tuple[float, float]] = []
        codes: list[int] = []
        for op, *coords in primitive.commands:
            if op == "Z":
                vertices.append(vertices[-1] if vertices else (0.0, 0.0))
            else:
                vertices.extend(zip(coords[0::2], coords[1::2]))
            codes.extend(_CODES[op])
        if not vertices:
            return None
        return patches.PathPatch(MplPath(vertices, codes), **style)
    return None


def _paint(ax: plt.Axes, primitives: Iterable[geometry.Primitive], transform: transforms.Transform) -> None:
    for primitive in primitives:
        if isinstance(primitive, geometry.Text):
            if primitive.content:
                ax.text(primitive.x, primitive.y, primitive.content, color=primitive.fill,
                        alpha=primitive.opacity, ha=_ANCHORS.get(primitive.anchor, "left"),
                        va="baseline", transform=transform)
            continue
        patch = _patch(primitive)
        if patch is not None:
            patch.set_transform(transform)
            ax.add_patch(patch)


def draw(scene: geometry.Scene, ax: plt.Axes | None = None) -> tuple[plt.Figure, plt.Axes]:
    """Paint every primitive of a scene, applying its translate/scale."""
    if ax is None:
        fig, ax = figure(scene.width, scene.height)
    else:
        fig = ax.figure

    tx, ty = scene.translate
    local = transforms.Affine2D().scale(scene.scale).translate(tx, ty) + ax.transData
    _paint(ax, scene.primitives, local)
    _paint(ax, scene.legend, ax.transData)
    return fig, ax

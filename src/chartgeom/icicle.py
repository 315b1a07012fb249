"""
Icicle (layered partition) layout.

Depth runs left to right; each node's vertical band is its parent's band
split by value share. Node coordinates keep the partition convention:
x0/x1 is the band (vertical) axis and y0/y1 the depth (horizontal) axis.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from .config import ChartConfig
from .geometry import Dimensions, Primitive, Rect, Scene, Text
from .hierarchy import HierarchyNode, Node, as_hierarchy, build_hierarchy, is_empty_input
from .labels import cell_value_text, elide_name, label_visible, tooltip
from .legend import legend_row
from .scales import ScaleDomainBuilder
from .theme import COLORS, LABELS, LAYOUT
from .treemap import dice

logger = logging.getLogger(__name__)


def partition(root: Node, band: float, depth: float) -> Node:
    """Lay out the tree in a band x depth box, one column per level."""
    levels = root.height + 1
    root.x0, root.y0 = 0.0, 0.0
    root.x1, root.y1 = float(band), depth / levels
    for node in root.each_before():
        if node.children:
            dice(node.children, node.value, node.x0, depth * (node.depth + 1) / levels,
                 node.x1, depth * (node.depth + 2) / levels)
    return root


def fit_transform(root: Node, width: float, height: float,
                  surface: tuple[float, float]) -> tuple[tuple[float, float], float] | None:
    """Uniform scale (never above 1) and offset that center the partition on the surface."""
    nodes = root.descendants()
    min_y0 = min(node.y0 for node in nodes)
    max_y1 = max(node.y1 for node in nodes)
    icicle_width = max_y1 - min_y0
    icicle_height = root.x1 - root.x0
    if icicle_width <= 0 or icicle_height <= 0:
        return None

    scale = min(width / icicle_width, height / icicle_height, 1.0)
    offset_x = (surface[0] - icicle_width * scale) / 2 - min_y0 * scale
    offset_y = (surface[1] - icicle_height * scale) / 2
    return (offset_x, offset_y), scale


def icicle_layout(
    data: HierarchyNode | Mapping[str, Any] | Sequence[Mapping[str, Any]],
    dimensions: Dimensions,
    config: Optional[ChartConfig] = None,
    adapter: Optional[Callable[[Mapping[str, Any]], HierarchyNode]] = None,
) -> Scene:
    """Icicle scene: one Rect per node with a positive value, root included."""
    config = config or ChartConfig()
    if dimensions.is_empty or is_empty_input(data):
        return Scene.empty(dimensions.width, dimensions.height)

    width, height = config.margin.inner(dimensions.width, dimensions.height)
    source = as_hierarchy(data, adapter)
    if width == 0 or height == 0:
        return Scene.empty(dimensions.width, dimensions.height)

    root = partition(build_hierarchy(source), height, width)
    fitted = fit_transform(root, width, height, (dimensions.width, dimensions.height))
    if fitted is None or root.value <= 0:
        logger.debug("Icicle: zero-sum hierarchy, nothing to draw")
        return Scene.empty(dimensions.width, dimensions.height)
    translate, scale = fitted

    top_names = [child.name for child in source.children]
    color = ScaleDomainBuilder(config).color_scale(top_names)

    primitives: list[Primitive] = []
    for node in root.each_before():
        if node.value <= 0:
            continue
        band = node.x1 - node.x0
        fill = COLORS["root"] if node.depth == 0 else color(node.top_level().name)
        primitives.append(Rect(
            node.y0, node.x0,
            node.y1 - node.y0 - 1,
            band - min(1.0, band / 2),
            fill=fill,
            label=node.name,
            key=node.key,
            tooltip=tooltip(node.path_names(), node.value, "/"),
            role="cell",
            opacity=LAYOUT["fill_opacity"],
            value=node.value,
        ))
        column = node.y1 - node.y0
        visible = (node.y1 <= width and node.y0 >= 0 and band > LABELS["icicle_min_height"]
                   and label_visible(column, band))
        if config.show_labels and visible:
            primitives.append(Text(
                node.y0 + LAYOUT["label_inset"], node.x0 + 13,
                f"{elide_name(node.name, column)} {cell_value_text(node.value, column)}",
                fill=COLORS["text"], key=f"{node.key}#name", role="label",
            ))

    legend: tuple[Primitive, ...] = ()
    if config.show_legend and top_names:
        legend = legend_row(top_names, color, config.margin.left, dimensions.height - LAYOUT["legend_offset"])

    logger.debug("Icicle: %d levels, scale %.3f", root.height + 1, scale)
    return Scene(
        primitives=tuple(primitives),
        width=dimensions.width,
        height=dimensions.height,
        translate=translate,
        scale=scale,
        legend=legend,
    )

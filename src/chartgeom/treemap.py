"""
Squarified treemap layout.

Children of each node are packed into rows (or columns) that keep every
cell's aspect ratio close to the target ratio: a row grows while adding the
next child does not worsen its worst aspect ratio, then it is closed and
laid along the shorter side of the remaining rectangle. Padding is inset
from every cell before its children are tiled.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping, Optional, Sequence

from .config import ChartConfig
from .geometry import Dimensions, Primitive, Rect, Scene, Text
from .hierarchy import HierarchyNode, Node, as_hierarchy, build_hierarchy, is_empty_input
from .labels import cell_value_text, elide_name, label_visible, tooltip
from .legend import legend_row
from .scales import ScaleDomainBuilder
from .theme import COLORS, LAYOUT

logger = logging.getLogger(__name__)

PHI = (1 + math.sqrt(5)) / 2


def dice(nodes: Sequence[Node], total: float, x0: float, y0: float, x1: float, y1: float) -> None:
    """Split [x0, x1] among nodes by value; every node spans y0..y1."""
    k = (x1 - x0) / total if total else 0.0
    for node in nodes:
        node.y0, node.y1 = y0, y1
        node.x0 = x0
        x0 += node.value * k
        node.x1 = x0


def slice_(nodes: Sequence[Node], total: float, x0: float, y0: float, x1: float, y1: float) -> None:
    """Split [y0, y1] among nodes by value; every node spans x0..x1."""
    k = (y1 - y0) / total if total else 0.0
    for node in nodes:
        node.x0, node.x1 = x0, x1
        node.y0 = y0
        y0 += node.value * k
        node.y1 = y0


def _worst(sum_value: float, min_value: float, max_value: float, alpha: float) -> float:
    beta = sum_value * sum_value * alpha
    if beta == 0 or min_value == 0:
        return math.inf
    return max(max_value / beta, beta / min_value)


def squarify(node: Node, x0: float, y0: float, x1: float, y1: float, ratio: float = PHI) -> list[list[Node]]:
    """Tile node.children into [x0, x1] x [y0, y1]; returns the rows laid out."""
    nodes = node.children
    n = len(nodes)
    remaining = node.value
    rows: list[list[Node]] = []
    i0 = i1 = 0

    while i0 < n:
        dx, dy = x1 - x0, y1 - y0
        if dx <= 0 or dy <= 0 or remaining <= 0:
            # nothing left to share; collapse the rest onto a point
            dice(nodes[i0:], 0.0, x0, y0, x0, y0)
            rows.append(list(nodes[i0:]))
            break

        # first non-empty node starts the row
        sum_value = nodes[i1].value
        i1 += 1
        while not sum_value and i1 < n:
            sum_value = nodes[i1].value
            i1 += 1
        min_value = max_value = sum_value
        alpha = max(dy / dx, dx / dy) / (remaining * ratio)
        min_ratio = _worst(sum_value, min_value, max_value, alpha)

        while i1 < n:
            node_value = nodes[i1].value
            sum_value += node_value
            low, high = min(min_value, node_value), max(max_value, node_value)
            new_ratio = _worst(sum_value, low, high, alpha)
            if new_ratio > min_ratio:
                sum_value -= node_value
                break
            min_value, max_value, min_ratio = low, high, new_ratio
            i1 += 1

        row = list(nodes[i0:i1])
        rows.append(row)
        if dx < dy:
            split = y0 + dy * sum_value / remaining
            dice(row, sum_value, x0, y0, x1, split)
            y0 = split
        else:
            split = x0 + dx * sum_value / remaining
            slice_(row, sum_value, x0, y0, split, y1)
            x0 = split
        remaining -= sum_value
        i0 = i1
    return rows


def treemap(root: Node, width: float, height: float, padding: float = LAYOUT["treemap_padding"],
            round: bool = True, ratio: float = PHI) -> Node:
    """Assign x0/y0/x1/y1 to every node of an already-built hierarchy."""
    root.x0, root.y0, root.x1, root.y1 = 0.0, 0.0, float(width), float(height)
    inner = padding / 2
    insets = [0.0] * (root.height + 2)

    for node in root.each_before():
        p = insets[node.depth]
        x0, y0, x1, y1 = node.x0 + p, node.y0 + p, node.x1 - p, node.y1 - p
        x0, x1 = _collapse(x0, x1)
        y0, y1 = _collapse(y0, y1)
        node.x0, node.y0, node.x1, node.y1 = x0, y0, x1, y1

        if node.children:
            insets[node.depth + 1] = inner
            edge = padding - inner
            x0, x1 = _collapse(x0 + edge, x1 - edge)
            y0, y1 = _collapse(y0 + edge, y1 - edge)
            if node.value <= 0:
                logger.debug("Subtree %r sums to zero; no area assigned", node.key)
            squarify(node, x0, y0, x1, y1, ratio)

    if round:
        for node in root.each_before():
            node.x0, node.y0 = _round(node.x0), _round(node.y0)
            node.x1, node.y1 = _round(node.x1), _round(node.y1)
    return root


def _collapse(a: float, b: float) -> tuple[float, float]:
    if b < a:
        a = b = (a + b) / 2
    return a, b


def _round(value: float) -> float:
    # half-up like Math.round, not banker's rounding
    return float(math.floor(value + 0.5))


def treemap_layout(
    data: HierarchyNode | Mapping[str, Any] | Sequence[Mapping[str, Any]],
    dimensions: Dimensions,
    config: Optional[ChartConfig] = None,
    adapter: Optional[Callable[[Mapping[str, Any]], HierarchyNode]] = None,
    ratio: float = PHI,
) -> Scene:
    """Treemap scene: one Rect per leaf, plus cell labels and legend."""
    config = config or ChartConfig()
    if dimensions.is_empty or is_empty_input(data):
        return Scene.empty(dimensions.width, dimensions.height)

    width, height = config.margin.inner(dimensions.width, dimensions.height)
    source = as_hierarchy(data, adapter)
    if width == 0 or height == 0:
        return Scene.empty(dimensions.width, dimensions.height)

    root = treemap(build_hierarchy(source), width, height, config.treemap_padding, config.round, ratio)
    top_names = [child.name for child in source.children]
    color = ScaleDomainBuilder(config).color_scale(top_names)

    primitives: list[Primitive] = []
    for leaf in root.leaves():
        if leaf.value <= 0:
            continue
        w, h = leaf.x1 - leaf.x0, leaf.y1 - leaf.y0
        primitives.append(Rect(
            leaf.x0, leaf.y0, w, h,
            fill=color(leaf.top_level().name),
            label=leaf.name,
            key=leaf.key,
            tooltip=tooltip(leaf.path_names(), leaf.value, "."),
            role="leaf",
            opacity=LAYOUT["fill_opacity"],
            value=leaf.value,
        ))
        if config.show_labels and label_visible(w, h):
            primitives.extend(_cell_labels(leaf, w))

    legend: tuple[Primitive, ...] = ()
    if config.show_legend and top_names:
        legend = legend_row(top_names, color, config.margin.left, dimensions.height - LAYOUT["legend_offset"])

    logger.debug("Treemap: %d leaves in %gx%g", len(primitives), width, height)
    return Scene(
        primitives=tuple(primitives),
        width=dimensions.width,
        height=dimensions.height,
        translate=((dimensions.width - width) / 2, (dimensions.height - height) / 2),
        legend=legend,
    )


def _cell_labels(leaf: Node, width: float) -> list[Text]:
    font = LAYOUT["label_font"]
    x = leaf.x0 + LAYOUT["label_inset"]
    return [
        Text(x, leaf.y0 + 1.1 * font, elide_name(leaf.name, width),
             fill=COLORS["text"], key=f"{leaf.key}#name", role="label"),
        Text(x, leaf.y0 + 2.0 * font, cell_value_text(leaf.value, width),
             fill=COLORS["text"], key=f"{leaf.key}#value", role="value-label", opacity=0.7,
             value=leaf.value),
    ]

"""
Multi-stage stacked flow layout (parallel sets).

Each stage stacks its categories top-down by descending total. Between two
adjacent stages every (source, target) pair becomes a ribbon carved from
the source category's span and stacked into the target category's span.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Hashable, Mapping, Optional, Sequence

from .config import ChartConfig
from .geometry import Dimensions, Path, PathBuilder, PathCommand, Primitive, Scene, Text
from .labels import format_value
from .legend import legend_row
from .scales import LinearScale, ScaleDomainBuilder
from .theme import COLORS, LAYOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageSpan:
    y0: float
    y1: float
    total: float

    @property
    def height(self) -> float:
        return self.y1 - self.y0


@dataclass(frozen=True)
class Ribbon:
    source_stage: str
    target_stage: str
    source: Hashable
    target: Hashable
    value: float
    source_span: tuple[float, float]
    target_span: tuple[float, float]
    commands: tuple[PathCommand, ...]

    @property
    def key(self) -> str:
        return f"{self.source_stage}:{self.source}->{self.target_stage}:{self.target}"


def stages_from_record(record: Mapping[str, Any], value_field: str = "value") -> list[str]:
    """Caller-side adapter: a record's non-value fields, in order, as stages."""
    return [name for name in record if name != value_field]


def _category(record: Mapping[str, Any], stage: str) -> Hashable:
    value = record.get(stage)
    return "" if value is None else value


def _amount(record: Mapping[str, Any], value_field: str) -> float:
    try:
        number = float(record.get(value_field, 0) or 0)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def stage_stacks(
    records: Sequence[Mapping[str, Any]],
    stages: Sequence[str],
    height: float,
    value_field: str = "value",
) -> dict[str, dict[Hashable, StageSpan]]:
    """Per stage, each category's vertical span, in stacking order.

    Categories are sorted by descending total; ties keep first-seen order.
    A stage whose total is zero has no spans.
    """
    stacks: dict[str, dict[Hashable, StageSpan]] = {}
    for stage in stages:
        totals: dict[Hashable, float] = {}
        for record in records:
            key = _category(record, stage)
            totals[key] = totals.get(key, 0.0) + _amount(record, value_field)

        ordered = sorted(totals.items(), key=lambda item: -item[1])
        scale = LinearScale((0.0, sum(totals.values())), (0.0, height))
        spans: dict[Hashable, StageSpan] = {}
        if scale.domain[1] > 0:
            offset = 0.0
            for key, total in ordered:
                spans[key] = StageSpan(offset, offset + scale(total), total)
                offset += scale(total)
        else:
            logger.debug("Stage %r has zero total; no spans", stage)
        stacks[stage] = spans
    return stacks


def _pair_totals(records: Sequence[Mapping[str, Any]], source_stage: str, target_stage: str,
                 value_field: str) -> dict[Hashable, dict[Hashable, float]]:
    """Sum values per (source, target), both keyed in first-occurrence order."""
    groups: dict[Hashable, dict[Hashable, float]] = {}
    for record in records:
        targets = groups.setdefault(_category(record, source_stage), {})
        target = _category(record, target_stage)
        targets[target] = targets.get(target, 0.0) + _amount(record, value_field)
    return groups


def ribbon_path(sx: float, sy0: float, sy1: float, tx: float, ty0: float, ty1: float) -> tuple[PathCommand, ...]:
    """Closed S-shaped band; control points sit half the stage gap from each end."""
    bend = (tx - sx) / 2
    return (
        PathBuilder()
        .move_to(sx, sy0)
        .bezier_curve_to(sx + bend, sy0, tx - bend, ty0, tx, ty0)
        .line_to(tx, ty1)
        .bezier_curve_to(tx - bend, ty1, sx + bend, sy1, sx, sy1)
        .close_path()
        .commands
    )


def flow_ribbons(
    records: Sequence[Mapping[str, Any]],
    stages: Sequence[str],
    stacks: Mapping[str, Mapping[Hashable, StageSpan]],
    x_positions: Mapping[str, float],
    value_field: str = "value",
) -> list[Ribbon]:
    """Ribbons between each pair of adjacent stages.

    Within a source category, pairs are consumed top-down in first-occurrence
    order of their target; each target category stacks its incoming ribbons
    in the same walk order. Each end's height comes from its own stage scale.
    """
    ribbons: list[Ribbon] = []
    for source_stage, target_stage in zip(stages, stages[1:]):
        source_spans, target_spans = stacks[source_stage], stacks[target_stage]
        if not source_spans or not target_spans:
            continue
        sx, tx = x_positions[source_stage], x_positions[target_stage]
        source_offset: dict[Hashable, float] = {}
        target_offset: dict[Hashable, float] = {}

        for source, targets in _pair_totals(records, source_stage, target_stage, value_field).items():
            source_span = source_spans.get(source)
            if source_span is None:
                continue
            source_scale = LinearScale((0.0, source_span.total), (0.0, source_span.height))
            offset = source_offset.setdefault(source, source_span.y0)
            for target, value in targets.items():
                target_span = target_spans.get(target)
                if target_span is None or value <= 0:
                    continue
                target_scale = LinearScale((0.0, target_span.total), (0.0, target_span.height))
                incoming = target_offset.setdefault(target, target_span.y0)

                sy0, sy1 = offset, offset + source_scale(value)
                ty0, ty1 = incoming, incoming + target_scale(value)
                ribbons.append(Ribbon(
                    source_stage, target_stage, source, target, value,
                    (sy0, sy1), (ty0, ty1),
                    ribbon_path(sx, sy0, sy1, tx, ty0, ty1),
                ))
                offset = source_offset[source] = sy1
                target_offset[target] = ty1
    return ribbons


def flow_layout(
    records: Sequence[Mapping[str, Any]],
    stages: Sequence[str],
    dimensions: Dimensions,
    config: Optional[ChartConfig] = None,
) -> Scene:
    """Parallel-sets scene: ribbons colored by source category, stage and category labels, legend."""
    config = config or ChartConfig()
    if dimensions.is_empty or not records or not stages:
        return Scene.empty(dimensions.width, dimensions.height)

    margin = config.margin
    top = margin.top
    bottom = margin.bottom if config.show_axis_x else 20
    left = margin.left if config.show_axis_y else 0
    width = max(0.0, dimensions.width - left - margin.right)
    height = max(0.0, dimensions.height - top - bottom)
    if width == 0 or height == 0:
        return Scene.empty(dimensions.width, dimensions.height)

    builder = ScaleDomainBuilder(config)
    x = builder.point_scale(list(stages), width)
    x_positions = {stage: x(stage) for stage in stages}
    stacks = stage_stacks(records, stages, height, config.value_field)
    ribbons = flow_ribbons(records, stages, stacks, x_positions, config.value_field)
    first_stage = list(dict.fromkeys(_category(r, stages[0]) for r in records))
    color = builder.color_scale(first_stage)

    primitives: list[Primitive] = []
    for ribbon in ribbons:
        primitives.append(Path(
            ribbon.commands,
            fill=color(ribbon.source),
            label=f"{ribbon.source} → {ribbon.target}",
            key=ribbon.key,
            tooltip=f"{ribbon.source} → {ribbon.target}\n{format_value(ribbon.value)}",
            role="ribbon",
            opacity=LAYOUT["ribbon_opacity"],
            value=ribbon.value,
        ))

    if config.show_axis_y:
        for stage in stages:
            for category, span in stacks[stage].items():
                primitives.append(Text(
                    x_positions[stage] + LAYOUT["category_label_gap"], (span.y0 + span.y1) / 2, str(category),
                    fill=COLORS["muted"], key=f"{stage}:{category}#label", role="category",
                    tooltip=f"{category}\n{format_value(span.total)}", value=span.total,
                ))
    if config.show_axis_x:
        for stage in stages:
            primitives.append(Text(
                x_positions[stage], height + LAYOUT["stage_label_gap"], stage,
                fill=COLORS["muted"], key=f"{stage}#stage", role="stage", anchor="middle",
            ))

    legend: tuple[Primitive, ...] = ()
    if config.show_legend:
        legend = legend_row(list(color.domain), color, left, dimensions.height - LAYOUT["flow_legend_offset"],
                            spacing=LAYOUT["flow_legend_spacing"], caption_gap=16)

    logger.debug("Flow: %d stages, %d ribbons", len(stages), len(ribbons))
    return Scene(
        primitives=tuple(primitives),
        width=dimensions.width,
        height=dimensions.height,
        translate=(left, top),
        legend=legend,
    )

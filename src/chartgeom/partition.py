"""Single entry point for the two hierarchical partition modes."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence

from .config import ChartConfig
from .geometry import Dimensions, Scene
from .hierarchy import HierarchyNode
from .icicle import icicle_layout
from .treemap import treemap_layout

MODES = ("treemap", "icicle")


def partition_layout(
    data: HierarchyNode | Mapping[str, Any] | Sequence[Mapping[str, Any]],
    dimensions: Dimensions,
    config: Optional[ChartConfig] = None,
    mode: str = "treemap",
    adapter: Optional[Callable[[Mapping[str, Any]], HierarchyNode]] = None,
) -> Scene:
    if mode == "treemap":
        return treemap_layout(data, dimensions, config, adapter)
    if mode == "icicle":
        return icicle_layout(data, dimensions, config, adapter)
    raise ValueError(f"Unknown partition mode {mode!r}; expected one of {MODES}")

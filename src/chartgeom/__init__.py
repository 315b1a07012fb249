"""chartgeom: data-to-geometry layouts for treemap, icicle, flow, and hexbin charts."""

from .config import ChartConfig, Margin
from .dimensions import DimensionResolver, ResizeEvents, ResizeMode
from .errors import ChartGeomError, InvalidExtentError, InvalidRadiusError, InvalidScaleError
from .flow import flow_layout, stages_from_record
from .geometry import Arc, Dimensions, Hexagon, Path, Rect, Scene, Text
from .hexbin import HexGrid, hexbin_layout
from .hierarchy import HierarchyNode, build_hierarchy, record_to_node, wrap_records
from .icicle import icicle_layout
from .logging_config import setup_logging
from .partition import partition_layout
from .scales import ScaleDomainBuilder
from .theme import PALETTE
from .treemap import treemap_layout

__all__ = [
    "Arc",
    "ChartConfig",
    "ChartGeomError",
    "DimensionResolver",
    "Dimensions",
    "HexGrid",
    "Hexagon",
    "HierarchyNode",
    "InvalidExtentError",
    "InvalidRadiusError",
    "InvalidScaleError",
    "Margin",
    "PALETTE",
    "Path",
    "Rect",
    "ResizeEvents",
    "ResizeMode",
    "ScaleDomainBuilder",
    "Scene",
    "Text",
    "build_hierarchy",
    "flow_layout",
    "hexbin_layout",
    "icicle_layout",
    "partition_layout",
    "record_to_node",
    "setup_logging",
    "stages_from_record",
    "treemap_layout",
    "wrap_records",
]

"""
Geometry primitives handed to the rendering backend.

Every layout returns a Scene: a flat list of primitives in the scene's local
coordinate space, plus the translate/scale that places that space on the
drawing surface (the equivalent of an SVG group transform).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from .errors import InvalidExtentError, InvalidRadiusError


@dataclass(frozen=True)
class Dimensions:
    """A published surface size. Zero in either axis means 'not measurable yet'."""
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidExtentError(f"Negative extent: {self.width}x{self.height}")

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    label: Optional[str] = None
    key: str = ""
    tooltip: Optional[str] = None
    role: str = ""
    opacity: float = 1.0
    value: Optional[float] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    def overlaps(self, other: Rect) -> bool:
        """True when the interiors of both rectangles intersect."""
        return (
            self.x < other.x + other.width and other.x < self.x + self.width
            and self.y < other.y + other.height and other.y < self.y + self.height
        )


@dataclass(frozen=True)
class Arc:
    cx: float
    cy: float
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float
    fill: Optional[str] = None
    label: Optional[str] = None
    key: str = ""
    tooltip: Optional[str] = None
    role: str = ""
    opacity: float = 1.0
    value: Optional[float] = None


# A path command is an SVG-style opcode followed by its coordinates:
# ("M", x, y), ("L", x, y), ("C", x1, y1, x2, y2, x, y), ("Z",)
PathCommand = tuple


@dataclass(frozen=True)
class Path:
    commands: tuple[PathCommand, ...]
    fill: Optional[str] = None
    label: Optional[str] = None
    key: str = ""
    tooltip: Optional[str] = None
    role: str = ""
    opacity: float = 1.0
    value: Optional[float] = None

    def to_svg(self) -> str:
        parts = []
        for op, *coords in self.commands:
            parts.append(op + ",".join(_fmt(c) for c in coords))
        return "".join(parts)


@dataclass(frozen=True)
class Hexagon:
    cx: float
    cy: float
    radius: float
    orientation: str = "pointy"
    fill: Optional[str] = None
    label: Optional[str] = None
    key: str = ""
    tooltip: Optional[str] = None
    role: str = ""
    opacity: float = 1.0
    value: Optional[float] = None

    def corners(self) -> list[tuple[float, float]]:
        """The six vertices, clockwise in screen space."""
        offset = -90.0 if self.orientation == "pointy" else 0.0
        points = []
        for i in range(6):
            angle = math.radians(60.0 * i + offset)
            points.append((self.cx + self.radius * math.cos(angle), self.cy + self.radius * math.sin(angle)))
        return points


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    content: str
    fill: Optional[str] = None
    label: Optional[str] = None
    key: str = ""
    tooltip: Optional[str] = None
    role: str = ""
    opacity: float = 1.0
    anchor: str = "start"
    value: Optional[float] = None


Primitive = Union[Rect, Arc, Path, Hexagon, Text]


def _fmt(value: float) -> str:
    return f"{value:.6g}"


class PathBuilder:
    """Accumulates path commands (the shape of d3.path, minus the string state)."""

    def __init__(self) -> None:
        self._commands: list[PathCommand] = []

    def move_to(self, x: float, y: float) -> PathBuilder:
        self._commands.append(("M", x, y))
        return self

    def line_to(self, x: float, y: float) -> PathBuilder:
        self._commands.append(("L", x, y))
        return self

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float) -> PathBuilder:
        self._commands.append(("C", cp1x, cp1y, cp2x, cp2y, x, y))
        return self

    def close_path(self) -> PathBuilder:
        self._commands.append(("Z",))
        return self

    @property
    def commands(self) -> tuple[PathCommand, ...]:
        return tuple(self._commands)


@dataclass(frozen=True)
class Scene:
    """Layout output: primitives in local coordinates plus their surface transform."""
    primitives: tuple[Primitive, ...] = ()
    width: float = 0.0
    height: float = 0.0
    translate: tuple[float, float] = (0.0, 0.0)
    scale: float = 1.0
    legend: tuple[Primitive, ...] = field(default=())

    @classmethod
    def empty(cls, width: float = 0.0, height: float = 0.0) -> Scene:
        return cls(width=width, height=height)

    @property
    def is_empty(self) -> bool:
        return not self.primitives and not self.legend

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def __len__(self) -> int:
        return len(self.primitives)

    def of_role(self, role: str) -> list[Primitive]:
        return [p for p in self.primitives if p.role == role]

    def to_surface(self, x: float, y: float) -> tuple[float, float]:
        """Map a local point to surface coordinates."""
        tx, ty = self.translate
        return tx + x * self.scale, ty + y * self.scale


def check_radius(radius: float) -> float:
    if not radius > 0:
        raise InvalidRadiusError(f"Radius must be positive, got {radius}")
    return float(radius)


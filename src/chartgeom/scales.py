"""
Scales and the per-render ScaleDomainBuilder.

Scales follow d3-scale semantics closely enough that geometry matches what
the chart library produced in the browser: band/point scales for categories,
niced linear scales for measures, and a cyclic ordinal scale for colors.
"""
from __future__ import annotations

import math
from typing import Any, Hashable, Iterable, Mapping, Sequence

import numpy as np

from .config import ChartConfig
from .errors import InvalidScaleError
from .theme import LAYOUT

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_increment(start: float, stop: float, count: int) -> float:
    """Step between round ticks; negative values mean 1/step for sub-unit steps."""
    step = (stop - start) / max(0, count) if count > 0 else math.inf
    if not math.isfinite(step) or step <= 0:
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def unique_keys(records: Iterable[Mapping[str, Any]], field: str) -> list:
    """Distinct values of ``field`` in first-seen order."""
    return list(dict.fromkeys(record.get(field) for record in records))


class LinearScale:
    def __init__(self, domain: Sequence[float] = (0.0, 1.0), range: Sequence[float] = (0.0, 1.0), clamp: bool = False):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range[0]), float(range[1]))
        self.clamp = clamp

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # zero-width domain collapses to the range start instead of NaN
            return r0
        t = (value - d0) / (d1 - d0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return r0 + t * (r1 - r0)

    def invert(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return d0
        t = (value - r0) / (r1 - r0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return d0 + t * (d1 - d0)

    def nice(self, count: int = 10) -> LinearScale:
        """Extend the domain outward to round tick boundaries (0-97 becomes 0-100)."""
        start, stop = self.domain
        reverse = stop < start
        if reverse:
            start, stop = stop, start

        previous = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == previous:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            previous = step

        self.domain = (stop, start) if reverse else (start, stop)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        start, stop = sorted(self.domain)
        step = tick_increment(start, stop, count)
        if step > 0:
            indices = np.arange(math.ceil(start / step), math.floor(stop / step) + 1)
            values = indices * step
        elif step < 0:
            inverse = -step
            indices = np.arange(math.ceil(start * inverse), math.floor(stop * inverse) + 1)
            values = indices / inverse
        else:
            return [start] if start == stop else []
        return [float(v) for v in values]


class BandScale:
    """Evenly spaced bands over a continuous range (d3.scaleBand)."""

    def __init__(
        self,
        domain: Sequence[Hashable] = (),
        range: Sequence[float] = (0.0, 1.0),
        padding_inner: float = 0.0,
        padding_outer: float = 0.0,
        align: float = 0.5,
        round: bool = False,
    ):
        self.domain = list(dict.fromkeys(domain))
        self.range = (float(range[0]), float(range[1]))
        self.padding_inner = min(1.0, max(0.0, padding_inner))
        self.padding_outer = max(0.0, padding_outer)
        self.align = min(1.0, max(0.0, align))
        self.round = round
        self._index = {key: i for i, key in enumerate(self.domain)}
        self._rescale()

    def _rescale(self) -> None:
        n = len(self.domain)
        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)

        step = (stop - start) / max(1.0, n - self.padding_inner + self.padding_outer * 2)
        if self.round:
            step = math.floor(step)
        start += (stop - start - step * (n - self.padding_inner)) * self.align
        bandwidth = step * (1 - self.padding_inner)
        if self.round:
            start = round(start)
            bandwidth = round(bandwidth)

        positions = [start + step * i for i in range(n)]
        if reverse:
            positions.reverse()
        self.step = step
        self.bandwidth = bandwidth
        self._positions = positions

    def __call__(self, key: Hashable) -> float | None:
        i = self._index.get(key)
        return None if i is None else self._positions[i]

    def __contains__(self, key: Hashable) -> bool:
        return key in self._index


class PointScale(BandScale):
    """Band scale with zero bandwidth (d3.scalePoint)."""

    def __init__(self, domain: Sequence[Hashable] = (), range: Sequence[float] = (0.0, 1.0),
                 padding: float = 0.0, align: float = 0.5, round: bool = False):
        super().__init__(domain, range, padding_inner=1.0, padding_outer=padding, align=align, round=round)


class ColorScale:
    """Ordinal scale onto a cyclic palette.

    Keys outside the initial domain are appended in call order, so the
    mapping is deterministic for a given sequence of lookups.
    """

    def __init__(self, domain: Iterable[Hashable] = (), palette: Sequence[str] = ()):
        if not palette:
            raise InvalidScaleError("Color palette must not be empty")
        self.palette = tuple(palette)
        self.domain: list = []
        self._index: dict = {}
        for key in domain:
            self._add(key)

    def _add(self, key: Hashable) -> int:
        i = self._index.get(key)
        if i is None:
            i = self._index[key] = len(self.domain)
            self.domain.append(key)
        return i

    def __call__(self, key: Hashable) -> str:
        return self.palette[self._add(key) % len(self.palette)]


class ScaleDomainBuilder:
    """Builds the scales of one render pass from the current data."""

    def __init__(self, config: ChartConfig | None = None):
        self.config = config or ChartConfig()

    def category_scale(self, records: Iterable[Mapping[str, Any]], field: str, span: float,
                       padding: float = LAYOUT["band_padding"]) -> BandScale:
        return BandScale(unique_keys(records, field), (0.0, span), padding_inner=padding, padding_outer=padding)

    def point_scale(self, keys: Sequence[Hashable], span: float,
                    padding: float = LAYOUT["stage_padding"]) -> PointScale:
        return PointScale(keys, (0.0, span), padding=padding)

    def measure_scale(self, records: Iterable[Mapping[str, Any]], field: str | None, span: float,
                      invert: bool = False, nice: bool = True) -> LinearScale:
        """Linear scale over [0, max(field)].

        With ``invert`` the range runs from ``span`` to 0, for screen space
        where y grows downward.
        """
        field = field or self.config.value_field
        values = [_as_number(record.get(field)) for record in records]
        top = max(values, default=0.0)
        scale = LinearScale((0.0, max(0.0, top)), (span, 0.0) if invert else (0.0, span))
        if nice:
            scale.nice()
        return scale

    def extent_scale(self, values: Sequence[float], span: float, invert: bool = False) -> LinearScale:
        """Linear scale over [min, max] of the values."""
        if len(values) == 0:
            low = high = 0.0
        else:
            arr = np.asarray(values, dtype=float)
            low, high = float(np.min(arr)), float(np.max(arr))
        return LinearScale((low, high), (span, 0.0) if invert else (0.0, span))

    def color_scale(self, keys: Iterable[Hashable]) -> ColorScale:
        return ColorScale(keys, self.config.color_palette)


def _as_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0

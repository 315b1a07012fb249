"""
Dimension Resolution
====================
Turns the size of a drawing surface that is laid out by someone else into a
stable (width, height) that layouts can consume.

The surface, the resize notifications and the timer are all injected, so
the resolver works against any host: an asyncio event loop satisfies the
Scheduler protocol, and ResizeEvents is a plain in-process channel that a
platform adapter (a GUI toolkit resize signal, a browser bridge) emits into.

Modes:
    CONTINUOUS  re-measure on every element or viewport resize.
    SETTLE      re-measure on the next frame, retry until the surface has a
                non-zero size, then only follow viewport resizes, debounced.
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Optional, Protocol

from .config import ChartConfig
from .geometry import Dimensions
from .theme import SIZING

logger = logging.getLogger(__name__)


class Surface(Protocol):
    def measure(self) -> tuple[float, float]: ...
    def measure_parent(self) -> Optional[tuple[float, float]]: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_soon(self, callback: Callable[..., None], *args) -> object: ...
    def call_later(self, delay: float, callback: Callable[..., None], *args) -> TimerHandle: ...


class ResizeEvents:
    """Minimal notification channel for resize signals."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def emit(self) -> None:
        for callback in list(self._callbacks):
            callback()

    def __len__(self) -> int:
        return len(self._callbacks)


class ResizeMode(enum.Enum):
    CONTINUOUS = "continuous"
    SETTLE = "settle"

    @classmethod
    def for_config(cls, config: ChartConfig) -> ResizeMode:
        """Animated charts follow their container live; static ones settle once."""
        return cls.CONTINUOUS if config.animations_enabled else cls.SETTLE


def resolve_size(surface: Surface) -> tuple[float, float]:
    """Measure, substituting a fallback height when the surface reports none."""
    width, height = surface.measure()
    if height == 0:
        parent = surface.measure_parent()
        if parent is not None:
            height = parent[1] * SIZING["parent_height_ratio"]
        else:
            height = SIZING["min_height"]
    return width, height


class DimensionResolver:
    """Publishes a Dimensions to ``on_change`` whenever a usable size appears or changes."""

    def __init__(
        self,
        surface: Surface,
        scheduler: Scheduler,
        on_change: Callable[[Dimensions], None],
        mode: ResizeMode = ResizeMode.CONTINUOUS,
        element_events: Optional[ResizeEvents] = None,
        viewport_events: Optional[ResizeEvents] = None,
        debounce: float = SIZING["debounce"],
        retry_delay: float = SIZING["retry_delay"],
        max_retries: int = SIZING["max_retries"],
    ):
        self.surface = surface
        self.scheduler = scheduler
        self.on_change = on_change
        self.mode = mode
        self.element_events = element_events
        self.viewport_events = viewport_events
        self.debounce = debounce
        self.retry_delay = retry_delay
        self.max_retries = max_retries

        self._dimensions = Dimensions(0, 0)
        self._unsubscribers: list[Callable[[], None]] = []
        self._debounce_handle: Optional[TimerHandle] = None
        self._retry_handle: Optional[TimerHandle] = None
        self._retries = 0
        self._closed = False

    @property
    def dimensions(self) -> Dimensions:
        """Last published size; zero until the surface first resolves."""
        return self._dimensions

    def start(self) -> None:
        self.refresh()

        if self.mode is ResizeMode.CONTINUOUS:
            for events in (self.element_events, self.viewport_events):
                if events is not None:
                    self._unsubscribers.append(events.subscribe(self.refresh))
        else:
            self.scheduler.call_soon(self._settle)
            # viewport follows alongside the retry loop, not after it
            if self.viewport_events is not None:
                self._unsubscribers.append(self.viewport_events.subscribe(self._debounced_refresh))

    def refresh(self) -> None:
        """Measure now and publish when the size is usable and new."""
        if self._closed:
            return
        width, height = resolve_size(self.surface)
        if width > 0 and height > 0:
            dimensions = Dimensions(width, height)
            if dimensions != self._dimensions:
                self._dimensions = dimensions
                logger.debug("Surface resolved to %gx%g", width, height)
                self.on_change(dimensions)

    def _settle(self) -> None:
        self._retry_handle = None
        if self._closed:
            return
        self.refresh()
        width, height = self.surface.measure()
        if width == 0 or height == 0:
            if self._retries >= self.max_retries:
                logger.debug("Surface still unmeasured after %d retries", self._retries)
                return
            self._retries += 1
            self._retry_handle = self.scheduler.call_later(self.retry_delay, self._settle)

    def _debounced_refresh(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        self._debounce_handle = self.scheduler.call_later(self.debounce, self._fire_debounced)

    def _fire_debounced(self) -> None:
        self._debounce_handle = None
        self.refresh()

    def close(self) -> None:
        """Unsubscribe and cancel pending timers so nothing fires after teardown."""
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        for handle in (self._debounce_handle, self._retry_handle):
            if handle is not None:
                handle.cancel()
        self._debounce_handle = self._retry_handle = None

    def __enter__(self) -> DimensionResolver:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

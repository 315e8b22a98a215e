"""Hue state shared between a UI thread and a render loop.

Composition keeps a small ring of immutable CompositionData slots. Readers
(the render loop) always see the current slot; a hue change builds the next
slot, including its max-chroma color, and then makes it current. There is
exactly one writer, so a frame that grabbed a slot keeps a consistent view
while the next one is being filled.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from jzslice import defaults
from jzslice.colorspace import (
    HueSlice,
    JzazbzColor,
    LinearP3Color,
    find_max_chroma_color,
    hue_slice,
    to_linear_display,
)

logger = logging.getLogger(__name__)

HUE_PRESETS = defaults.HUE_PRESETS


@dataclass(frozen=True)
class Region:
    """Rectangle in chart grid cells."""
    left: int
    top: int
    right: int
    bottom: int


def _default_jc_region() -> Region:
    cols, rows = defaults.DEFAULT_GRID_SIZE
    return Region(left=1, top=1, right=cols - 1, bottom=rows - 1)


@dataclass(frozen=True)
class CompositionData:
    """One snapshot of the chart state."""
    hue: float = defaults.DEFAULT_HUE
    max_c_color: Optional[JzazbzColor] = None
    grid_size: tuple[int, int] = defaults.DEFAULT_GRID_SIZE
    jc_region: Region = field(default_factory=_default_jc_region)


def normalize_hue_degrees(hue: float) -> float:
    """Reduce hue to [0, 360)."""
    reduced = math.fmod(hue, 360.0)
    normalized = reduced + 360.0 if reduced < 0.0 else reduced
    # -1e-20 + 360 rounds to 360
    return 0.0 if normalized >= 360.0 else normalized


class Composition:
    """Multi-buffered hue and max-chroma color.

    Subscribers are called as ``callback(data)`` after a hue change, outside
    the lock.
    """

    def __init__(
        self,
        buffer_count: int = defaults.DEFAULT_BUFFER_COUNT,
        *,
        hue: float = defaults.DEFAULT_HUE,
        iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        if buffer_count < 1:
            raise ValueError(f"buffer_count must be at least 1, got {buffer_count}")

        self._lock = lock if lock is not None else threading.RLock()
        self._iterations = iterations
        self._subscribers: list[Callable[[CompositionData], None]] = []

        # Initialize the first slot and copy to the others
        first = self._build(CompositionData(), normalize_hue_degrees(hue))
        self._buffers: list[CompositionData] = [first] * buffer_count
        self._index = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def buffer_count(self) -> int:
        return len(self._buffers)

    @property
    def buffer_index(self) -> int:
        return self._index

    @property
    def current(self) -> CompositionData:
        """Snapshot the render loop should draw this frame."""
        with self._lock:
            return self._buffers[self._index]

    @property
    def hue(self) -> float:
        return self.current.hue

    @hue.setter
    def hue(self, new_hue: float) -> None:
        normalized = normalize_hue_degrees(new_hue)

        with self._lock:
            current = self._buffers[self._index]
            if current.hue == normalized:
                return
            data = self._build(current, normalized)
            slot = (self._index + 1) % len(self._buffers)
            self._buffers[slot] = data
            self._index = slot

        logger.debug("Hue set to %.6f (slot %d)", normalized, slot)
        self._notify(data)

    @property
    def max_chroma_color(self) -> JzazbzColor:
        return self.current.max_c_color

    @property
    def max_chroma_linear_p3(self) -> LinearP3Color:
        """Linear Display P3 of the current max-chroma color, unclamped."""
        return to_linear_display(self.max_chroma_color)

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def apply_preset(self, name: str) -> None:
        """Set the hue to one of the corner presets (red, yellow, ...)."""
        try:
            self.hue = HUE_PRESETS[name]
        except KeyError:
            raise ValueError(
                f"Unknown hue preset {name!r}, expected one of {sorted(HUE_PRESETS)}"
            ) from None

    def hue_slice(self) -> HueSlice:
        """Jz-Cz samples for the current snapshot."""
        data = self.current
        return hue_slice(data.hue, grid_size=data.grid_size, iterations=self._iterations)

    def subscribe(self, callback: Callable[[CompositionData], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[CompositionData], None]) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build(self, base: CompositionData, hue: float) -> CompositionData:
        color = find_max_chroma_color(hue, iterations=self._iterations)
        return replace(base, hue=hue, max_c_color=color)

    def _notify(self, data: CompositionData) -> None:
        """Call all subscribers, isolating exceptions."""
        for cb in list(self._subscribers):
            try:
                cb(data)
            except Exception:
                logger.warning("Subscriber %r raised for hue %.3f", cb, data.hue, exc_info=True)

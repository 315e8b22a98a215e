"""Immutable value types for single colors.

The array functions in this package work on separate channel arrays; these
types are what the scalar convenience wrappers accept and return.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple


def _wrap_degrees(h: float) -> float:
    return (h + 180.0) % 360.0 - 180.0


class ConeResponse(NamedTuple):
    """LMS cone response (scaled so Display P3 white is roughly 1)."""
    L: float
    M: float
    S: float


class JzazbzColor(NamedTuple):
    """A color in Jzazbz. Hue and chroma are derived, never stored."""
    Jz: float
    az: float
    bz: float

    @property
    def hue(self) -> float:
        """Hue angle in degrees, normalized to [-180, 180)."""
        return _wrap_degrees(math.degrees(math.atan2(self.bz, self.az)))

    @property
    def hue_radians(self) -> float:
        return math.atan2(self.bz, self.az)

    @property
    def chroma(self) -> float:
        return math.hypot(self.az, self.bz)


class LinearP3Color(NamedTuple):
    """Linear-light Display P3 primaries. Not clamped."""
    r: float
    g: float
    b: float

    def in_gamut(self, tolerance: float = 1e-4) -> bool:
        return all(-tolerance <= c <= 1.0 + tolerance for c in self)

    def clipped(self) -> LinearP3Color:
        """Clamp to [0, 1] for display."""
        return LinearP3Color(*(min(max(c, 0.0), 1.0) for c in self))


@dataclass(frozen=True)
class GamutCorner:
    """A Display P3 primary/secondary in LMS, tagged with its Jzazbz hue (radians)."""
    name: str
    lms: ConeResponse
    hue: float


@dataclass(frozen=True)
class SearchBracket:
    """Segment of the gamut boundary known to contain the target hue."""
    lower: ConeResponse
    upper: ConeResponse
    lower_hue: float
    upper_hue: float

    def contains(self, hue_radians: float) -> bool:
        return self.lower_hue <= hue_radians < self.upper_hue

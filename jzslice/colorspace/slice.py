"""Samples of one hue plane for drawing a lightness/chroma chart and a hue dial.

A presentation layer calls these once per hue change; the results are plain
arrays (unclamped linear Display P3 plus an in-gamut mask), so clipping and
tone mapping stay on the drawing side.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from jzslice import defaults
from . import _backend as B
from ._backend import Array
from .display_p3 import jzazbz_to_linear_p3, linear_p3_to_lms
from .gamut import find_max_chroma_color, max_chroma_at_hue
from .jzazbz import lms_to_jzazbz, jzczhz_to_jzazbz
from .types import JzazbzColor


def white_jz() -> float:
    """Jz of Display P3 white, the top of every hue slice."""
    Jz, _, _ = lms_to_jzazbz(*linear_p3_to_lms(1.0, 1.0, 1.0))
    return float(Jz)


@dataclass
class HueSlice:
    """Regular Jz x Cz grid at one hue.

    Attributes:
        hue: Hue of the slice plane in degrees [0, 360)
        Jz: (rows, cols) lightness, row 0 is black
        Cz: (rows, cols) chroma, column 0 is neutral
        rgb: (rows, cols, 3) linear Display P3, unclamped
        in_gamut: (rows, cols) bool
        cusp: Max-chroma color at this hue
    """
    hue: float
    Jz: np.ndarray
    Cz: np.ndarray
    rgb: np.ndarray
    in_gamut: np.ndarray
    cusp: JzazbzColor


@dataclass
class HueDial:
    """Max-chroma color for evenly spaced hues around the circle."""
    hues: Array
    jzazbz: Array
    rgb: Array


def hue_slice(
    H: float,
    grid_size: tuple[int, int] = defaults.DEFAULT_GRID_SIZE,
    iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
    tolerance: float = defaults.GAMUT_TOLERANCE,
) -> HueSlice:
    """Sample the Jz-Cz rectangle spanned by black, white and the cusp at hue H."""
    cols, rows = grid_size
    if cols < 2 or rows < 2:
        raise ValueError(f"grid_size must be at least (2, 2), got {grid_size}")

    cusp = find_max_chroma_color(H, iterations=iterations)
    hue = float(H) % 360.0

    J = np.linspace(0.0, white_jz(), rows)[:, None]
    C = np.linspace(0.0, cusp.chroma, cols)[None, :]
    Jz, Cz = np.broadcast_arrays(J, C)
    Jz, az, bz = jzczhz_to_jzazbz(Jz, Cz, np.full(Jz.shape, hue))

    rgb = jzazbz_to_linear_p3(Jz, az, bz)
    in_gamut = np.all((rgb >= -tolerance) & (rgb <= 1 + tolerance), axis=-1)

    return HueSlice(hue=hue, Jz=np.array(Jz), Cz=np.array(Cz), rgb=rgb, in_gamut=in_gamut, cusp=cusp)


def hue_dial(
    count: int = defaults.DEFAULT_DIAL_COUNT,
    iterations: int = defaults.WIDE_SEARCH_ITERATIONS,
    lanes: int = defaults.WIDE_SEARCH_LANES,
    reference: Array | None = None,
) -> HueDial:
    """Max-chroma colors for `count` hues starting at 0 degrees.

    Uses the wide-lane search. Pass a torch tensor as `reference` to run on
    its device and dtype.
    """
    if count <= 0:
        raise ValueError("Dial count must be positive")

    hues = np.arange(count, dtype=np.float64) * (360.0 / count)
    if reference is not None:
        hues = B.from_numpy(hues, reference)

    Jz, az, bz = max_chroma_at_hue(hues, iterations=iterations, lanes=lanes)
    return HueDial(
        hues=hues,
        jzazbz=B.stack([Jz, az, bz], axis=-1),
        rgb=jzazbz_to_linear_p3(Jz, az, bz),
    )


def cusp_gradient(
    H: float,
    count: int = defaults.DEFAULT_GRADIENT_COUNT,
    iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
) -> np.ndarray:
    """Black -> cusp -> white ramp at hue H, straight lines in Jzazbz.

    Returns:
        (count, 3) linear Display P3, unclamped
    """
    if count < 3:
        raise ValueError(f"Gradient needs at least 3 samples, got {count}")

    cusp = np.array(find_max_chroma_color(H, iterations=iterations))
    black = np.zeros(3)
    white = np.array([white_jz(), 0.0, 0.0])

    t = np.linspace(0.0, 2.0, count)[:, None]
    lower = black + np.minimum(t, 1.0) * (cusp - black)
    upper = cusp + np.clip(t - 1.0, 0.0, 1.0) * (white - cusp)
    jab = np.where(t <= 1.0, lower, upper)

    return jzazbz_to_linear_p3(jab[:, 0], jab[:, 1], jab[:, 2])

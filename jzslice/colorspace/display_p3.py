"""LMS <-> linear Display P3, and the Display P3 transfer curve.

The LMS -> linear P3 matrix is pre-composed:
    M_LMSToLinearP3 = M_XYZToLinearP3 * M_XYZpToXYZD65 * M_LMSToXYZD65p
Display P3 uses the sRGB piecewise transfer curve with D65 white.
"""

import numpy as np

from . import _backend as B
from ._backend import Array
from .jzazbz import lms_to_jzazbz, jzazbz_to_lms
from .types import ConeResponse, JzazbzColor, LinearP3Color

# LMS -> Linear Display P3
_LMS_TO_P3 = (
    (4.4820606379518333, -3.6184317541411817, 0.16694496856407345),
    (-1.9532025238860451, 3.5217700975984596, -0.54063532522070301),
    (-0.0027453573623004834, -0.45182653146288487, 1.4822547119502889),
)

# Linear Display P3 -> LMS
_P3_TO_LMS = tuple(tuple(float(v) for v in row) for row in np.linalg.inv(np.array(_LMS_TO_P3)))


def _apply(matrix, x: Array, y: Array, z: Array) -> tuple[Array, Array, Array]:
    return (
        matrix[0][0]*x + matrix[0][1]*y + matrix[0][2]*z,
        matrix[1][0]*x + matrix[1][1]*y + matrix[1][2]*z,
        matrix[2][0]*x + matrix[2][1]*y + matrix[2][2]*z,
    )


# === Core Conversions ===

def lms_to_linear_p3(L: Array, M: Array, S: Array) -> tuple[Array, Array, Array]:
    """LMS -> linear Display P3. Not clamped: values outside [0,1] mean out of gamut."""
    return _apply(_LMS_TO_P3, L, M, S)


def linear_p3_to_lms(r: Array, g: Array, b: Array) -> tuple[Array, Array, Array]:
    """Linear Display P3 -> LMS."""
    return _apply(_P3_TO_LMS, r, g, b)


def linear_to_display_p3(x: Array) -> Array:
    """Linear -> Display P3 transfer encoding (per channel)."""
    threshold = 0.0031308
    low = x * 12.92
    high = 1.055 * B.pow(B.clip_min(x, 1e-10), 1/2.4) - 0.055
    return B.where(x <= threshold, low, high)


def display_p3_to_linear(x: Array) -> Array:
    """Display P3 transfer decoding (per channel)."""
    threshold = 0.04045
    low = x / 12.92
    high = B.pow(B.clip_min((x + 0.055) / 1.055, 0.0), 2.4)
    return B.where(x <= threshold, low, high)


# === Convenience Composites ===

def jzazbz_to_linear_p3(Jz: Array, az: Array, bz: Array) -> Array:
    """Jzazbz -> linear Display P3 in one call.

    Returns:
        RGB array with shape (..., 3), values may be outside [0,1] if out of gamut
    """
    r, g, b = lms_to_linear_p3(*jzazbz_to_lms(Jz, az, bz))
    return B.stack([r, g, b], axis=-1)


def linear_p3_to_jzazbz(rgb: Array) -> tuple[Array, Array, Array]:
    """Linear Display P3 (..., 3) -> Jzazbz."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return lms_to_jzazbz(*linear_p3_to_lms(r, g, b))


def is_in_gamut(Jz: Array, az: Array, bz: Array, tolerance: float = 1e-4) -> Array:
    """Check if Jzazbz values land inside Display P3 (all linear channels in [0,1])."""
    rgb = jzazbz_to_linear_p3(Jz, az, bz)
    in_range = (rgb >= -tolerance) & (rgb <= 1 + tolerance)
    return B.all_along_axis(in_range, axis=-1)


def to_linear_display(color: ConeResponse | JzazbzColor) -> LinearP3Color:
    """One color to linear Display P3. Jzazbz input goes through the inverse transform first."""
    if isinstance(color, JzazbzColor):
        color = ConeResponse(*jzazbz_to_lms(*(B.asarray(c) for c in color)))
    r, g, b = lms_to_linear_p3(*(B.asarray(c) for c in color))
    return LinearP3Color(float(r), float(g), float(b))

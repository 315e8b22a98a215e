"""Jzazbz color space conversions.

Reference: Safdar et al., "Perceptually uniform color space for image
signals including high dynamic range and wide gamut", Optics Express 2017.

LMS here is the cone response scaled so that Display P3 white sits near
(1, 1, 1); the PQ curve sees LMS / 100.

All functions accept numpy arrays or torch tensors.
"""

from math import pi
from . import _backend as B
from ._backend import Array
from .types import ConeResponse, JzazbzColor

# === Perceptual quantizer constants ===

N = 2610.0 / 16384.0
P = 1.7 * 2523.0 / 32.0
C1 = 3424.0 / 4096.0
C2 = 2413.0 / 128.0
C3 = 2392.0 / 128.0

# === Lightness warp ===

D = -0.56
D0 = 1.6295499532821566e-11

# Domain of the inverse PQ curve in compressed (LMS') units.
# Lower bound is the compressed value of black, upper bound sits just
# below the pole at (C2 / C3) ** P.
LMSP_MIN = C1 ** P
LMSP_MAX = 3.227

# LMS' -> Izazbz
_LMSP_TO_IZAZBZ = (
    (0.5, 0.5, 0.0),
    (3.524000, -4.066708, 0.542708),
    (0.199076, 1.096799, -1.295875),
)

# Izazbz -> LMS'
_IZAZBZ_TO_LMSP = (
    (1.0, 0.138605043271539, 0.0580473161561189),
    (1.0, -0.138605043271539, -0.0580473161561189),
    (1.0, -0.0960192420263189, -0.811891896056039),
)


# === PQ curve ===

def pq_encode(x: Array) -> Array:
    """LMS -> LMS' (per channel). Negative input is treated as black."""
    valp = B.pow(B.clip_min(x / 100.0, 0.0), N)
    fraction = (C1 + C2 * valp) / (1.0 + C3 * valp)
    return B.pow(fraction, P)


def pq_decode(x: Array) -> Array:
    """LMS' -> LMS (per channel), clamped to the curve's domain."""
    xc = B.clip(x, LMSP_MIN, LMSP_MAX)
    xp = B.pow(xc, 1.0 / P)
    # Rounding at the lower clamp can push the numerator just below zero
    fraction = B.clip_min((C1 - xp) / (C3 * xp - C2), 0.0)
    return 100.0 * B.pow(fraction, 1.0 / N)


# === Core Conversions ===

def lms_to_jzazbz(L: Array, M: Array, S: Array) -> tuple[Array, Array, Array]:
    """LMS -> Jzazbz."""
    lp, mp, sp = pq_encode(L), pq_encode(M), pq_encode(S)

    Iz = _LMSP_TO_IZAZBZ[0][0]*lp + _LMSP_TO_IZAZBZ[0][1]*mp + _LMSP_TO_IZAZBZ[0][2]*sp
    az = _LMSP_TO_IZAZBZ[1][0]*lp + _LMSP_TO_IZAZBZ[1][1]*mp + _LMSP_TO_IZAZBZ[1][2]*sp
    bz = _LMSP_TO_IZAZBZ[2][0]*lp + _LMSP_TO_IZAZBZ[2][1]*mp + _LMSP_TO_IZAZBZ[2][2]*sp

    Jz = (1.0 + D) * Iz / (1.0 + D * Iz) - D0
    return Jz, az, bz


def jzazbz_to_lms(Jz: Array, az: Array, bz: Array) -> tuple[Array, Array, Array]:
    """Jzazbz -> LMS. Exact inverse of lms_to_jzazbz inside the clamp domain."""
    Jzp = Jz + D0
    Iz = Jzp / (1.0 + D - D * Jzp)

    lp = _IZAZBZ_TO_LMSP[0][0]*Iz + _IZAZBZ_TO_LMSP[0][1]*az + _IZAZBZ_TO_LMSP[0][2]*bz
    mp = _IZAZBZ_TO_LMSP[1][0]*Iz + _IZAZBZ_TO_LMSP[1][1]*az + _IZAZBZ_TO_LMSP[1][2]*bz
    sp = _IZAZBZ_TO_LMSP[2][0]*Iz + _IZAZBZ_TO_LMSP[2][1]*az + _IZAZBZ_TO_LMSP[2][2]*bz

    return pq_decode(lp), pq_decode(mp), pq_decode(sp)


def hue_radians(az: Array, bz: Array) -> Array:
    """Hue angle in radians, [-pi, pi]."""
    return B.atan2(bz, az)


def jzczhz_to_jzazbz(Jz: Array, Cz: Array, hz: Array) -> tuple[Array, Array, Array]:
    """JzCzhz -> Jzazbz. hz in degrees."""
    h_rad = hz * (pi / 180)
    return Jz, Cz * B.cos(h_rad), Cz * B.sin(h_rad)


def jzazbz_to_jzczhz(Jz: Array, az: Array, bz: Array) -> tuple[Array, Array, Array]:
    """Jzazbz -> JzCzhz. Returns hz in degrees [0, 360)."""
    Cz = B.sqrt(az**2 + bz**2)
    hz = hue_radians(az, bz) * (180 / pi)
    hz = hz % 360
    return Jz, Cz, hz


# === Single colors ===

def forward(lms: ConeResponse) -> JzazbzColor:
    """Cone response -> Jzazbz for one color."""
    Jz, az, bz = lms_to_jzazbz(*(B.asarray(c) for c in lms))
    return JzazbzColor(float(Jz), float(az), float(bz))


def inverse(jab: JzazbzColor) -> ConeResponse:
    """Jzazbz -> cone response for one color."""
    L, M, S = jzazbz_to_lms(*(B.asarray(c) for c in jab))
    return ConeResponse(float(L), float(M), float(S))

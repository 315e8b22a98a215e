"""Display P3 gamut boundary search in Jzazbz.

For a fixed hue, the most chromatic Display P3 color lies on one of the
edges of the RGB cube that join a primary to an adjacent secondary. The
corner table lists those cube corners in LMS, sorted by Jzazbz hue, with
the green-cyan edge split at hue +-pi so the table covers one full turn.

Search:
- bracket: three comparisons pick the edge whose hue range holds the target
- refine: walk the edge (linear in LMS, so linear in P3) keeping the last
  point whose hue does not exceed the target

The refine step evaluates `lanes` points per iteration and keeps the highest
passing one. lanes=1 is plain bisection; larger lane counts trade depth for
width (e.g. 4 iterations x 32 lanes on a GPU tensor).
"""

import logging
from math import pi

import numpy as np

from jzslice import defaults
from . import _backend as B
from ._backend import Array
from .errors import CornerTableError
from .jzazbz import lms_to_jzazbz, hue_radians
from .types import ConeResponse, GamutCorner, JzazbzColor, SearchBracket

logger = logging.getLogger(__name__)

# === Corner table ===
# Display P3 corners in LMS with their Jzazbz hue (radians), ascending.
# The +-pi entries are the point on the green-cyan edge at P3 ~(0, 1, 0.65).

CORNERS: tuple[GamutCorner, ...] = (
    GamutCorner("green-cyan", ConeResponse(0.5160874353648806, 0.6689515188836437, 0.6434469935994587), -pi),
    GamutCorner("cyan", ConeResponse(0.55608700197488292, 0.73025516799564405, 0.89827700087481577), -2.7604618631505451),
    GamutCorner("blue", ConeResponse(0.11431238432553269, 0.17519605565166838, 0.72826353378675235), -1.7688992503294745),
    GamutCorner("magenta", ConeResponse(0.53001160774764933, 0.41718828256028762, 0.8027984639562511), -0.60623058828496412),
    GamutCorner("red", ConeResponse(0.41569922342211668, 0.24199222690861924, 0.074534930169498803), 0.74690126898001996),
    GamutCorner("yellow", ConeResponse(0.85747384107146684, 0.79705133925259486, 0.24454839725756228), 1.789331917784555),
    GamutCorner("green", ConeResponse(0.44177461764935022, 0.55505911234397565, 0.17001346708806347), 2.3782967581439904),
    GamutCorner("green-cyan", ConeResponse(0.5160874353648806, 0.6689515188836437, 0.6434469935994587), pi),
)

_EDGE_COUNT = len(CORNERS) - 1

_CORNER_TABLE: np.ndarray | None = None


def _wrap_radians(x: Array) -> Array:
    """Wrap angle to [-pi, pi)."""
    return (x + pi) % (2 * pi) - pi


def normalize_hue(H: Array) -> Array:
    """Wrap hue in degrees to [-180, 180). 180 maps to -180."""
    return (H + 180.0) % 360.0 - 180.0


def verify_corner_table(
    table: np.ndarray,
    samples: int = defaults.CORNER_TABLE_SAMPLES,
    tolerance: float = defaults.CORNER_HUE_TOLERANCE,
) -> None:
    """Check a corner table before it is used for bracketed search.

    Raises:
        CornerTableError: if hues are unsorted, the wrap entries differ, a
            tabulated hue disagrees with the transform, or hue is not
            monotonic along an edge (bisection would pick the wrong side).
    """
    if table.shape != (len(CORNERS), 4):
        raise CornerTableError(f"Expected corner table of shape {(len(CORNERS), 4)}, got {table.shape}")

    lms, hues = table[:, :3], table[:, 3]

    if not np.all(np.diff(hues) > 0):
        raise CornerTableError("Corner hues must be strictly ascending")

    if not np.allclose(lms[0], lms[-1]) or not np.isclose(hues[-1] - hues[0], 2 * pi):
        raise CornerTableError("First and last corners must be the same color one turn apart")

    _, az, bz = lms_to_jzazbz(lms[:, 0], lms[:, 1], lms[:, 2])
    hue_error = np.abs(_wrap_radians(hue_radians(az, bz) - hues))
    worst = int(np.argmax(hue_error))
    if hue_error[worst] > tolerance:
        raise CornerTableError(
            f"Corner {worst} hue {hues[worst]:.6f} disagrees with transform by {hue_error[worst]:.3g} rad"
        )

    # Hue along each edge, relative to its lower corner
    t = np.linspace(0.0, 1.0, samples)[None, :, None]
    points = lms[:-1, None, :] + t * (lms[1:, None, :] - lms[:-1, None, :])
    _, az, bz = lms_to_jzazbz(points[..., 0], points[..., 1], points[..., 2])
    relative = _wrap_radians(hue_radians(az, bz) - hues[:-1, None])
    steps = np.diff(relative, axis=-1)
    bad = np.flatnonzero(np.any(steps < -1e-12, axis=-1))
    if bad.size:
        raise CornerTableError(f"Hue is not monotonic along edge(s) {bad.tolist()}")


def _build_corner_table() -> np.ndarray:
    """Build and validate the corner table array. Called once on first use."""
    table = np.array([[*corner.lms, corner.hue] for corner in CORNERS], dtype=np.float64)
    verify_corner_table(table)
    table.setflags(write=False)
    logger.debug("Corner table verified: %d edges", _EDGE_COUNT)
    return table


def get_corner_table() -> np.ndarray:
    """Get or build the read-only (8, 4) corner table [L, M, S, hue]."""
    global _CORNER_TABLE
    if _CORNER_TABLE is None:
        _CORNER_TABLE = _build_corner_table()
    return _CORNER_TABLE


# === Bracket lookup ===

def bracket_indices(h: Array) -> Array:
    """Index of the lower corner of the edge holding hue h (radians, [-pi, pi)).

    Constant-depth decision tree over the sorted table; the same three
    comparisons run for every element, so it vectorizes without branching.
    """
    hues = B.from_numpy(get_corner_table()[:, 3], h)
    j = B.to_index(h >= hues[4]) * 4
    j = j + B.to_index(h >= hues[j + 2]) * 2
    j = j + B.to_index(h >= hues[j + 1])
    # h == pi would select the closing entry itself
    return B.clip(j, 0, _EDGE_COUNT - 1)


def bracket_for_hue(hue: float) -> SearchBracket:
    """Edge of the gamut boundary holding a hue given in radians."""
    table = get_corner_table()
    j = int(bracket_indices(B.asarray(hue)))
    return SearchBracket(
        lower=ConeResponse(*map(float, table[j, :3])),
        upper=ConeResponse(*map(float, table[j + 1, :3])),
        lower_hue=float(table[j, 3]),
        upper_hue=float(table[j + 1, 3]),
    )


# === Search ===

def max_chroma_lms(
    h: Array,
    iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
    lanes: int = defaults.DEFAULT_SEARCH_LANES,
) -> tuple[Array, Array, Array]:
    """LMS of the max-chroma P3 color at hue h (radians, [-pi, pi)).

    Returns the lower end of the final bracket, so the result hue never
    exceeds the target by more than rounding. The bracket shrinks by a
    factor of lanes + 1 per iteration.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    if lanes < 1:
        raise ValueError(f"lanes must be at least 1, got {lanes}")

    h = B.asarray(h)
    table = B.from_numpy(get_corner_table(), h)
    j = bracket_indices(h)
    lower = table[j, :3]
    upper = table[j + 1, :3]

    lane_ids = B.from_numpy(np.arange(1, lanes + 1, dtype=np.float64), h)
    no_lane = B.zeros_like(lane_ids)
    fractions = (lane_ids / (lanes + 1))[:, None]
    target = h[..., None]

    for _ in range(iterations):
        span = upper - lower
        candidates = lower[..., None, :] + fractions * span[..., None, :]
        _, az, bz = lms_to_jzazbz(candidates[..., 0], candidates[..., 1], candidates[..., 2])

        # Hue <= target: still inside, the boundary is further toward upper
        inside = _wrap_radians(hue_radians(az, bz) - target) <= 0.0

        # Highest passing lane becomes the new lower bound (0 = none passed)
        k = B.max_along_axis(B.where(inside, lane_ids, no_lane), axis=-1, keepdims=True)
        upper = lower + ((k + 1.0) / (lanes + 1)) * span
        lower = lower + (k / (lanes + 1)) * span

    # NaN hue has no edge; report NaN instead of the edge-0 corner
    lower = B.where(B.isnan(target), B.full_like(lower, float("nan")), lower)
    return lower[..., 0], lower[..., 1], lower[..., 2]


def max_chroma_at_hue(
    H: Array,
    iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
    lanes: int = defaults.DEFAULT_SEARCH_LANES,
) -> tuple[Array, Array, Array]:
    """Jzazbz of the max-chroma Display P3 color at hue H (degrees, any range).

    This is the only place hue is normalized.
    """
    h = normalize_hue(B.asarray(H)) * (pi / 180)
    return lms_to_jzazbz(*max_chroma_lms(h, iterations=iterations, lanes=lanes))


def max_chroma_at_hue_wide(
    H: Array,
    iterations: int = defaults.WIDE_SEARCH_ITERATIONS,
    lanes: int = defaults.WIDE_SEARCH_LANES,
) -> tuple[Array, Array, Array]:
    """Wide-lane variant of max_chroma_at_hue: fewer, wider iterations."""
    return max_chroma_at_hue(H, iterations=iterations, lanes=lanes)


def find_max_chroma_color(
    hue: float,
    iterations: int = defaults.DEFAULT_SEARCH_ITERATIONS,
    lanes: int = defaults.DEFAULT_SEARCH_LANES,
) -> JzazbzColor:
    """Max-chroma Display P3 color for one hue in degrees."""
    Jz, az, bz = max_chroma_at_hue(float(hue), iterations=iterations, lanes=lanes)
    return JzazbzColor(float(Jz), float(az), float(bz))

"""Central place for jzslice default settings."""

# Gamut boundary search
DEFAULT_SEARCH_ITERATIONS: int = 20  # bisection, bracket shrinks to 2**-20 of the edge
DEFAULT_SEARCH_LANES: int = 1
WIDE_SEARCH_ITERATIONS: int = 4  # lanes + 1 subdivisions per iteration
WIDE_SEARCH_LANES: int = 32

# Corner table validation
CORNER_TABLE_SAMPLES: int = 257  # points per edge for the monotonicity check
CORNER_HUE_TOLERANCE: float = 1e-4  # radians, tabulated vs computed hue

# Hue presets: Jzazbz hue of each Display P3 corner, degrees in [0, 360)
HUE_PRESETS: dict[str, float] = {
    "red": 42.794290425520614,
    "yellow": 102.52116703710462,
    "green": 136.26636667129654,
    "cyan": 201.83718573465393,
    "blue": 258.64953857226578,
    "magenta": 325.26554587953854,
}
DEFAULT_HUE: float = HUE_PRESETS["red"]

# Hue slice / dial sampling
DEFAULT_GRID_SIZE: tuple[int, int] = (30, 30)  # (columns along Cz, rows along Jz)
DEFAULT_DIAL_COUNT: int = 360
DEFAULT_GRADIENT_COUNT: int = 65
GAMUT_TOLERANCE: float = 1e-4

# Composition
DEFAULT_BUFFER_COUNT: int = 3

"""Colorspace errors.

Numeric conversions never raise: out-of-domain values are clamped and NaN
propagates. These exceptions cover construction-time checks only.
"""


class ColorspaceError(Exception):
    """Base class for colorspace errors."""
    pass


class CornerTableError(ColorspaceError):
    """Gamut corner table failed validation (ordering, hue, monotonicity)."""
    pass

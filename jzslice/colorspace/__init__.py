"""Jzazbz <-> Display P3 conversions and max-chroma gamut boundary search.

This module provides:
- LMS <-> Jzazbz conversions (PQ nonlinearity, exact inverse)
- LMS -> linear Display P3 (and back), Display P3 transfer encoding
- Max-chroma search: the most chromatic P3 color for any hue
- Hue slice / hue dial sampling for drawing
- Backend-agnostic: works with numpy arrays or torch tensors

Example:
    from jzslice.colorspace import find_max_chroma_color, to_linear_display

    cusp = find_max_chroma_color(120.0)   # hue in degrees
    rgb = to_linear_display(cusp)         # linear P3, unclamped
"""

from .types import (
    ConeResponse,
    JzazbzColor,
    LinearP3Color,
    GamutCorner,
    SearchBracket,
)

from .errors import ColorspaceError, CornerTableError

from .jzazbz import (
    lms_to_jzazbz,
    jzazbz_to_lms,
    jzazbz_to_jzczhz,
    jzczhz_to_jzazbz,
    hue_radians,
    forward,
    inverse,
)

from .display_p3 import (
    lms_to_linear_p3,
    linear_p3_to_lms,
    jzazbz_to_linear_p3,
    linear_p3_to_jzazbz,
    linear_to_display_p3,
    display_p3_to_linear,
    is_in_gamut,
    to_linear_display,
)

from .gamut import (
    CORNERS,
    normalize_hue,
    get_corner_table,
    verify_corner_table,
    bracket_indices,
    bracket_for_hue,
    max_chroma_lms,
    max_chroma_at_hue,
    max_chroma_at_hue_wide,
    find_max_chroma_color,
)

from .slice import HueSlice, HueDial, hue_slice, hue_dial, cusp_gradient

__all__ = [
    # Value types
    'ConeResponse',
    'JzazbzColor',
    'LinearP3Color',
    'GamutCorner',
    'SearchBracket',
    # Errors
    'ColorspaceError',
    'CornerTableError',
    # Jzazbz conversions
    'lms_to_jzazbz',
    'jzazbz_to_lms',
    'jzazbz_to_jzczhz',
    'jzczhz_to_jzazbz',
    'hue_radians',
    'forward',
    'inverse',
    # Display P3
    'lms_to_linear_p3',
    'linear_p3_to_lms',
    'jzazbz_to_linear_p3',
    'linear_p3_to_jzazbz',
    'linear_to_display_p3',
    'display_p3_to_linear',
    'is_in_gamut',
    'to_linear_display',
    # Gamut boundary search
    'CORNERS',
    'normalize_hue',
    'get_corner_table',
    'verify_corner_table',
    'bracket_indices',
    'bracket_for_hue',
    'max_chroma_lms',
    'max_chroma_at_hue',
    'max_chroma_at_hue_wide',
    'find_max_chroma_color',
    # Drawing samples
    'HueSlice',
    'HueDial',
    'hue_slice',
    'hue_dial',
    'cusp_gradient',
]

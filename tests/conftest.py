"""Test configuration for jzslice."""

import pytest

from jzslice.colorspace import get_corner_table


@pytest.fixture(scope="session", autouse=True)
def corner_table():
    """Build and verify the gamut corner table once for all tests."""
    return get_corner_table()

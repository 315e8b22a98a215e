"""Tests for hue slice, hue dial and cusp gradient sampling."""

import numpy as np
import pytest

from jzslice.colorspace import (
    HueSlice,
    find_max_chroma_color,
    hue_slice,
    hue_dial,
    cusp_gradient,
    to_linear_display,
)
from jzslice.colorspace.slice import white_jz


class TestHueSlice:

    @pytest.fixture(scope="class")
    def green_slice(self):
        return hue_slice(120.0)

    def test_shapes(self, green_slice):
        assert isinstance(green_slice, HueSlice)
        assert green_slice.Jz.shape == (30, 30)
        assert green_slice.Cz.shape == (30, 30)
        assert green_slice.rgb.shape == (30, 30, 3)
        assert green_slice.in_gamut.dtype == bool

    def test_extent(self, green_slice):
        """Rows run black to white, columns neutral to the cusp chroma."""
        assert green_slice.Jz[0, 0] == 0.0
        assert green_slice.Jz[-1, 0] == pytest.approx(white_jz())
        assert green_slice.Cz[0, 0] == 0.0
        assert green_slice.Cz[0, -1] == pytest.approx(green_slice.cusp.chroma)

    def test_cusp(self, green_slice):
        assert green_slice.cusp == find_max_chroma_color(120.0)

    def test_gamut_mask(self, green_slice):
        mask = green_slice.in_gamut
        assert mask[0, 0]  # black
        assert mask[15, 0]  # mid gray
        assert not mask[0, -1]  # black lightness at full chroma
        assert not mask[-1, -1]  # white lightness at full chroma

    def test_hue_wraps(self):
        assert hue_slice(-90.0, grid_size=(4, 4)).hue == 270.0

    def test_custom_grid(self):
        s = hue_slice(200.0, grid_size=(8, 5))
        assert s.rgb.shape == (5, 8, 3)

    def test_invalid_grid(self):
        with pytest.raises(ValueError):
            hue_slice(0.0, grid_size=(1, 10))


class TestHueDial:

    def test_dial(self):
        dial = hue_dial(count=12)
        assert dial.rgb.shape == (12, 3)
        assert dial.jzazbz.shape == (12, 3)
        np.testing.assert_allclose(dial.hues, np.arange(12) * 30.0)
        np.testing.assert_allclose(dial.rgb.max(axis=-1), 1.0, atol=1e-5)
        np.testing.assert_allclose(dial.rgb.min(axis=-1), 0.0, atol=1e-5)

    def test_dial_matches_scalar_search(self):
        dial = hue_dial(count=12)
        np.testing.assert_allclose(dial.jzazbz[3], find_max_chroma_color(90.0), atol=1e-5)

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            hue_dial(count=0)

    def test_dial_on_torch_reference(self):
        torch = pytest.importorskip('torch')
        dial = hue_dial(count=8, reference=torch.zeros((), dtype=torch.float64))
        assert isinstance(dial.rgb, torch.Tensor)
        np.testing.assert_allclose(dial.rgb.numpy(), hue_dial(count=8).rgb, atol=1e-9)


class TestCuspGradient:

    def test_endpoints(self):
        ramp = cusp_gradient(200.0, count=65)
        assert ramp.shape == (65, 3)
        np.testing.assert_allclose(ramp[0], 0.0, atol=1e-9)
        np.testing.assert_allclose(ramp[32], to_linear_display(find_max_chroma_color(200.0)), atol=1e-9)
        # Jzazbz neutral axis is not exactly P3 white
        np.testing.assert_allclose(ramp[-1], 1.0, atol=1e-2)

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            cusp_gradient(0.0, count=2)

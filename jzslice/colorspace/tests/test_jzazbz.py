"""Tests for Jzazbz <-> LMS conversions."""

import math

import numpy as np
import pytest

from jzslice.colorspace import (
    ConeResponse,
    JzazbzColor,
    lms_to_jzazbz,
    jzazbz_to_lms,
    jzazbz_to_jzczhz,
    jzczhz_to_jzazbz,
    linear_p3_to_lms,
    forward,
    inverse,
)
from jzslice.colorspace.jzazbz import LMSP_MIN, LMSP_MAX, pq_encode, pq_decode


def _random_lms(n: int, seed: int = 42):
    rng = np.random.default_rng(seed)
    rgb = rng.random((n, 3))
    return linear_p3_to_lms(rgb[:, 0], rgb[:, 1], rgb[:, 2])


class TestBasicConversions:
    """Test fixed points of the forward transform."""

    def test_black(self):
        """Black: zero cone response gives Jz=az=bz=0."""
        Jz, az, bz = lms_to_jzazbz(np.array([0.0]), np.array([0.0]), np.array([0.0]))
        np.testing.assert_allclose(Jz, [0], atol=1e-12)
        np.testing.assert_allclose(az, [0], atol=1e-12)
        np.testing.assert_allclose(bz, [0], atol=1e-12)

    def test_negative_lms_clamps_to_black(self):
        """Negative cone responses are treated as zero, not rejected."""
        neg = lms_to_jzazbz(np.array([-0.5]), np.array([-1.0]), np.array([-2.0]))
        zero = lms_to_jzazbz(np.array([0.0]), np.array([0.0]), np.array([0.0]))
        for got, expected in zip(neg, zero):
            np.testing.assert_array_equal(got, expected)

    def test_equal_lms_is_neutral(self):
        """Equal L, M, S has no chromatic component."""
        v = np.array([0.1, 0.5, 0.9])
        _, az, bz = lms_to_jzazbz(v, v, v)
        np.testing.assert_allclose(az, 0, atol=1e-12)
        np.testing.assert_allclose(bz, 0, atol=1e-12)

    def test_lightness_increases_with_response(self):
        v = np.linspace(0.01, 1.0, 50)
        Jz, _, _ = lms_to_jzazbz(v, v, v)
        assert np.all(np.diff(Jz) > 0)

    def test_display_range(self):
        """Display P3 white sits near Jz 0.17."""
        Jz, _, _ = lms_to_jzazbz(*linear_p3_to_lms(1.0, 1.0, 1.0))
        assert 0.1 < float(Jz) < 0.25


class TestRoundTrip:
    """forward and inverse must undo each other inside the clamp domain."""

    def test_lms_roundtrip_random(self):
        L, M, S = _random_lms(200)
        L2, M2, S2 = jzazbz_to_lms(*lms_to_jzazbz(L, M, S))
        np.testing.assert_allclose(L2, L, rtol=1e-8, atol=1e-12)
        np.testing.assert_allclose(M2, M, rtol=1e-8, atol=1e-12)
        np.testing.assert_allclose(S2, S, rtol=1e-8, atol=1e-12)

    def test_forward_inverse_forward(self):
        """forward(inverse(forward(lms))) == forward(lms)."""
        L, M, S = _random_lms(200, seed=7)
        jab = lms_to_jzazbz(L, M, S)
        jab2 = lms_to_jzazbz(*jzazbz_to_lms(*jab))
        for got, expected in zip(jab2, jab):
            np.testing.assert_allclose(got, expected, rtol=1e-4, atol=1e-10)

    def test_black_roundtrip(self):
        L, M, S = jzazbz_to_lms(np.array([0.0]), np.array([0.0]), np.array([0.0]))
        np.testing.assert_allclose([L[0], M[0], S[0]], [0, 0, 0], atol=1e-12)

    def test_scalar_wrappers(self):
        lms = ConeResponse(0.4, 0.3, 0.2)
        jab = forward(lms)
        assert isinstance(jab, JzazbzColor)
        back = inverse(jab)
        assert isinstance(back, ConeResponse)
        np.testing.assert_allclose(back, lms, rtol=1e-9)


class TestClamping:
    """Out-of-domain input degrades smoothly instead of failing."""

    def test_pq_decode_clamps_to_domain(self):
        x = np.array([-1.0, 0.0, LMSP_MIN, LMSP_MAX, 10.0])
        out = pq_decode(x)
        assert np.all(np.isfinite(out))
        assert np.all(out >= 0)
        np.testing.assert_array_equal(out[0], out[1])
        np.testing.assert_array_equal(out[3], out[4])

    def test_pq_encode_decode(self):
        x = np.geomspace(1e-4, 50.0, 64)
        np.testing.assert_allclose(pq_decode(pq_encode(x)), x, rtol=1e-8)

    def test_far_out_of_gamut_is_finite(self):
        """A huge chromatic value clamps one channel to black."""
        L, M, S = jzazbz_to_lms(np.array([0.1]), np.array([100.0]), np.array([0.0]))
        assert np.all(np.isfinite(L)) and np.all(np.isfinite(M)) and np.all(np.isfinite(S))
        assert M[0] <= 1e-12

    def test_nan_propagates(self):
        Jz, az, bz = lms_to_jzazbz(np.array([np.nan]), np.array([0.5]), np.array([0.5]))
        assert np.isnan(Jz[0])


class TestPolar:
    """Test Jzazbz <-> JzCzhz."""

    def test_zero_chroma(self):
        Jz, az, bz = jzczhz_to_jzazbz(np.array([0.1]), np.array([0.0]), np.array([123.0]))
        assert Jz[0] == 0.1
        np.testing.assert_allclose(az, [0], atol=1e-15)
        np.testing.assert_allclose(bz, [0], atol=1e-15)

    def test_polar_roundtrip(self):
        Jz = np.array([0.05, 0.1])
        az = np.array([0.02, -0.01])
        bz = np.array([-0.03, 0.015])
        J2, C, h = jzazbz_to_jzczhz(Jz, az, bz)
        assert np.all((h >= 0) & (h < 360))
        J3, a2, b2 = jzczhz_to_jzazbz(J2, C, h)
        np.testing.assert_allclose(a2, az, atol=1e-12)
        np.testing.assert_allclose(b2, bz, atol=1e-12)

    def test_value_type_hue(self):
        """Derived hue is in [-180, 180); +-180 reports as -180."""
        assert JzazbzColor(0.1, -0.1, 0.0).hue == -180.0
        assert JzazbzColor(0.1, 0.0, 0.1).hue == pytest.approx(90.0)
        assert JzazbzColor(0.1, 0.03, 0.04).chroma == pytest.approx(0.05)
        assert JzazbzColor(0.1, 0.0, 0.1).hue_radians == pytest.approx(math.pi / 2)


class TestTorchBackend:
    """Test torch tensor support (if torch available)."""

    @pytest.fixture
    def torch(self):
        pytest.importorskip('torch')
        import torch
        return torch

    def test_torch_returns_tensors(self, torch):
        v = torch.tensor([0.2, 0.5])
        Jz, az, bz = lms_to_jzazbz(v, v, v)
        assert isinstance(Jz, torch.Tensor)
        assert Jz.shape == (2,)

    def test_torch_numpy_parity(self, torch):
        L, M, S = _random_lms(32)
        jab_np = lms_to_jzazbz(L, M, S)
        jab_t = lms_to_jzazbz(torch.tensor(L), torch.tensor(M), torch.tensor(S))
        for got, expected in zip(jab_t, jab_np):
            np.testing.assert_allclose(got.numpy(), expected, atol=1e-12)

        lms_t = jzazbz_to_lms(*jab_t)
        for got, expected in zip(lms_t, (L, M, S)):
            np.testing.assert_allclose(got.numpy(), expected, rtol=1e-8, atol=1e-12)

"""
test_features.py
----------------

Tests for feature maps: Fourier and Chebyshev builders, domains, wrapping.
"""

import jax.numpy as jnp
import numpy as np
import pytest

from invreg.model.features import (
    FeatureMap,
    as_feature_map,
    chebyshev_features,
    fourier_features,
)
from invreg.utils.math import chebyshev_basis


class TestFourierFeatures:
    """Intercept + harmonics of a cycle."""

    def test_single_harmonic_values(self, fourier_map):
        phi = fourier_map(0.25)
        assert phi.shape == (3,)
        assert jnp.allclose(phi, jnp.array([1.0, 1.0, 0.0]), atol=1e-6)

    def test_output_length(self):
        assert fourier_features(n_harmonics=3)(0.1).shape == (7,)

    def test_second_harmonic_ordering(self):
        fmap = fourier_features(n_harmonics=2, period=1.0)
        w = 0.1
        expected = jnp.array(
            [
                1.0,
                jnp.sin(2 * jnp.pi * w),
                jnp.cos(2 * jnp.pi * w),
                jnp.sin(4 * jnp.pi * w),
                jnp.cos(4 * jnp.pi * w),
            ]
        )
        assert jnp.allclose(fmap(w), expected, atol=1e-6)

    def test_period_scaling(self):
        fmap = fourier_features(period=365.0)
        assert fmap.domain == (0.0, 365.0)
        assert jnp.allclose(fmap(365.0 / 4), jnp.array([1.0, 1.0, 0.0]), atol=1e-5)

    def test_periodicity(self, fourier_map):
        assert jnp.allclose(fourier_map(0.1), fourier_map(1.1), atol=1e-5)

    def test_design_batch(self, fourier_map):
        X = fourier_map.design(jnp.linspace(0.0, 1.0, 5))
        assert X.shape == (5, 3)
        assert jnp.allclose(X[:, 0], 1.0)

    @pytest.mark.parametrize("bad", [0, -1])
    def test_rejects_bad_harmonics(self, bad):
        with pytest.raises(ValueError, match="n_harmonics"):
            fourier_features(n_harmonics=bad)


class TestChebyshevFeatures:
    """Chebyshev polynomials on an interval."""

    def test_midpoint_values(self):
        fmap = chebyshev_features(3, domain=(0.0, 1.0))
        # w = 0.5 maps to u = 0: T0..T3 = 1, 0, -1, 0
        assert jnp.allclose(fmap(0.5), jnp.array([1.0, 0.0, -1.0, 0.0]), atol=1e-6)

    def test_upper_bound_is_one(self):
        fmap = chebyshev_features(4, domain=(10.0, 20.0))
        assert jnp.allclose(fmap(20.0), jnp.ones(5), atol=1e-5)

    def test_not_periodic(self):
        fmap = chebyshev_features(2)
        assert not fmap.is_periodic
        with pytest.raises(ValueError, match="not periodic"):
            fmap.wrap(jnp.array([1.5]))

    def test_basis_matches_recurrence(self):
        x = jnp.linspace(-1.0, 1.0, 5)
        B = chebyshev_basis(x, degree=3)
        assert B.shape == (5, 4)
        assert jnp.allclose(B[:, 2], 2 * x**2 - 1, atol=1e-6)
        assert jnp.allclose(B[:, 3], 4 * x**3 - 3 * x, atol=1e-6)

    def test_basis_rejects_bad_input(self):
        with pytest.raises(ValueError, match="degree"):
            chebyshev_basis(jnp.zeros(3), degree=-1)
        with pytest.raises(ValueError, match="1-D"):
            chebyshev_basis(jnp.zeros((3, 2)), degree=2)


class TestDomain:
    """Domain checks and wrapping."""

    def test_out_of_domain_flags(self, fourier_map):
        flags = fourier_map.out_of_domain(np.array([-0.1, 0.0, 0.5, 1.0, 1.2]))
        assert flags.tolist() == [True, False, False, False, True]

    def test_no_domain_never_flags(self):
        fmap = as_feature_map(lambda w: jnp.array([1.0, w]))
        assert not fmap.out_of_domain(np.array([-1e6, 1e6])).any()

    def test_wrap(self, fourier_map):
        wrapped = fourier_map.wrap(jnp.array([1.05, -0.25, 0.5]))
        assert jnp.allclose(wrapped, jnp.array([0.05, 0.75, 0.5]), atol=1e-6)

    def test_period_requires_domain(self):
        with pytest.raises(ValueError, match="domain"):
            FeatureMap(fn=lambda w: jnp.array([w]), period=1.0)

    def test_invalid_domain(self):
        with pytest.raises(ValueError, match="low < high"):
            FeatureMap(fn=lambda w: jnp.array([w]), domain=(1.0, 0.0))


class TestAsFeatureMap:
    def test_wraps_callable(self):
        def linear(w):
            return jnp.array([1.0, w])

        fmap = as_feature_map(linear)
        assert isinstance(fmap, FeatureMap)
        assert fmap.name == "linear"
        assert fmap.domain is None and fmap.period is None

    def test_passes_feature_map_through(self, fourier_map):
        assert as_feature_map(fourier_map) is fourier_map

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            as_feature_map(3.0)

    def test_list_valued_callable(self):
        fmap = as_feature_map(lambda w: [1.0, 2.0 * w])
        X = fmap.design(jnp.array([0.0, 0.5, 1.0]))
        assert X.shape == (3, 2)
        assert jnp.allclose(X[:, 1], jnp.array([0.0, 1.0, 2.0]))

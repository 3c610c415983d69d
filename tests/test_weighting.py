"""
test_weighting.py
-----------------

Tests for log-space normalization and the random prior weighting step.
"""

import jax
import jax.numpy as jnp
import jax.random as jr
import pytest

from invreg.errors import DegenerateLikelihoodError
from invreg.posterior import (
    log_prior_weights,
    normalize_posterior,
    posterior_weights,
)
from invreg.posterior.weighting import validate_concentration
from invreg.utils.math import gaussian_logpdf, normalize_log_weights


class TestNormalizeLogWeights:
    def test_matches_plain_normalization(self):
        lik = jnp.array([0.1, 0.3, 0.6])
        probs, degenerate = normalize_log_weights(jnp.log(lik))
        assert not bool(degenerate)
        assert jnp.allclose(probs, lik / lik.sum(), atol=1e-6)

    def test_no_underflow(self):
        # exp(-2000) underflows, ratios do not
        log_w = jnp.array([-2000.0, -2001.0, -2000.0 - jnp.log(4.0)])
        probs, degenerate = normalize_log_weights(log_w)
        assert not bool(degenerate)
        assert jnp.all(jnp.isfinite(probs))
        assert probs[0] > probs[1] > probs[2]
        assert jnp.isclose(probs.sum(), 1.0, atol=1e-6)

    def test_zero_weights_stay_zero(self):
        probs, _ = normalize_log_weights(jnp.array([0.0, -jnp.inf, 0.0]))
        assert jnp.allclose(probs, jnp.array([0.5, 0.0, 0.5]))

    def test_all_zero_is_degenerate(self):
        probs, degenerate = normalize_log_weights(jnp.full((4,), -jnp.inf))
        assert bool(degenerate)
        assert jnp.all(jnp.isnan(probs))

    def test_nan_counts_as_zero(self):
        probs, degenerate = normalize_log_weights(jnp.array([jnp.nan, 0.0]))
        assert not bool(degenerate)
        assert jnp.allclose(probs, jnp.array([0.0, 1.0]))

        _, degenerate = normalize_log_weights(jnp.array([jnp.nan, -jnp.inf]))
        assert bool(degenerate)

    def test_point_masses_share_mass(self):
        probs, degenerate = normalize_log_weights(
            jnp.array([jnp.inf, 3.0, jnp.inf, -jnp.inf])
        )
        assert not bool(degenerate)
        assert jnp.allclose(probs, jnp.array([0.5, 0.0, 0.5, 0.0]))


class TestGaussianLogpdf:
    def test_standard_normal(self):
        value = gaussian_logpdf(jnp.array(0.0), jnp.array(0.0), jnp.array(1.0))
        assert jnp.isclose(value, -0.5 * jnp.log(2 * jnp.pi))

    def test_zero_variance(self):
        hit = gaussian_logpdf(jnp.array(1.0), jnp.array(1.0), jnp.array(0.0))
        miss = gaussian_logpdf(jnp.array(1.0), jnp.array(1.5), jnp.array(0.0))
        assert jnp.isposinf(hit)
        assert jnp.isneginf(miss)


class TestPriorWeights:
    def test_fixed_weights(self):
        log_w = log_prior_weights(jr.PRNGKey(0), 5, None)
        assert jnp.array_equal(log_w, jnp.zeros(5))

    def test_random_weights_reproducible(self):
        a = log_prior_weights(jr.PRNGKey(3), 50, 1.0)
        b = log_prior_weights(jr.PRNGKey(3), 50, 1.0)
        c = log_prior_weights(jr.PRNGKey(4), 50, 1.0)
        assert a.shape == (50,)
        assert jnp.array_equal(a, b)
        assert not jnp.array_equal(a, c)

    def test_gamma_mean(self):
        g = jnp.exp(log_prior_weights(jr.PRNGKey(0), 20000, 2.0))
        assert float(g.mean()) == pytest.approx(2.0, rel=0.05)

    @pytest.mark.parametrize("bad", [0.0, -1.0, float("inf"), float("nan")])
    def test_invalid_concentration(self, bad):
        with pytest.raises(ValueError, match="concentration"):
            validate_concentration(bad)

    def test_valid_concentration(self):
        validate_concentration(None)
        validate_concentration(0.5)


class TestPosteriorWeights:
    def test_sums_to_one(self):
        loglik = jnp.log(jnp.array([0.2, 0.5, 0.3]))
        probs, degenerate = posterior_weights(loglik, jr.PRNGKey(0), 1.0)
        assert not bool(degenerate)
        assert jnp.isclose(probs.sum(), 1.0, atol=1e-6)
        assert jnp.all(probs >= 0)

    def test_zero_likelihood_gets_zero_mass(self):
        loglik = jnp.array([0.0, -jnp.inf, -1.0])
        probs, _ = posterior_weights(loglik, jr.PRNGKey(1), 1.0)
        assert probs[1] == 0.0

    def test_without_random_weights(self):
        lik = jnp.array([0.2, 0.5, 0.3])
        probs, _ = posterior_weights(jnp.log(lik), jr.PRNGKey(0), None)
        assert jnp.allclose(probs, lik, atol=1e-6)

    def test_random_weights_average_to_likelihood_ratio(self):
        # E[g_j L_j / sum g_k L_k] with equal likelihoods is 1 / J
        keys = jr.split(jr.PRNGKey(0), 4000)
        probs, _ = jax.vmap(lambda k: posterior_weights(jnp.zeros(4), k, 1.0))(keys)
        assert jnp.allclose(probs.mean(axis=0), 0.25, atol=0.02)

    def test_vmap_flags_degenerate_rows(self):
        loglik = jnp.array([[0.0, -1.0], [-jnp.inf, -jnp.inf]])
        keys = jr.split(jr.PRNGKey(0), 2)
        probs, degenerate = jax.vmap(lambda ll, k: posterior_weights(ll, k, 1.0))(
            loglik, keys
        )
        assert degenerate.tolist() == [False, True]
        assert jnp.all(jnp.isnan(probs[1]))


class TestNormalizePosterior:
    def test_raises_on_degenerate(self):
        with pytest.raises(DegenerateLikelihoodError, match="zero likelihood"):
            normalize_posterior(jnp.full((3,), -jnp.inf), concentration=None)

    def test_needs_key_for_random_weights(self):
        with pytest.raises(ValueError, match="key"):
            normalize_posterior(jnp.zeros(3))

    def test_plain_normalization(self):
        probs = normalize_posterior(jnp.log(jnp.array([1.0, 3.0])), concentration=None)
        assert jnp.allclose(probs, jnp.array([0.25, 0.75]))

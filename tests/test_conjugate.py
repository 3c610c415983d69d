"""
test_conjugate.py
-----------------

Tests for the conjugate Normal-Inverse-Gamma fit and its samplers.
"""

import jax.numpy as jnp
import jax.random as jr
import numpy as np
import pytest

from invreg.data import TrainingSet
from invreg.errors import DegenerateDesignError
from invreg.inference import ConjugateSampler
from invreg.model import GaussianLikelihood
from invreg.posterior import (
    NormalInverseGammaPosterior,
    ParameterPosterior,
    PointPosterior,
)


class TestFit:
    @pytest.fixture
    def posterior(self, sine_training_set, fourier_map):
        return ConjugateSampler().fit(sine_training_set, fourier_map)

    def test_implements_protocol(self, posterior):
        assert isinstance(posterior, NormalInverseGammaPosterior)
        assert isinstance(posterior, ParameterPosterior)

    def test_recovers_coefficients(self, posterior, sine_beta):
        beta_hat, sigmasq_hat = posterior.params
        assert jnp.allclose(beta_hat, sine_beta, atol=0.1)
        # training noise sd is 0.1
        assert 0.004 < float(sigmasq_hat) < 0.025

    def test_point_estimate_uses_residual_dof(self, posterior):
        _, sigmasq_hat = posterior.params
        assert posterior.dof == 50 - 3
        assert float(sigmasq_hat) == pytest.approx(posterior.rss / 47, rel=1e-5)

    def test_inverse_gamma_hyperparameters(self, posterior):
        assert posterior.shape == pytest.approx(47 / 2)
        assert posterior.scale == pytest.approx(posterior.rss / 2)

    def test_diagnostics(self, posterior):
        diag = posterior.diagnostics()
        assert diag["n"] == 50
        assert diag["p"] == 3
        assert diag["dof"] == 47
        assert diag["condition_number"] >= 1.0

    def test_fit_is_fresh_each_call(self, sine_training_set, fourier_map):
        sampler = ConjugateSampler()
        a = sampler.fit(sine_training_set, fourier_map)
        b = sampler.fit(sine_training_set, fourier_map)
        assert a is not b
        assert jnp.allclose(a.beta_hat, b.beta_hat)

    def test_accepts_plain_callable(self, sine_training_set):
        def features(w):
            return jnp.array([1.0, jnp.sin(2 * jnp.pi * w)])

        posterior = ConjugateSampler().fit(sine_training_set, features)
        assert posterior.p == 2


class TestDegenerateDesign:
    def test_too_few_pairs(self, fourier_map):
        data = TrainingSet([0.1, 0.4], [0.5, 0.6])
        with pytest.raises(DegenerateDesignError, match=r"n=2, p=3") as excinfo:
            ConjugateSampler().fit(data, fourier_map)
        assert excinfo.value.n == 2
        assert excinfo.value.p == 3

    def test_n_equal_p(self, fourier_map):
        data = TrainingSet([0.1, 0.4, 0.7], [0.5, 0.6, 0.1])
        with pytest.raises(DegenerateDesignError):
            ConjugateSampler().fit(data, fourier_map)

    def test_rank_deficient(self):
        data = TrainingSet(np.linspace(0.0, 1.0, 10), np.arange(10.0))

        def collinear(w):
            return jnp.array([1.0, w, 2.0 * w])

        with pytest.raises(DegenerateDesignError, match="rank deficient") as excinfo:
            ConjugateSampler().fit(data, collinear)
        assert excinfo.value.rank == 2

    def test_is_value_error(self, fourier_map):
        data = TrainingSet([0.1, 0.4], [0.5, 0.6])
        with pytest.raises(ValueError):
            ConjugateSampler().fit(data, fourier_map)


class TestSampling:
    @pytest.fixture
    def posterior(self, sine_training_set, fourier_map):
        return ConjugateSampler().fit(sine_training_set, fourier_map)

    def test_shapes(self, posterior):
        draws = posterior.sample(7, key=jr.PRNGKey(0))
        assert draws.beta.shape == (7, 3)
        assert draws.sigmasq.shape == (7,)
        assert draws.n_draws == 7
        assert jnp.all(draws.sigmasq > 0)

    def test_reproducible(self, posterior):
        a = posterior.sample(5, key=jr.PRNGKey(3))
        b = posterior.sample(5, key=jr.PRNGKey(3))
        assert jnp.array_equal(a.beta, b.beta)
        assert jnp.array_equal(a.sigmasq, b.sigmasq)

    def test_different_keys_differ(self, posterior):
        a = posterior.sample(5, key=jr.PRNGKey(0))
        b = posterior.sample(5, key=jr.PRNGKey(1))
        assert not jnp.allclose(a.sigmasq, b.sigmasq)

    def test_moments(self, posterior):
        draws = posterior.sample(20_000, key=jr.PRNGKey(42))
        a, b = posterior.shape, posterior.scale
        # Inverse-Gamma mean b / (a - 1)
        assert float(jnp.mean(draws.sigmasq)) == pytest.approx(b / (a - 1), rel=0.05)
        assert jnp.allclose(jnp.mean(draws.beta, axis=0), posterior.beta_hat, atol=0.01)

    def test_coefficient_covariance(self, posterior):
        draws = posterior.sample(20_000, key=jr.PRNGKey(7))
        a, b = posterior.shape, posterior.scale
        # marginal covariance of beta is E[sigmasq] (XᵗX)⁻¹
        expected = (b / (a - 1)) * posterior.gram_inv
        empirical = jnp.cov(draws.beta, rowvar=False)
        assert jnp.allclose(empirical, expected, atol=0.1 * float(jnp.max(jnp.abs(expected))))

    def test_rejects_non_positive_n(self, posterior):
        with pytest.raises(ValueError):
            posterior.sample(0, key=jr.PRNGKey(0))

    def test_log_prob(self, posterior):
        beta_hat, sigmasq_hat = posterior.params
        at_estimate = posterior.log_prob(beta_hat, sigmasq_hat)
        far_away = posterior.log_prob(beta_hat + 1.0, sigmasq_hat)
        assert jnp.isfinite(at_estimate)
        assert at_estimate > far_away
        assert posterior.log_prob(beta_hat, 0.0) == -jnp.inf


class TestPointPosterior:
    def test_sample_repeats_point(self, sine_beta):
        post = PointPosterior(sine_beta, 0.04)
        draws = post.sample(4)
        assert draws.beta.shape == (4, 3)
        assert jnp.allclose(draws.beta, sine_beta[None, :])
        assert jnp.allclose(draws.sigmasq, 0.04)

    def test_log_prob(self, sine_beta):
        post = PointPosterior(sine_beta, 0.04)
        assert post.log_prob(sine_beta, 0.04) == 0.0
        assert post.log_prob(sine_beta + 1.0, 0.04) == -jnp.inf

    def test_zero_variance_allowed(self, sine_beta):
        post = PointPosterior(sine_beta, 0.0)
        assert float(post.params.sigmasq) == 0.0

    def test_rejects_negative_variance(self, sine_beta):
        with pytest.raises(ValueError, match="non-negative"):
            PointPosterior(sine_beta, -1.0)

    def test_integer_coefficients_keep_variance(self):
        post = PointPosterior([0, 1, 0], 0.1)
        assert jnp.issubdtype(post.params.beta.dtype, jnp.floating)
        assert float(post.params.sigmasq) == pytest.approx(0.1)
        draws = post.sample(3)
        assert jnp.allclose(draws.sigmasq, 0.1)

    def test_integer_coefficients_give_finite_likelihood(self, fourier_map):
        post = PointPosterior([0, 1, 0], 0.1)
        beta, sigmasq = post.params
        loglik = GaussianLikelihood(fourier_map).log_likelihood(
            0.3, [0.25, 0.75], beta, sigmasq
        )
        assert jnp.all(jnp.isfinite(loglik))

    @pytest.mark.parametrize("sigmasq", [float("nan"), float("inf")])
    def test_rejects_non_finite_variance(self, sine_beta, sigmasq):
        with pytest.raises(ValueError, match="sigmasq"):
            PointPosterior(sine_beta, sigmasq)

    def test_to_point_matches_params(self, sine_training_set, fourier_map):
        posterior = ConjugateSampler().fit(sine_training_set, fourier_map)
        point = posterior.to_point()
        assert jnp.allclose(point.params.beta, posterior.params.beta)
        assert jnp.allclose(point.params.sigmasq, posterior.params.sigmasq)
        assert isinstance(point, ParameterPosterior)

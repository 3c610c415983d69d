"""
posterior.py
------------

Concrete ParameterPosterior implementations.

This module provides:
- NormalInverseGammaPosterior: exact conjugate posterior of a linear-Gaussian
  model under the reference prior p(beta, sigmasq) ∝ 1 / sigmasq
- PointPosterior: delta distribution at fixed parameters

Conjugate posterior
-------------------
With design X (n, p), OLS estimate beta_hat and residual sum of squares RSS:

    sigmasq | data        ~ InvGamma((n - p) / 2, RSS / 2)
    beta | sigmasq, data  ~ N(beta_hat, sigmasq (XᵗX)⁻¹)

Draws are exact and independent; no MCMC is involved.
"""

from __future__ import annotations

import jax.numpy as jnp
import jax.random as jr
from jax.scipy.special import gammaln

from invreg.posterior.parameter_posterior import ParameterDraws, Parameters


class NormalInverseGammaPosterior:
    """
    Normal-Inverse-Gamma posterior over (beta, sigmasq).

    Construct through ``ConjugateSampler.fit``; the constructor assumes a
    full-rank design with n > p.

    Parameters
    ----------
    beta_hat : jnp.ndarray, shape (p,)
        OLS coefficient estimate.
    gram : jnp.ndarray, shape (p, p)
        XᵗX.
    rss : float
        Residual sum of squares of the OLS fit.
    n : int
        Number of training pairs.
    """

    def __init__(self, beta_hat, gram, rss, n: int):
        self.beta_hat = jnp.asarray(beta_hat)
        self.gram = jnp.asarray(gram)
        self.gram_inv = jnp.linalg.inv(self.gram)
        # lower Cholesky factor of (XᵗX)⁻¹, the unit-variance coefficient covariance
        self.chol = jnp.linalg.cholesky(self.gram_inv)
        self.rss = float(rss)
        self.n = int(n)
        self.p = int(self.beta_hat.shape[0])

    # ------------------------------------------------------------------
    # ParameterPosterior protocol implementation
    # ------------------------------------------------------------------
    @property
    def dof(self) -> int:
        """Residual degrees of freedom n - p."""
        return self.n - self.p

    @property
    def shape(self) -> float:
        """Inverse-Gamma shape (n - p) / 2."""
        return 0.5 * self.dof

    @property
    def scale(self) -> float:
        """Inverse-Gamma scale RSS / 2."""
        return 0.5 * self.rss

    @property
    def params(self) -> Parameters:
        """OLS point estimate (beta_hat, RSS / (n - p))."""
        return Parameters(self.beta_hat, jnp.asarray(self.rss / self.dof))

    def sample(self, n: int = 1, *, key) -> ParameterDraws:
        """
        Draw n independent (beta, sigmasq) pairs.

        Parameters
        ----------
        n : int, default=1
            Number of draws.
        key : jax.Array
            PRNG key.

        Returns
        -------
        ParameterDraws
            beta (n, p), sigmasq (n,).
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        key_var, key_beta = jr.split(key)
        sigmasq = self.scale / jr.gamma(key_var, self.shape, shape=(n,))
        z = jr.normal(key_beta, (n, self.p))
        beta = self.beta_hat + jnp.sqrt(sigmasq)[:, None] * (z @ self.chol.T)
        return ParameterDraws(beta, sigmasq)

    def log_prob(self, beta, sigmasq) -> jnp.ndarray:
        """
        Exact log density of the Normal-Inverse-Gamma posterior.

        Returns -inf for sigmasq <= 0.
        """
        beta = jnp.asarray(beta)
        sigmasq = jnp.asarray(sigmasq)
        a, b = self.shape, self.scale
        safe = jnp.where(sigmasq > 0, sigmasq, 1.0)

        log_ig = a * jnp.log(b) - gammaln(a) - (a + 1.0) * jnp.log(safe) - b / safe
        delta = beta - self.beta_hat
        quad = delta @ self.gram @ delta
        _, logdet_gram = jnp.linalg.slogdet(self.gram)
        log_mvn = -0.5 * (
            self.p * jnp.log(2.0 * jnp.pi * safe) - logdet_gram + quad / safe
        )
        return jnp.where(sigmasq > 0, log_ig + log_mvn, -jnp.inf)

    def diagnostics(self) -> dict:
        """
        Return fit diagnostics.

        Returns
        -------
        dict
            n, p, dof, rss, sigmasq_hat and the condition number of XᵗX.
        """
        return {
            "n": self.n,
            "p": self.p,
            "dof": self.dof,
            "rss": self.rss,
            "sigmasq_hat": self.rss / self.dof,
            "condition_number": float(jnp.linalg.cond(self.gram)),
        }

    def to_point(self) -> PointPosterior:
        """Delta posterior at the OLS point estimate."""
        beta, sigmasq = self.params
        return PointPosterior(beta, sigmasq)

    def __repr__(self) -> str:
        return f"NormalInverseGammaPosterior(n={self.n}, p={self.p}, rss={self.rss:.4g})"


class PointPosterior:
    """
    Delta distribution at fixed parameters.

    Represents parameters known exactly: every draw repeats the point.
    Used for the no-randomness configuration of the Monte-Carlo aggregator
    and for deterministic (possibly zero-variance) parameters.

    Parameters
    ----------
    beta : array-like, shape (p,)
    sigmasq : float
        Noise variance, >= 0. Zero gives point-mass likelihoods.
    """

    def __init__(self, beta, sigmasq):
        beta = jnp.asarray(beta)
        # integer coefficients must not drag the variance down to an integer
        self._beta = beta.astype(jnp.result_type(beta, 0.0))
        self._sigmasq = jnp.asarray(sigmasq, dtype=self._beta.dtype)
        if self._beta.ndim != 1:
            raise ValueError(f"beta must be 1-D, got shape {self._beta.shape}")
        if not bool(jnp.all(jnp.isfinite(self._beta))):
            raise ValueError("beta must be finite")
        if self._sigmasq.ndim != 0 or not float(self._sigmasq) >= 0:
            raise ValueError("sigmasq must be a non-negative scalar")
        if not jnp.isfinite(self._sigmasq):
            raise ValueError("sigmasq must be finite")

    @property
    def params(self) -> Parameters:
        """Return the fixed parameters."""
        return Parameters(self._beta, self._sigmasq)

    def sample(self, n: int = 1, *, key=None) -> ParameterDraws:
        """
        Sample from the delta distribution (returns the point n times).

        ``key`` is accepted for protocol compatibility and ignored.
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        return ParameterDraws(
            jnp.tile(self._beta[None, :], (n, 1)),
            jnp.full((n,), self._sigmasq),
        )

    def log_prob(self, beta, sigmasq) -> jnp.ndarray:
        """0.0 at the point and -inf elsewhere."""
        match = jnp.allclose(jnp.asarray(beta), self._beta) & jnp.allclose(
            jnp.asarray(sigmasq), self._sigmasq
        )
        return jnp.where(match, 0.0, -jnp.inf)

    def diagnostics(self) -> dict:
        """Empty dict (nothing was fitted)."""
        return {}

    def __repr__(self) -> str:
        return f"PointPosterior(p={self._beta.shape[0]}, sigmasq={float(self._sigmasq):.4g})"

"""
parameter_posterior.py
----------------------

Protocol for posterior distributions over regression parameters.

This module defines the ParameterPosterior interface representing
p(beta, sigmasq | training set), the input of every inversion engine.

Design
------
Different fits produce different parameter posteriors:
- Conjugate fit: exact Normal-Inverse-Gamma posterior (sampled i.i.d.)
- Point: delta distribution at fixed parameters (no parameter uncertainty)

Both implement a common protocol so the Monte-Carlo aggregator and the
large-sample approximation can consume either one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

import jax.numpy as jnp

if TYPE_CHECKING:
    import jax


class Parameters(NamedTuple):
    """
    Regression parameters, optionally batched over draws.

    Attributes
    ----------
    beta : jnp.ndarray, shape (p,) or (S, p)
        Coefficient vector(s).
    sigmasq : jnp.ndarray, shape () or (S,)
        Noise variance(s), >= 0.

    Notes
    -----
    A NamedTuple is a JAX PyTree, so a batch of draws can be passed straight
    to ``jax.vmap``.
    """

    beta: jnp.ndarray
    sigmasq: jnp.ndarray

    @property
    def n_draws(self) -> int:
        """Leading dimension S (1 for an unbatched point)."""
        return 1 if self.beta.ndim == 1 else self.beta.shape[0]


# Batched parameters returned by ParameterPosterior.sample
ParameterDraws = Parameters


@runtime_checkable
class ParameterPosterior(Protocol):
    """
    Protocol for posterior distributions over (beta, sigmasq).

    Returned by ConjugateSampler.fit(training_set, feature_map).
    """

    @property
    def params(self) -> Parameters:
        """
        Point estimate of the parameters.

        Notes
        -----
        - Conjugate: OLS beta_hat and sigmasq_hat = RSS / (n - p)
        - Point: the fixed parameters
        """
        ...

    def sample(self, n: int, *, key: jax.Array) -> ParameterDraws:
        """
        Draw n i.i.d. parameter draws.

        Parameters
        ----------
        n : int
            Number of draws S.
        key : jax.Array
            PRNG key.

        Returns
        -------
        ParameterDraws
            beta of shape (n, p), sigmasq of shape (n,).
        """
        ...

    def log_prob(self, beta: jnp.ndarray, sigmasq: jnp.ndarray) -> jnp.ndarray:
        """Log posterior density at (beta, sigmasq)."""
        ...

    def diagnostics(self) -> dict:
        """Fit-specific diagnostic information."""
        ...

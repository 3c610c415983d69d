"""
weighting.py
------------

Posterior weighting step: likelihoods over the support -> probabilities.

For one parameter draw, each candidate j gets an independent random prior
weight g_j ~ Gamma(concentration, 1) and

    Pr(w* = r_j | z*, draw) = g_j L_j / sum_k g_k L_k

Normalized Gamma variables are a Dirichlet(concentration, ..., concentration)
vector, so this is one draw of the population frequencies of a Multinomial
position model under a symmetric Dirichlet prior, without building the
Dirichlet vector explicitly.

``concentration=None`` is the infinite-shape limit: the weights are all 1
and the step reduces to plain normalization of the likelihood.

Everything happens in log space (log-Gamma weights, log-sum-exp), so tiny
likelihoods do not underflow. Zero likelihood everywhere is reported as
degenerate instead of silently returning NaN.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp
import jax.random as jr

from invreg.errors import DegenerateLikelihoodError
from invreg.utils.math import normalize_log_weights


def validate_concentration(concentration: float | None) -> None:
    """Raise ValueError unless concentration is None or a positive finite number."""
    if concentration is None:
        return
    if not (math.isfinite(concentration) and concentration > 0):
        raise ValueError(
            f"concentration must be positive and finite (or None), got {concentration}"
        )


def log_prior_weights(
    key: jax.Array, n_candidates: int, concentration: float | None = 1.0
) -> jnp.ndarray:
    """
    Log of the random per-candidate prior weights.

    Parameters
    ----------
    key : jax.Array
        PRNG key of this draw.
    n_candidates : int
        Support size J.
    concentration : float or None, default=1.0
        Gamma shape. None fixes every weight to 1 (log weight 0).

    Returns
    -------
    jnp.ndarray, shape (J,)
    """
    if concentration is None:
        return jnp.zeros((n_candidates,))
    return jr.loggamma(key, concentration, shape=(n_candidates,))


def posterior_weights(
    log_likelihood: jnp.ndarray,
    key: jax.Array,
    concentration: float | None = 1.0,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Weight and normalize one likelihood vector.

    Pure jax; safe under ``jax.vmap``.

    Parameters
    ----------
    log_likelihood : jnp.ndarray, shape (J,)
        Log likelihoods of one parameter draw.
    key : jax.Array
        PRNG key for the Gamma prior weights of this draw.
    concentration : float or None, default=1.0
        Dirichlet prior concentration; None disables the random weights.

    Returns
    -------
    probs : jnp.ndarray, shape (J,)
        Posterior probabilities (NaN when degenerate).
    degenerate : jnp.ndarray (bool scalar)
        True when the likelihood is zero at every candidate.
    """
    log_w = log_likelihood + log_prior_weights(
        key, log_likelihood.shape[0], concentration
    )
    return normalize_log_weights(log_w)


def normalize_posterior(
    log_likelihood: jnp.ndarray,
    key: jax.Array | None = None,
    concentration: float | None = 1.0,
) -> jnp.ndarray:
    """
    Checked version of ``posterior_weights`` for a single draw.

    Parameters
    ----------
    log_likelihood : jnp.ndarray, shape (J,)
    key : jax.Array, optional
        Required unless ``concentration`` is None.
    concentration : float or None, default=1.0

    Returns
    -------
    jnp.ndarray, shape (J,)
        Posterior probabilities summing to 1.

    Raises
    ------
    DegenerateLikelihoodError
        If every candidate has zero likelihood.
    """
    validate_concentration(concentration)
    if key is None:
        if concentration is not None:
            raise ValueError("key is required when concentration is not None")
        key = jr.PRNGKey(0)
    probs, degenerate = posterior_weights(jnp.asarray(log_likelihood), key, concentration)
    if bool(degenerate):
        raise DegenerateLikelihoodError(
            "Observation has zero likelihood at every candidate; "
            "cannot normalize the posterior"
        )
    return probs

"""
math.py
-------

Numerical helpers for invreg.

Includes:
- chebyshev_basis : Chebyshev polynomial basis T_0..T_degree.
- gaussian_logpdf : Gaussian log density that tolerates zero variance.
- normalize_log_weights : log-sum-exp normalization with a degeneracy flag.

All functions use jax.numpy and are safe to call under jax.vmap / jax.jit
(no Python-level branching on array values).

Examples
--------
>>> import jax.numpy as jnp
>>> from invreg.utils import math
>>> x = jnp.linspace(-1, 1, 5)
>>> math.chebyshev_basis(x, degree=3).shape
(5, 4)
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import lax


def chebyshev_basis(x: jnp.ndarray, degree: int) -> jnp.ndarray:
    """
    Evaluate Chebyshev polynomials T_0..T_degree at each point of x.

    Parameters
    ----------
    x : jnp.ndarray
        Points of shape (N,), expected in [-1, 1].
    degree : int
        Maximum polynomial degree (>= 0).

    Returns
    -------
    jnp.ndarray
        Array of shape (N, degree + 1); column j holds T_j(x).

    Raises
    ------
    ValueError
        If `degree` is negative or `x` is not 1-D.

    Notes
    -----
    Three-term recurrence:
        T_0(x) = 1
        T_1(x) = x
        T_{n+1}(x) = 2 x T_n(x) - T_{n-1}(x)
    """
    if degree < 0:
        raise ValueError("degree must be >= 0")
    if x.ndim != 1:
        raise ValueError("x must be 1-D (shape (N,))")

    x = x.astype(jnp.result_type(x, 0.0))
    t0 = jnp.ones_like(x)
    if degree == 0:
        return t0[:, None]
    if degree == 1:
        return jnp.stack([t0, x], axis=1)

    def step(carry, _):
        t_prev, t_curr = carry
        t_next = 2.0 * x * t_curr - t_prev
        return (t_curr, t_next), t_next

    _, higher = lax.scan(step, (t0, x), xs=None, length=degree - 1)
    # higher: (degree - 1, N) holding T_2..T_degree
    return jnp.concatenate([t0[:, None], x[:, None], higher.T], axis=1)


def gaussian_logpdf(x: jnp.ndarray, mean: jnp.ndarray, var: jnp.ndarray) -> jnp.ndarray:
    """
    Elementwise log N(x | mean, var).

    Parameters
    ----------
    x, mean : jnp.ndarray
        Broadcast-compatible arrays.
    var : jnp.ndarray
        Variance (>= 0), broadcast-compatible with x.

    Returns
    -------
    jnp.ndarray
        Log densities. Where ``var == 0`` the density is a point mass:
        +inf if ``x == mean`` and -inf otherwise.
    """
    resid = x - mean
    positive = var > 0
    safe_var = jnp.where(positive, var, 1.0)
    logpdf = -0.5 * (jnp.log(2.0 * jnp.pi * safe_var) + resid**2 / safe_var)
    point_mass = jnp.where(resid == 0, jnp.inf, -jnp.inf)
    return jnp.where(positive, logpdf, point_mass)


def normalize_log_weights(log_w: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Turn unnormalized log weights into a probability vector.

    Parameters
    ----------
    log_w : jnp.ndarray, shape (J,)
        Unnormalized log weights. NaN entries count as zero weight.

    Returns
    -------
    probs : jnp.ndarray, shape (J,)
        Probabilities summing to 1. All NaN when degenerate.
    degenerate : jnp.ndarray (bool scalar)
        True when every weight is zero (every log weight is -inf or NaN).

    Notes
    -----
    Entries at +inf are point masses; they share all probability equally
    and every finite entry gets zero.
    """
    log_w = jnp.where(jnp.isnan(log_w), -jnp.inf, log_w)
    top = jnp.max(log_w)
    degenerate = top == -jnp.inf
    infinite = jnp.isposinf(log_w)
    any_infinite = jnp.any(infinite)

    shift = jnp.where(jnp.isfinite(top), top, 0.0)
    w = jnp.where(any_infinite, infinite.astype(log_w.dtype), jnp.exp(log_w - shift))
    total = jnp.sum(w)
    probs = w / jnp.where(total > 0, total, 1.0)
    return jnp.where(degenerate, jnp.nan, probs), degenerate

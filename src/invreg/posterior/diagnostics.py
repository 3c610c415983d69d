"""
diagnostics.py
--------------

Diagnostics for position posteriors.

- mc_standard_error: Monte-Carlo error of the aggregate posterior, which
  shrinks as O(1 / sqrt(S)).
- effective_sample_size: how many candidates effectively carry the mass of
  a probability vector.
"""

from __future__ import annotations

import jax.numpy as jnp


def mc_standard_error(draw_weights: jnp.ndarray) -> jnp.ndarray:
    """
    Per-candidate standard error of the mean of per-draw weight vectors.

    Parameters
    ----------
    draw_weights : jnp.ndarray, shape (S, J)

    Returns
    -------
    jnp.ndarray, shape (J,)
        ``std(ddof=1) / sqrt(S)``; zeros when S == 1.
    """
    S = draw_weights.shape[0]
    if S < 2:
        return jnp.zeros(draw_weights.shape[1:])
    return jnp.std(draw_weights, axis=0, ddof=1) / jnp.sqrt(S)


def effective_sample_size(probs: jnp.ndarray) -> float:
    """
    Kish effective number of candidates, ``1 / sum(p²)``.

    Equals J for a uniform posterior and 1 for a point mass.
    """
    probs = jnp.asarray(probs)
    return float(1.0 / jnp.sum(probs**2))

"""
candidates.py
-------------

Utilities for building candidate supports.

Definition
----------
A candidate support is the finite, ordered set of positions r_1..r_J that
the inversion engine assigns posterior probability to. In the sequence
case the support holds candidate *start* positions; the remaining positions
of each candidate sequence follow from the known offsets.

Separation of concerns
----------------------
- Support construction (this module) defines *which* positions are possible.
- The likelihood and weighting steps define *how probable* each one is.

Duplicated candidates are allowed but split probability mass between the
copies, so they are reported with a warning.
"""

from __future__ import annotations

from collections.abc import Sequence

import jax.numpy as jnp
import numpy as np

from invreg.utils.logging import configure_logging

logger = configure_logging(__name__)


def grid_support(
    low: float, high: float, n: int, *, endpoint: bool = True
) -> jnp.ndarray:
    """
    Evenly spaced candidate positions.

    Parameters
    ----------
    low, high : float
        Range of the grid.
    n : int
        Number of candidates (>= 1).
    endpoint : bool, default=True
        Include ``high``. Use False on a periodic domain where ``high`` and
        ``low`` are the same point of the cycle.

    Returns
    -------
    jnp.ndarray, shape (n,)
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if not high > low:
        raise ValueError(f"high must exceed low, got low={low}, high={high}")
    return jnp.linspace(low, high, n, endpoint=endpoint)


def custom_support(values: Sequence[float] | np.ndarray | jnp.ndarray) -> jnp.ndarray:
    """
    Validate a user-supplied candidate support.

    Parameters
    ----------
    values : array-like, shape (J,)
        Candidate positions in the order the posterior should report them.

    Returns
    -------
    jnp.ndarray, shape (J,)

    Raises
    ------
    ValueError
        If the support is empty, not 1-D, or contains non-finite values.
    """
    support = np.asarray(values, dtype=float)
    if support.ndim != 1:
        raise ValueError(f"Expected a 1-D support, got shape {support.shape}")
    if support.size == 0:
        raise ValueError("Candidate support must be non-empty")
    if not np.all(np.isfinite(support)):
        bad = int(np.flatnonzero(~np.isfinite(support))[0])
        raise ValueError(f"Candidate {bad} is not finite: {support[bad]}")

    n_unique = np.unique(support).size
    if n_unique < support.size:
        logger.warning(
            "Candidate support has %d duplicated positions; "
            "their probability mass will be split between copies",
            support.size - n_unique,
        )
    return jnp.asarray(support)

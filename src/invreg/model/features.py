"""
features.py
-----------

Feature maps for the forward regression z = features(w) · beta + noise.

A feature map is any pure function ``features(position) -> (p,)`` array.
FeatureMap wraps such a function with the metadata the inversion engine
needs to reason about candidate positions:

- domain : (low, high) interval on which the map is meant to be evaluated,
  or None when every real position is valid.
- period : cycle length for periodic maps (e.g. 365 for day-of-year),
  or None for non-periodic maps. Only periodic maps can wrap positions.

Builders
--------
- fourier_features : [1, sin, cos, ...] harmonics of a cycle (periodic).
- chebyshev_features : Chebyshev polynomials on an interval (not periodic).

Plain callables are accepted wherever a FeatureMap is expected; see
``as_feature_map``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from invreg.utils.math import chebyshev_basis

# relative slack on domain bounds so that cumulated float offsets landing
# exactly on a bound are not rejected
_DOMAIN_RTOL = 1e-6


@dataclass(frozen=True)
class FeatureMap:
    """
    A pure basis expansion with an optional domain and period.

    Parameters
    ----------
    fn : callable
        Maps one position (scalar or (d,) vector) to a (p,) feature vector.
        Must be traceable by JAX (it is evaluated under ``jax.vmap``).
    domain : tuple of float, optional
        Valid (low, high) interval for scalar positions.
    period : float, optional
        Cycle length. Requires ``domain``; wrapping maps into
        ``[low, low + period)``.
    name : str, default="custom"
        Label used in reprs and logs.
    """

    fn: Callable[[Any], jnp.ndarray]
    domain: tuple[float, float] | None = None
    period: float | None = None
    name: str = "custom"

    def __post_init__(self):
        if not callable(self.fn):
            raise TypeError("fn must be callable")
        if self.domain is not None:
            low, high = self.domain
            if not high > low:
                raise ValueError(f"domain must satisfy low < high, got {self.domain}")
        if self.period is not None:
            if self.period <= 0:
                raise ValueError(f"period must be positive, got {self.period}")
            if self.domain is None:
                raise ValueError("a periodic feature map needs a domain")

    def __call__(self, position) -> jnp.ndarray:
        return jnp.asarray(self.fn(position))

    def design(self, positions) -> jnp.ndarray:
        """
        Evaluate the map on a batch of positions.

        Parameters
        ----------
        positions : array-like, shape (n,) or (n, d)

        Returns
        -------
        jnp.ndarray, shape (n, p)
            Design matrix, one row per position.
        """
        return jax.vmap(self.__call__)(jnp.asarray(positions))

    @property
    def is_periodic(self) -> bool:
        return self.period is not None

    def out_of_domain(self, positions) -> np.ndarray:
        """
        Flag positions outside the domain.

        Parameters
        ----------
        positions : array-like
            Any shape.

        Returns
        -------
        np.ndarray of bool, same shape as positions
            All False when the map has no domain.
        """
        positions = np.asarray(positions, dtype=float)
        if self.domain is None:
            return np.zeros(positions.shape, dtype=bool)
        low, high = self.domain
        slack = _DOMAIN_RTOL * (high - low)
        return (positions < low - slack) | (positions > high + slack)

    def wrap(self, positions) -> jnp.ndarray:
        """
        Reduce positions modulo the period into ``[low, low + period)``.

        Raises
        ------
        ValueError
            If the map is not periodic.
        """
        if self.period is None:
            raise ValueError(f"feature map {self.name!r} is not periodic; cannot wrap")
        low = self.domain[0]
        return low + jnp.mod(jnp.asarray(positions) - low, self.period)


def as_feature_map(features: FeatureMap | Callable[[Any], jnp.ndarray]) -> FeatureMap:
    """Wrap a plain callable as a FeatureMap with no domain and no period."""
    if isinstance(features, FeatureMap):
        return features
    if not callable(features):
        raise TypeError(f"Expected a FeatureMap or callable, got {type(features)!r}")
    return FeatureMap(fn=features, name=getattr(features, "__name__", "custom"))


def fourier_features(n_harmonics: int = 1, period: float = 1.0) -> FeatureMap:
    """
    Intercept plus sine/cosine harmonics of a cycle.

    features(w) = [1, sin(2πw/P), cos(2πw/P), ..., sin(2πKw/P), cos(2πKw/P)]

    Parameters
    ----------
    n_harmonics : int, default=1
        Number of harmonics K (>= 1). Output length p = 2K + 1.
    period : float, default=1.0
        Cycle length P. The domain is [0, P].

    Examples
    --------
    >>> fmap = fourier_features()
    >>> fmap(0.25).shape  # [1, sin(π/2), cos(π/2)]
    (3,)
    """
    if n_harmonics < 1:
        raise ValueError(f"n_harmonics must be >= 1, got {n_harmonics}")
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")

    k = jnp.arange(1, n_harmonics + 1)

    def fn(w):
        angle = 2.0 * jnp.pi * k * w / period
        harmonics = jnp.stack([jnp.sin(angle), jnp.cos(angle)], axis=1).ravel()
        return jnp.concatenate([jnp.ones((1,), dtype=harmonics.dtype), harmonics])

    return FeatureMap(
        fn=fn,
        domain=(0.0, float(period)),
        period=float(period),
        name=f"fourier(K={n_harmonics}, P={period})",
    )


def chebyshev_features(
    degree: int, domain: tuple[float, float] = (-1.0, 1.0)
) -> FeatureMap:
    """
    Chebyshev polynomials T_0..T_degree on an interval.

    Positions are mapped affinely from ``domain`` onto [-1, 1] before
    evaluation. Output length p = degree + 1. Not periodic: candidates
    outside the domain cannot be wrapped.
    """
    if degree < 0:
        raise ValueError("degree must be >= 0")
    low, high = float(domain[0]), float(domain[1])
    if not high > low:
        raise ValueError(f"domain must satisfy low < high, got {domain}")

    def fn(w):
        u = 2.0 * (jnp.asarray(w) - low) / (high - low) - 1.0
        return chebyshev_basis(jnp.atleast_1d(u), degree)[0]

    return FeatureMap(fn=fn, domain=(low, high), name=f"chebyshev(degree={degree})")

"""
dataset.py
----------

Core data containers for invreg.

defines:
- TrainingSet: (position, outcome) pairs the forward regression is fitted on
- SequenceObservation: outcomes observed at known offsets from an unknown start

Notes
-----
- Data is stored as read-only NumPy arrays; containers never change after
  construction, so one TrainingSet can be shared by any number of runs.
- Convert to jax.numpy (jnp) only when passing into the inference engines
  (``to_jax``).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import jax.numpy as jnp
import numpy as np


def _frozen(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


class TrainingSet:
    """
    Ordered, immutable collection of (position, outcome) pairs.

    Attributes
    ----------
    positions : np.ndarray, shape (n,) or (n, d)
        Position values w_i (scalar or vector-valued).
    outcomes : np.ndarray, shape (n,)
        Outcome values z_i.
    """

    __slots__ = ("_positions", "_outcomes")

    def __init__(self, positions: Any, outcomes: Any) -> None:
        positions = _frozen(positions)
        outcomes = _frozen(outcomes)
        if outcomes.ndim != 1:
            raise ValueError(f"outcomes must be 1-D, got shape {outcomes.shape}")
        if positions.ndim not in (1, 2):
            raise ValueError(
                f"positions must have shape (n,) or (n, d), got {positions.shape}"
            )
        if positions.shape[0] != outcomes.shape[0]:
            raise ValueError(
                f"positions and outcomes must have the same length, "
                f"got {positions.shape[0]} and {outcomes.shape[0]}"
            )
        if outcomes.shape[0] == 0:
            raise ValueError("TrainingSet must contain at least one pair")
        self._positions = positions
        self._outcomes = outcomes

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def outcomes(self) -> np.ndarray:
        return self._outcomes

    @classmethod
    def from_arrays(cls, positions: Any, outcomes: Any) -> TrainingSet:
        """
        Construct a TrainingSet from parallel arrays.

        Examples
        --------
        >>> w = jnp.linspace(0, 1, 5)
        >>> data = TrainingSet.from_arrays(w, jnp.sin(2 * jnp.pi * w))
        >>> len(data)
        5
        """
        return cls(np.asarray(positions), np.asarray(outcomes))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Any, float]]) -> TrainingSet:
        """Construct a TrainingSet from an iterable of (position, outcome)."""
        pairs = list(pairs)
        if not pairs:
            raise ValueError("TrainingSet must contain at least one pair")
        positions, outcomes = zip(*pairs)
        return cls(positions, outcomes)

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray]:
        """Return (positions, outcomes) as read-only numpy arrays."""
        return self._positions, self._outcomes

    def to_jax(self) -> tuple[jnp.ndarray, jnp.ndarray]:
        """Return (positions, outcomes) as jax arrays."""
        return jnp.asarray(self._positions), jnp.asarray(self._outcomes)

    @property
    def pairs(self) -> list[tuple[Any, float]]:
        """Return the list of (position, outcome) tuples."""
        return list(zip(self._positions.tolist(), self._outcomes.tolist()))

    def __len__(self) -> int:
        """Return number of pairs."""
        return self._outcomes.shape[0]

    def __repr__(self) -> str:
        return f"TrainingSet(n={len(self)})"


class SequenceObservation:
    """
    A chain of outcomes observed at known offsets from an unknown start.

    Position k of a chain starting at ``start`` is
    ``start + cumsum(offsets)[k]``; ``offsets[0]`` is therefore the offset of
    the first outcome from the start and is usually 0.

    Parameters
    ----------
    outcomes : array-like, shape (L,)
        Observed outcome sequence.
    offsets : array-like, shape (L,)
        Known non-negative gaps between successive positions.

    Examples
    --------
    >>> obs = SequenceObservation([0.1, 0.5, 0.8, 0.9], [0.0, 0.1, 0.1, 0.05])
    >>> obs.relative_positions
    array([0.  , 0.1 , 0.2 , 0.25])
    """

    __slots__ = ("_outcomes", "_offsets")

    def __init__(self, outcomes: Sequence[float] | Any, offsets: Sequence[float] | Any):
        outcomes = _frozen(outcomes)
        offsets = _frozen(offsets)
        if outcomes.ndim != 1 or offsets.ndim != 1:
            raise ValueError("outcomes and offsets must be 1-D")
        if outcomes.shape != offsets.shape:
            raise ValueError(
                f"outcomes and offsets must have the same length, "
                f"got {outcomes.shape[0]} and {offsets.shape[0]}"
            )
        if outcomes.size == 0:
            raise ValueError("SequenceObservation must contain at least one outcome")
        if np.any(offsets < 0):
            raise ValueError("offsets must be non-negative")
        self._outcomes = outcomes
        self._offsets = offsets

    @property
    def outcomes(self) -> np.ndarray:
        return self._outcomes

    @property
    def offsets(self) -> np.ndarray:
        return self._offsets

    @property
    def relative_positions(self) -> np.ndarray:
        """Positions of the chain relative to its start, ``cumsum(offsets)``."""
        return np.cumsum(self._offsets)

    def __len__(self) -> int:
        return self._outcomes.shape[0]

    def __repr__(self) -> str:
        return f"SequenceObservation(length={len(self)})"

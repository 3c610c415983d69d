"""
position_posterior.py
---------------------

Result of an inversion: a posterior over the candidate support.

This module provides:
- hpd_mask: highest-posterior-density set of a probability vector
- PositionPosterior: aggregate posterior, HPD flags and run metadata

HPD set
-------
Sort candidates by descending probability (ties broken by original index,
so the set is reproducible), accumulate mass in that order and keep every
candidate up to and including the first one whose cumulative mass reaches
the credibility level. The set is minimal: dropping its least probable
member leaves less than the credibility level.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def validate_credibility(credibility: float) -> None:
    """Raise ValueError unless 0 < credibility <= 1."""
    if not 0.0 < credibility <= 1.0:
        raise ValueError(f"credibility must be in (0, 1], got {credibility}")


def hpd_mask(probs, credibility: float = 0.95) -> np.ndarray:
    """
    Boolean membership flags of the HPD set.

    Parameters
    ----------
    probs : array-like, shape (J,)
        Probability vector over the support.
    credibility : float, default=0.95
        Target cumulative mass in (0, 1].

    Returns
    -------
    np.ndarray of bool, shape (J,)
        True for candidates in the HPD set, aligned with ``probs``.

    Examples
    --------
    >>> hpd_mask([0.1, 0.6, 0.3], credibility=0.8)
    array([False,  True,  True])
    """
    validate_credibility(credibility)
    probs = np.asarray(probs, dtype=float)
    if probs.ndim != 1 or probs.size == 0:
        raise ValueError(f"probs must be a non-empty 1-D array, got shape {probs.shape}")

    order = np.argsort(-probs, kind="stable")
    cumulative = np.cumsum(probs[order])
    # float round-off can leave the total just below 1; fall back to all
    last = min(int(np.searchsorted(cumulative, credibility, side="left")), probs.size - 1)
    mask = np.zeros(probs.shape, dtype=bool)
    mask[order[: last + 1]] = True
    return mask


@dataclass(frozen=True)
class PositionPosterior:
    """
    Posterior distribution over a candidate support.

    Attributes
    ----------
    support : np.ndarray, shape (J,) or (J, d)
        Candidate (start) positions, in the caller's order.
    probs : np.ndarray, shape (J,)
        Posterior probabilities aligned with ``support``; sum to 1.
    credibility : float
        Credibility level of the HPD set.
    hpd : np.ndarray of bool, shape (J,)
        HPD membership flags.
    n_draws : int
        Number of draws averaged (1 for the large-sample approximation).
    mc_stderr : np.ndarray, shape (J,)
        Monte-Carlo standard error of each probability (zeros when
        ``n_draws == 1``).
    skipped_draws : tuple of int
        Indices of degenerate draws dropped under ``on_degenerate="skip"``.
    draw_weights : np.ndarray, shape (n_draws, J), optional
        Per-draw posterior weight vectors, kept on request.
    method : str
        "monte_carlo" or "large_sample".
    """

    support: np.ndarray
    probs: np.ndarray
    credibility: float
    hpd: np.ndarray
    n_draws: int
    mc_stderr: np.ndarray
    skipped_draws: tuple[int, ...] = ()
    draw_weights: np.ndarray | None = field(default=None, repr=False)
    method: str = "monte_carlo"

    @classmethod
    def from_probs(
        cls,
        support,
        probs,
        *,
        credibility: float = 0.95,
        n_draws: int = 1,
        mc_stderr=None,
        skipped_draws=(),
        draw_weights=None,
        method: str = "monte_carlo",
    ) -> PositionPosterior:
        """Build a result, computing the HPD flags from ``probs``."""
        probs = np.asarray(probs, dtype=float)
        if mc_stderr is None:
            mc_stderr = np.zeros_like(probs)
        return cls(
            support=np.asarray(support),
            probs=probs,
            credibility=float(credibility),
            hpd=hpd_mask(probs, credibility),
            n_draws=int(n_draws),
            mc_stderr=np.asarray(mc_stderr, dtype=float),
            skipped_draws=tuple(int(s) for s in skipped_draws),
            draw_weights=None if draw_weights is None else np.asarray(draw_weights),
            method=method,
        )

    @property
    def mode_index(self) -> int:
        """Index of the most probable candidate (lowest index on ties)."""
        return int(np.argmax(self.probs))

    @property
    def mode(self):
        """Most probable candidate position."""
        return self.support[self.mode_index]

    @property
    def hpd_support(self) -> np.ndarray:
        """Candidate positions in the HPD set, in support order."""
        return self.support[self.hpd]

    @property
    def hpd_mass(self) -> float:
        """Total posterior probability of the HPD set."""
        return float(self.probs[self.hpd].sum())

    def mean(self):
        """
        Probability-weighted mean position.

        Notes
        -----
        Not meaningful on a periodic domain when mass straddles the wrap
        point; prefer ``mode`` or the HPD set there.
        """
        return np.tensordot(self.probs, self.support, axes=1)

    def to_dict(self) -> dict:
        """Plain-python summary, for logging or serialization by the caller."""
        return {
            "method": self.method,
            "support": self.support.tolist(),
            "probs": self.probs.tolist(),
            "hpd": self.hpd.tolist(),
            "credibility": self.credibility,
            "hpd_mass": self.hpd_mass,
            "mode": np.asarray(self.mode).tolist(),
            "n_draws": self.n_draws,
            "skipped_draws": list(self.skipped_draws),
            "mc_stderr": self.mc_stderr.tolist(),
        }

    def __len__(self) -> int:
        return self.probs.shape[0]

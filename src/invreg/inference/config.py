"""
config.py
---------

Configuration of an inversion run.

InversionConfig gathers every knob of the Monte-Carlo aggregator in one
explicit, validated value, so runs never share hidden state.

Examples
--------
>>> # Defaults: 1000 draws, 95% HPD, Dirichlet(1) prior weights
>>> config = InversionConfig()

>>> # No-randomness configuration (matches the large-sample approximation
>>> # when paired with a PointPosterior)
>>> config = InversionConfig(n_draws=10, concentration=None)

>>> # Drop draws with all-zero likelihood instead of failing
>>> config = InversionConfig(on_degenerate="skip", seed=7)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from invreg.posterior.position_posterior import validate_credibility
from invreg.posterior.weighting import validate_concentration


@dataclass(frozen=True)
class InversionConfig:
    """
    Configuration for MonteCarloInversion.

    Attributes
    ----------
    n_draws : int, default=1000
        Number of parameter draws S.
    credibility : float, default=0.95
        Target mass of the HPD set, in (0, 1].
    concentration : float or None, default=1.0
        Shape of the Gamma prior weights (symmetric Dirichlet concentration).
        None fixes all weights to 1.
    on_degenerate : {"raise", "skip"}, default="raise"
        Policy for draws whose likelihood is zero at every candidate:
        - "raise": abort the run with DegenerateLikelihoodError
        - "skip": drop those draws and average the remaining ones
    seed : int, default=0
        Seed of the run; see invreg.utils.rng for the per-draw keys.
    keep_draws : bool, default=False
        Keep the (S, J) per-draw weight vectors on the result.
    """

    n_draws: int = 1000
    credibility: float = 0.95
    concentration: float | None = 1.0
    on_degenerate: Literal["raise", "skip"] = "raise"
    seed: int = 0
    keep_draws: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.n_draws < 1:
            raise ValueError(f"n_draws must be positive, got {self.n_draws}")
        validate_credibility(self.credibility)
        validate_concentration(self.concentration)
        if self.on_degenerate not in ("raise", "skip"):
            raise ValueError(
                f"on_degenerate must be 'raise' or 'skip', got {self.on_degenerate!r}"
            )

"""
base.py
-------

Abstract base class for inversion engines.

All inversion engines must implement ``invert(posterior, likelihood,
observation, support)`` returning a PositionPosterior.

MonteCarloInversion and LargeSampleApproximation subclass from this base.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from invreg.model.likelihood import GaussianLikelihood
    from invreg.posterior import ParameterPosterior, PositionPosterior


class InversionEngine(ABC):
    """
    Abstract interface for inversion engines.

    Methods
    -------
    invert(posterior, likelihood, observation, support) -> PositionPosterior
        Posterior over the support given an observed outcome.
    """

    @abstractmethod
    def invert(
        self,
        posterior: ParameterPosterior,
        likelihood: GaussianLikelihood,
        observation: Any,
        support: Any,
        *,
        offsets: Any = None,
    ) -> PositionPosterior:
        """
        Invert the forward regression at an observed outcome.

        Parameters
        ----------
        posterior : ParameterPosterior
            Posterior over the regression parameters.
        likelihood : GaussianLikelihood
            Likelihood evaluator (feature map + out-of-domain policy).
        observation : float, SequenceObservation or array-like
            Observed outcome(s).
        support : array-like, shape (J,)
            Candidate (start) positions.
        offsets : array-like, optional
            Offsets when ``observation`` is a bare array.

        Returns
        -------
        PositionPosterior
        """
        ...

"""
large_sample.py
---------------

Large-sample (plug-in) approximation of the position posterior.

Fixes the parameters at their point estimate and every candidate's prior
weight at the same constant, then normalizes a single likelihood vector:

    Pr(w* = r_j | z*) ≈ L(z* | r_j, beta_hat, sigmasq_hat) / sum_k L(z* | r_k, ...)

Fast and deterministic, but it ignores parameter uncertainty and
prior-weight uncertainty. Whenever either is non-negligible (small training
sets, few observations per candidate) the result is systematically
overconfident: narrower than the Monte-Carlo posterior. That is a property
of the approximation, not a bug; it becomes exact only in the limit where
both uncertainties vanish.

Consistency check
-----------------
MonteCarloInversion with a PointPosterior and ``concentration=None`` has no
randomness left and reproduces this approximation exactly.
"""

from __future__ import annotations

from typing import Any

from invreg.data.dataset import TrainingSet
from invreg.errors import DegenerateLikelihoodError
from invreg.inference.base import InversionEngine
from invreg.inference.conjugate import ConjugateSampler
from invreg.model.likelihood import (
    GaussianLikelihood,
    OutOfDomainPolicy,
    log_likelihood_from_design,
)
from invreg.posterior.parameter_posterior import ParameterPosterior
from invreg.posterior.position_posterior import PositionPosterior, validate_credibility
from invreg.utils.math import normalize_log_weights


class LargeSampleApproximation(InversionEngine):
    """
    Plug-in position posterior at the parameter point estimate.

    Parameters
    ----------
    credibility : float, default=0.95
        Target mass of the HPD set.
    """

    def __init__(self, credibility: float = 0.95):
        validate_credibility(credibility)
        self.credibility = credibility

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
        Normalized likelihood at ``posterior.params``.

        Raises
        ------
        DegenerateLikelihoodError
            If the likelihood is zero at every candidate.
        """
        design, outcomes = likelihood.prepare(observation, support, offsets)
        beta, sigmasq = posterior.params
        loglik = log_likelihood_from_design(design, outcomes, beta, sigmasq)
        probs, degenerate = normalize_log_weights(loglik)
        if bool(degenerate):
            raise DegenerateLikelihoodError(
                f"Observation has zero likelihood at all {design.shape[0]} "
                f"candidates under the point estimate"
            )
        return PositionPosterior.from_probs(
            support,
            probs,
            credibility=self.credibility,
            n_draws=1,
            method="large_sample",
        )


def approximate_position(
    training_set: TrainingSet,
    feature_map: Any,
    observation: Any,
    support: Any,
    *,
    offsets: Any = None,
    credibility: float = 0.95,
    out_of_domain: OutOfDomainPolicy = "reject",
) -> PositionPosterior:
    """Fit the forward regression and apply the large-sample approximation."""
    posterior = ConjugateSampler().fit(training_set, feature_map)
    likelihood = GaussianLikelihood(feature_map, out_of_domain=out_of_domain)
    return LargeSampleApproximation(credibility).invert(
        posterior, likelihood, observation, support, offsets=offsets
    )

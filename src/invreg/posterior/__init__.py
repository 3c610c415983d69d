"""
posterior
=========

Posterior representations and diagnostics.

This subpackage provides:
- ParameterPosterior: protocol for p(beta, sigmasq | training set)
- NormalInverseGammaPosterior / PointPosterior: its implementations
- posterior_weights: the randomized prior-weighting step for one draw
- PositionPosterior / hpd_mask: the posterior over candidate positions
- diagnostics: Monte-Carlo standard error, effective sample size

Two-tier design
---------------
- ParameterPosterior: uncertainty about the forward regression
- PositionPosterior: uncertainty about the position behind an observation,
  after marginalizing over the parameter posterior
"""

from .diagnostics import effective_sample_size, mc_standard_error
from .parameter_posterior import ParameterDraws, ParameterPosterior, Parameters
from .position_posterior import PositionPosterior, hpd_mask
from .posterior import NormalInverseGammaPosterior, PointPosterior
from .weighting import log_prior_weights, normalize_posterior, posterior_weights

__all__ = [
    # Parameter posteriors
    "ParameterPosterior",
    "Parameters",
    "ParameterDraws",
    "NormalInverseGammaPosterior",
    "PointPosterior",
    # Weighting step
    "posterior_weights",
    "normalize_posterior",
    "log_prior_weights",
    # Position posterior
    "PositionPosterior",
    "hpd_mask",
    # Diagnostics
    "mc_standard_error",
    "effective_sample_size",
]

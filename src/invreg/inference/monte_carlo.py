"""
monte_carlo.py
--------------

Monte-Carlo aggregation over parameter uncertainty.

For S parameter draws (beta_s, sigmasq_s) from the parameter posterior:

    p_s = weighting step( likelihood(z* | r_j, beta_s, sigmasq_s) )     (map)
    Pr(w* = r_j | z*) ≈ (1 / S) sum_s p_s[j]                            (reduce)

The map runs as a single ``jax.vmap`` over the draws; draws share nothing
but the read-only design tensor and outcomes. The reduction is a plain mean
whose standard error shrinks as O(1 / sqrt(S)).

Reproducibility
---------------
Draws are seeded from ``InversionConfig.seed`` as documented in
invreg.utils.rng: one key for the parameter sampler and one independent
key per draw for the Gamma prior weights.

Degenerate draws
----------------
A draw under which every candidate has zero likelihood cannot be
normalized. ``on_degenerate="raise"`` aborts the run and reports the draw
indices; ``"skip"`` drops those draws and averages the rest.
"""

from __future__ import annotations

from functools import partial
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np

from invreg.data.dataset import TrainingSet
from invreg.errors import DegenerateLikelihoodError
from invreg.inference.base import InversionEngine
from invreg.inference.config import InversionConfig
from invreg.inference.conjugate import ConjugateSampler
from invreg.model.likelihood import (
    GaussianLikelihood,
    OutOfDomainPolicy,
    log_likelihood_from_design,
)
from invreg.posterior.diagnostics import mc_standard_error
from invreg.posterior.parameter_posterior import ParameterPosterior
from invreg.posterior.position_posterior import PositionPosterior
from invreg.posterior.weighting import posterior_weights
from invreg.utils.logging import configure_logging
from invreg.utils.rng import draw_keys

logger = configure_logging(__name__)


@partial(jax.jit, static_argnames=("concentration",))
def simulate_draws(
    design: jnp.ndarray,
    outcomes: jnp.ndarray,
    beta: jnp.ndarray,
    sigmasq: jnp.ndarray,
    weight_keys: jnp.ndarray,
    concentration: float | None = 1.0,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Posterior weight vector of every parameter draw.

    Parameters
    ----------
    design : jnp.ndarray, shape (J, L, p)
    outcomes : jnp.ndarray, shape (L,)
    beta : jnp.ndarray, shape (S, p)
    sigmasq : jnp.ndarray, shape (S,)
    weight_keys : jnp.ndarray, shape (S, 2)
        One PRNG key per draw.
    concentration : float or None
        Gamma prior shape (None: no random weights).

    Returns
    -------
    weights : jnp.ndarray, shape (S, J)
        Per-draw probability vectors (NaN rows for degenerate draws).
    degenerate : jnp.ndarray of bool, shape (S,)
    """

    def one_draw(b, s2, key):
        loglik = log_likelihood_from_design(design, outcomes, b, s2)
        return posterior_weights(loglik, key, concentration)

    return jax.vmap(one_draw)(beta, sigmasq, weight_keys)


class MonteCarloInversion(InversionEngine):
    """
    Parameter-marginalized position posterior by Monte-Carlo averaging.

    Parameters
    ----------
    config : InversionConfig, optional
        Run configuration. Defaults to ``InversionConfig()``.

    Examples
    --------
    >>> posterior = ConjugateSampler().fit(training_set, fourier_features())
    >>> likelihood = GaussianLikelihood(fourier_features())
    >>> engine = MonteCarloInversion(InversionConfig(n_draws=500, seed=1))
    >>> result = engine.invert(posterior, likelihood, 0.5, grid_support(0, 1, 100))
    >>> bool(abs(result.probs.sum() - 1.0) < 1e-5)
    True
    """

    def __init__(self, config: InversionConfig | None = None):
        self.config = config or InversionConfig()

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
        Monte-Carlo position posterior.

        Returns
        -------
        PositionPosterior
            Aggregate posterior, HPD flags and per-candidate MC standard error.

        Raises
        ------
        DegenerateLikelihoodError
            If a draw has zero likelihood at every candidate and the policy
            is "raise", or if every draw does.
        InvalidSupportError
            If a candidate leaves the feature map's domain under the
            "reject" policy.
        """
        cfg = self.config
        design, outcomes = likelihood.prepare(observation, support, offsets)
        n_candidates = design.shape[0]
        logger.debug(
            "Monte-Carlo inversion: S=%d draws, J=%d candidates, L=%d outcomes",
            cfg.n_draws,
            n_candidates,
            outcomes.shape[0],
        )

        key_params, weight_keys = draw_keys(cfg.seed, cfg.n_draws)
        draws = posterior.sample(cfg.n_draws, key=key_params)
        weights, degenerate = simulate_draws(
            design,
            outcomes,
            draws.beta,
            draws.sigmasq,
            weight_keys,
            concentration=cfg.concentration,
        )

        degenerate = np.asarray(degenerate)
        skipped = np.flatnonzero(degenerate)
        if skipped.size:
            if cfg.on_degenerate == "raise" or skipped.size == cfg.n_draws:
                raise DegenerateLikelihoodError(
                    f"{skipped.size} of {cfg.n_draws} draws give zero likelihood "
                    f"at all {n_candidates} candidates "
                    f"(first draws: {skipped[:10].tolist()})",
                    draws=skipped,
                )
            logger.warning(
                "Skipping %d of %d degenerate draws (first draws: %s)",
                skipped.size,
                cfg.n_draws,
                skipped[:10].tolist(),
            )
            weights = weights[jnp.asarray(~degenerate)]

        probs = jnp.mean(weights, axis=0)
        return PositionPosterior.from_probs(
            support,
            probs,
            credibility=cfg.credibility,
            n_draws=weights.shape[0],
            mc_stderr=mc_standard_error(weights),
            skipped_draws=skipped,
            draw_weights=weights if cfg.keep_draws else None,
            method="monte_carlo",
        )


def invert_position(
    training_set: TrainingSet,
    feature_map: Any,
    observation: Any,
    support: Any,
    *,
    offsets: Any = None,
    config: InversionConfig | None = None,
    out_of_domain: OutOfDomainPolicy = "reject",
) -> PositionPosterior:
    """
    Fit the forward regression and invert it in one call.

    Parameters
    ----------
    training_set : TrainingSet
        (position, outcome) pairs of the forward regression.
    feature_map : FeatureMap or callable
        Basis expansion.
    observation : float, SequenceObservation or array-like
        Observed outcome(s).
    support : array-like, shape (J,)
        Candidate (start) positions.
    offsets : array-like, optional
        Offsets when ``observation`` is a bare array.
    config : InversionConfig, optional
        Monte-Carlo configuration.
    out_of_domain : {"reject", "wrap"}, default="reject"
        Policy for candidate positions outside the feature map's domain.

    Returns
    -------
    PositionPosterior
    """
    posterior = ConjugateSampler().fit(training_set, feature_map)
    likelihood = GaussianLikelihood(feature_map, out_of_domain=out_of_domain)
    return MonteCarloInversion(config).invert(
        posterior, likelihood, observation, support, offsets=offsets
    )

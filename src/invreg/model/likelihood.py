"""
likelihood.py
-------------

Likelihood of an observed outcome at each candidate position.

GaussianLikelihood evaluates, for one parameter draw (beta, sigmasq),

- scalar outcome z*:
      log N(z* | features(r_j) · beta, sigmasq)           for every candidate r_j

- sequence of outcomes z*_1..z*_L with known offsets:
      log N(z* | mu_j, sigmasq · I),   mu_j[k] = features(r_j + c_k) · beta
  where c = cumsum(offsets). The covariance is diagonal, so this is the sum of
  L independent Gaussian log densities; the candidates differ only through
  the shared unknown start r_j.

Evaluation is split in two so that Monte-Carlo runs pay for the feature map
once:
- ``prepare`` expands the support into positions, applies the
  out-of-domain policy and evaluates the design tensor (J, L, p).
- ``log_likelihood_from_design`` is a pure jax function of
  (design, outcomes, beta, sigmasq), safe to vmap over parameter draws.

Out-of-domain policy
--------------------
Adding offsets to a start may carry a sequence past the end of the feature
map's domain (e.g. past the end of a year).
- "reject" (default): raise InvalidSupportError naming the candidate.
- "wrap": reduce positions modulo the feature map's period.

Independently of the domain, a candidate position where the feature map is
not finite (e.g. sqrt left of zero) raises InvalidSupportError.
"""

from __future__ import annotations

from typing import Any, Literal

import jax.numpy as jnp
import numpy as np

from invreg.data.dataset import SequenceObservation
from invreg.errors import InvalidSupportError
from invreg.model.features import FeatureMap, as_feature_map
from invreg.utils.logging import configure_logging
from invreg.utils.math import gaussian_logpdf

logger = configure_logging(__name__)

OutOfDomainPolicy = Literal["reject", "wrap"]


def log_likelihood_from_design(
    design: jnp.ndarray,
    outcomes: jnp.ndarray,
    beta: jnp.ndarray,
    sigmasq: jnp.ndarray,
) -> jnp.ndarray:
    """
    Log likelihood of the observed outcomes at every candidate.

    Parameters
    ----------
    design : jnp.ndarray, shape (J, L, p)
        Feature vectors of every position of every candidate.
    outcomes : jnp.ndarray, shape (L,)
        Observed outcome(s).
    beta : jnp.ndarray, shape (p,)
        Regression coefficients of one parameter draw.
    sigmasq : jnp.ndarray, scalar
        Noise variance of the same draw.

    Returns
    -------
    jnp.ndarray, shape (J,)
        Log likelihoods. -inf means zero likelihood.
    """
    means = design @ beta
    loglik = jnp.sum(gaussian_logpdf(outcomes[None, :], means, sigmasq), axis=1)
    # zero variance: +inf and -inf inside one sequence is a mismatch
    return jnp.where(jnp.isnan(loglik) & (sigmasq == 0), -jnp.inf, loglik)


class GaussianLikelihood:
    """
    Gaussian likelihood evaluator for scalar and sequence outcomes.

    Parameters
    ----------
    feature_map : FeatureMap or callable
        Basis expansion of the forward regression.
    out_of_domain : {"reject", "wrap"}, default="reject"
        What to do with candidate positions outside the feature map's domain.
    """

    def __init__(
        self,
        feature_map: FeatureMap | Any,
        *,
        out_of_domain: OutOfDomainPolicy = "reject",
    ):
        self.feature_map = as_feature_map(feature_map)
        if out_of_domain not in ("reject", "wrap"):
            raise ValueError(
                f"out_of_domain must be 'reject' or 'wrap', got {out_of_domain!r}"
            )
        if out_of_domain == "wrap" and not self.feature_map.is_periodic:
            raise ValueError(
                f"out_of_domain='wrap' needs a periodic feature map, "
                f"{self.feature_map.name!r} has no period"
            )
        self.out_of_domain = out_of_domain

    # ------------------------------------------------------------------
    # Support handling
    # ------------------------------------------------------------------
    @staticmethod
    def unpack(observation, offsets=None) -> tuple[np.ndarray, np.ndarray | None]:
        """
        Normalize an observation to (outcomes, offsets).

        Accepts a scalar, a SequenceObservation, or a 1-D array of outcomes
        together with ``offsets``. Scalars give offsets None.

        Raises
        ------
        ValueError
            If an outcome is not finite.
        """
        if isinstance(observation, SequenceObservation):
            if offsets is not None:
                raise ValueError("offsets are already part of the SequenceObservation")
            outcomes, offsets = (
                np.asarray(observation.outcomes),
                np.asarray(observation.offsets),
            )
        else:
            outcomes = np.asarray(observation, dtype=float)
            if outcomes.ndim == 0:
                if offsets is not None:
                    raise ValueError("offsets given for a scalar observation")
                outcomes = outcomes[None]
            elif offsets is None:
                raise ValueError(
                    "a sequence of outcomes needs offsets; "
                    "pass offsets=... or a SequenceObservation"
                )
            else:
                seq = SequenceObservation(outcomes, offsets)
                outcomes, offsets = np.asarray(seq.outcomes), np.asarray(seq.offsets)

        if not np.all(np.isfinite(outcomes)):
            bad = int(np.flatnonzero(~np.isfinite(outcomes))[0])
            raise ValueError(f"Observed outcome {bad} is not finite: {outcomes[bad]}")
        return outcomes, offsets

    def expand_support(self, support, offsets=None) -> jnp.ndarray:
        """
        Positions of every candidate.

        Parameters
        ----------
        support : array-like, shape (J,) or (J, d)
            Candidate (start) positions. Vector-valued candidates are only
            allowed for scalar observations.
        offsets : array-like, shape (L,), optional
            Known gaps of a sequence observation.

        Returns
        -------
        jnp.ndarray, shape (J, L) or (J, 1, d)

        Raises
        ------
        InvalidSupportError
            With policy "reject", if any derived position leaves the domain.
        """
        support = np.asarray(support, dtype=float)
        if support.ndim not in (1, 2) or support.shape[0] == 0:
            raise ValueError(
                f"support must be a non-empty array of shape (J,) or (J, d), "
                f"got {support.shape}"
            )
        if support.ndim == 2:
            if offsets is not None:
                raise ValueError("sequence observations need scalar candidate starts")
            return jnp.asarray(support[:, None, :])

        relative = np.zeros(1) if offsets is None else np.cumsum(offsets)
        positions = support[:, None] + relative[None, :]

        bad = self.feature_map.out_of_domain(positions)
        if not bad.any():
            return jnp.asarray(positions)

        if self.out_of_domain == "reject":
            j, k = (int(i) for i in np.argwhere(bad)[0])
            raise InvalidSupportError(
                f"Candidate {j} (start {support[j]:g}) reaches position "
                f"{positions[j, k]:g} outside the domain {self.feature_map.domain} "
                f"of feature map {self.feature_map.name!r}",
                candidate=j,
                position=positions[j, k],
            )

        logger.debug(
            "Wrapping %d out-of-domain positions across %d candidates",
            int(bad.sum()),
            int(bad.any(axis=1).sum()),
        )
        wrapped = self.feature_map.wrap(positions)
        return jnp.where(jnp.asarray(bad), wrapped, jnp.asarray(positions))

    def design(self, positions: jnp.ndarray) -> jnp.ndarray:
        """Feature tensor (J, L, p) of a (J, L[, d]) position array."""
        J, L = positions.shape[:2]
        flat = positions.reshape((J * L,) + positions.shape[2:])
        X = self.feature_map.design(flat)
        return X.reshape(J, L, X.shape[-1])

    def prepare(self, observation, support, offsets=None) -> tuple[jnp.ndarray, jnp.ndarray]:
        """
        Everything a run needs that does not depend on the parameters.

        Returns
        -------
        design : jnp.ndarray, shape (J, L, p)
        outcomes : jnp.ndarray, shape (L,)

        Raises
        ------
        InvalidSupportError
            If a candidate leaves the domain under the "reject" policy, or
            the feature map is not finite at one of its positions.
        """
        outcomes, offsets = self.unpack(observation, offsets)
        positions = self.expand_support(support, offsets)
        design = self.design(positions)

        finite = np.asarray(jnp.all(jnp.isfinite(design), axis=-1))
        if not finite.all():
            j, k = (int(i) for i in np.argwhere(~finite)[0])
            position = np.asarray(positions[j, k])
            raise InvalidSupportError(
                f"Candidate {j} gives a non-finite feature vector at position "
                f"{position.tolist()} under feature map {self.feature_map.name!r}",
                candidate=j,
                position=position,
            )
        return design, jnp.asarray(outcomes)

    # ------------------------------------------------------------------
    # Evaluation for one parameter draw
    # ------------------------------------------------------------------
    def log_likelihood(
        self, observation, support, beta, sigmasq, *, offsets=None
    ) -> jnp.ndarray:
        """
        Log likelihood vector (J,) for one parameter draw.

        Parameters
        ----------
        observation : float, SequenceObservation or array-like
            Observed outcome(s).
        support : array-like, shape (J,)
            Candidate (start) positions.
        beta : array-like, shape (p,)
        sigmasq : float
        offsets : array-like, optional
            Offsets when ``observation`` is a bare array.
        """
        design, outcomes = self.prepare(observation, support, offsets)
        return log_likelihood_from_design(
            design, outcomes, jnp.asarray(beta), jnp.asarray(sigmasq)
        )

    def likelihood(self, observation, support, beta, sigmasq, *, offsets=None) -> jnp.ndarray:
        """
        Likelihood vector (J,); non-negative and finite, possibly zero.

        Needs ``sigmasq > 0``. At zero variance the density is a point mass
        with no finite value; use ``log_likelihood`` there (+inf / -inf).
        """
        if not float(sigmasq) > 0:
            raise ValueError(
                f"likelihood needs sigmasq > 0, got {float(sigmasq)}; "
                "use log_likelihood for zero-variance point masses"
            )
        return jnp.exp(
            self.log_likelihood(observation, support, beta, sigmasq, offsets=offsets)
        )

    def __repr__(self) -> str:
        return (
            f"GaussianLikelihood(feature_map={self.feature_map.name!r}, "
            f"out_of_domain={self.out_of_domain!r})"
        )

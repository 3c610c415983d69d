"""
conjugate.py
------------

Conjugate fit of the forward regression.

ConjugateSampler fits z = features(w) · beta + eps, eps ~ N(0, sigmasq),
under the reference prior p(beta, sigmasq) ∝ 1 / sigmasq, and returns the
exact Normal-Inverse-Gamma posterior. No iterative sampling is needed:
draws come straight from the closed form (see invreg.posterior.posterior).

Each call to ``fit`` is a pure function of (training set, feature map) and
returns a fresh posterior object.
"""

from __future__ import annotations

from typing import Any

import jax.numpy as jnp
import numpy as np

from invreg.data.dataset import TrainingSet
from invreg.errors import DegenerateDesignError
from invreg.model.features import FeatureMap, as_feature_map
from invreg.posterior.posterior import NormalInverseGammaPosterior
from invreg.utils.logging import configure_logging

logger = configure_logging(__name__)


class ConjugateSampler:
    """
    Exact conjugate sampler for the linear-Gaussian forward model.

    Parameters
    ----------
    rcond : float, optional
        Relative singular-value cutoff for the rank check of the design.
        Defaults to numpy's ``matrix_rank`` tolerance.

    Notes
    -----
    - Fails with DegenerateDesignError when n <= p or rank(X) < p.
    - The returned posterior draws sigmasq ~ InvGamma((n - p)/2, RSS/2)
      and beta | sigmasq ~ N(beta_hat, sigmasq (XᵗX)⁻¹).
    """

    def __init__(self, rcond: float | None = None):
        self.rcond = rcond

    def fit(
        self, training_set: TrainingSet, feature_map: FeatureMap | Any
    ) -> NormalInverseGammaPosterior:
        """
        Fit the regression and return its parameter posterior.

        Parameters
        ----------
        training_set : TrainingSet
            (position, outcome) pairs.
        feature_map : FeatureMap or callable
            Basis expansion producing the design rows.

        Returns
        -------
        NormalInverseGammaPosterior

        Raises
        ------
        DegenerateDesignError
            If there are not more pairs than features, or the design is
            rank deficient.
        """
        feature_map = as_feature_map(feature_map)
        positions, outcomes = training_set.to_jax()
        X = feature_map.design(positions)
        n, p = X.shape

        if n <= p:
            raise DegenerateDesignError(
                f"Need more training pairs than features for the variance "
                f"posterior, got n={n}, p={p}",
                n=n,
                p=p,
            )

        rank = int(np.linalg.matrix_rank(np.asarray(X), tol=self._tol(X)))
        if rank < p:
            raise DegenerateDesignError(
                f"Design matrix is rank deficient: rank {rank} < p={p} "
                f"(n={n}); XᵗX is not invertible",
                n=n,
                p=p,
                rank=rank,
            )

        beta_hat, *_ = jnp.linalg.lstsq(X, outcomes)
        resid = outcomes - X @ beta_hat
        rss = float(resid @ resid)
        gram = X.T @ X

        if rss == 0.0:
            logger.warning(
                "Training set is fitted exactly (rss=0); every parameter draw "
                "will have zero noise variance"
            )

        posterior = NormalInverseGammaPosterior(beta_hat, gram, rss, n)
        if not bool(jnp.all(jnp.isfinite(posterior.chol))):
            raise DegenerateDesignError(
                f"XᵗX is numerically singular for feature map {feature_map.name!r}",
                n=n,
                p=p,
                rank=rank,
            )

        logger.debug(
            "Fitted %s on n=%d pairs: p=%d, rss=%.4g", feature_map.name, n, p, rss
        )
        return posterior

    def _tol(self, X) -> float | None:
        if self.rcond is None:
            return None
        s = np.linalg.svd(np.asarray(X), compute_uv=False)
        return float(self.rcond * s.max())

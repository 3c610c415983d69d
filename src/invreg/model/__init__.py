"""
invreg.model
============

Model-layer API: the forward regression as seen by the inversion engine.

Includes
--------
- Feature maps (FeatureMap, fourier_features, chebyshev_features)
- Likelihood evaluator (GaussianLikelihood) for scalar and sequence outcomes

Typical usage
-------------
    from invreg.model import GaussianLikelihood, fourier_features
"""

from .features import FeatureMap, as_feature_map, chebyshev_features, fourier_features
from .likelihood import GaussianLikelihood, log_likelihood_from_design

__all__ = [
    # Feature maps
    "FeatureMap",
    "as_feature_map",
    "fourier_features",
    "chebyshev_features",
    # Likelihood
    "GaussianLikelihood",
    "log_likelihood_from_design",
]

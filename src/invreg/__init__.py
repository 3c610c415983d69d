"""
invreg
======

Bayesian inversion of a fitted regression model.

Given a forward regression that predicts an outcome z from a position in a
cycle w (e.g. a measured signal from the day of year), invreg computes the
posterior over the position that produced an observed outcome, or over the
start of a chain of outcomes observed at known offsets.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. Feature map (model/features.py):
   - Pure basis expansion features(w) -> (p,), e.g. Fourier harmonics.
   - Carries its domain and period (used to validate or wrap candidates).

2. ConjugateSampler (inference/conjugate.py):
   - Fits z = features(w) · beta + noise by least squares.
   - Returns the exact Normal-Inverse-Gamma parameter posterior.

3. GaussianLikelihood (model/likelihood.py):
   - Likelihood of a scalar outcome, or of a sequence of outcomes with a
     diagonal-covariance multivariate Gaussian, at every candidate.

4. Posterior weighting step (posterior/weighting.py):
   - Random Gamma prior weights (a Dirichlet prior over the support),
     then log-sum-exp normalization.

5. MonteCarloInversion (inference/monte_carlo.py):
   - vmap of 3-4 over parameter draws, then a mean; HPD set.

6. LargeSampleApproximation (inference/large_sample.py):
   - Plug-in point estimate, uniform weights, no simulation.

Unified import style
--------------------
Top-level:
  from invreg import TrainingSet, SequenceObservation, fourier_features
  from invreg import ConjugateSampler, GaussianLikelihood
  from invreg import MonteCarloInversion, LargeSampleApproximation, InversionConfig

Subpackages:
  from invreg.model import FeatureMap, chebyshev_features
  from invreg.posterior import PointPosterior, hpd_mask, posterior_weights
  from invreg.utils import grid_support, custom_support

Data flow
---------
- TrainingSet + feature map -> ConjugateSampler.fit -> ParameterPosterior
- ParameterPosterior + GaussianLikelihood + observation + support
      -> MonteCarloInversion.invert -> PositionPosterior (probs, hpd)

----------------------------------------------------------------------
"""

from . import data as data
from . import inference as inference
from . import model as model
from . import posterior as posterior
from . import utils as utils
from .data.dataset import SequenceObservation, TrainingSet
from .errors import (
    DegenerateDesignError,
    DegenerateLikelihoodError,
    InvalidSupportError,
    InversionError,
)
from .inference.config import InversionConfig
from .inference.conjugate import ConjugateSampler
from .inference.large_sample import LargeSampleApproximation, approximate_position
from .inference.monte_carlo import MonteCarloInversion, invert_position
from .model.features import FeatureMap, chebyshev_features, fourier_features
from .model.likelihood import GaussianLikelihood
from .posterior.position_posterior import PositionPosterior, hpd_mask
from .posterior.posterior import NormalInverseGammaPosterior, PointPosterior
from .utils.candidates import custom_support, grid_support

__version__ = "0.1.0"

__all__ = [
    # Data
    "TrainingSet",
    "SequenceObservation",
    # Model
    "FeatureMap",
    "fourier_features",
    "chebyshev_features",
    "GaussianLikelihood",
    # Inference
    "ConjugateSampler",
    "MonteCarloInversion",
    "LargeSampleApproximation",
    "InversionConfig",
    "invert_position",
    "approximate_position",
    # Posterior
    "NormalInverseGammaPosterior",
    "PointPosterior",
    "PositionPosterior",
    "hpd_mask",
    # Supports
    "grid_support",
    "custom_support",
    # Errors
    "InversionError",
    "DegenerateDesignError",
    "DegenerateLikelihoodError",
    "InvalidSupportError",
    # Subpackages
    "data",
    "model",
    "inference",
    "posterior",
    "utils",
]

"""
inference
=========

Inference engines for inverting the forward regression.

This subpackage provides:
- ConjugateSampler : exact Normal-Inverse-Gamma fit of the forward model.
- MonteCarloInversion : position posterior averaged over parameter draws.
- LargeSampleApproximation : plug-in posterior at the point estimate.
- InversionConfig : validated configuration of a Monte-Carlo run.

Convenience functions ``invert_position`` and ``approximate_position``
fit and invert in one call.
"""

from .base import InversionEngine
from .config import InversionConfig
from .conjugate import ConjugateSampler
from .large_sample import LargeSampleApproximation, approximate_position
from .monte_carlo import MonteCarloInversion, invert_position, simulate_draws

# Registry for string-based engine selection
INVERSION_ENGINES = {
    "monte_carlo": MonteCarloInversion,
    "large_sample": LargeSampleApproximation,
}

__all__ = [
    "InversionEngine",
    "InversionConfig",
    "ConjugateSampler",
    "MonteCarloInversion",
    "LargeSampleApproximation",
    "simulate_draws",
    "invert_position",
    "approximate_position",
    "INVERSION_ENGINES",
]

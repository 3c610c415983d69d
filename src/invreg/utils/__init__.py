"""
utils
=====

Shared utility functions and helpers for invreg.

This subpackage provides:
- candidates : builders for candidate supports.
- logging : rich-backed logger configuration.
- math : Chebyshev basis, Gaussian log density, log-weight normalization.
- rng : PRNG keys and the per-draw key assignment of Monte-Carlo runs.
"""

from .candidates import custom_support, grid_support
from .logging import configure_logging
from .math import chebyshev_basis, gaussian_logpdf, normalize_log_weights
from .rng import draw_keys, seed, split

__all__ = [
    # candidates
    "grid_support",
    "custom_support",
    # logging
    "configure_logging",
    # math
    "chebyshev_basis",
    "gaussian_logpdf",
    "normalize_log_weights",
    # rng
    "seed",
    "split",
    "draw_keys",
]

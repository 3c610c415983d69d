"""
errors.py
---------

Exception hierarchy for invreg.

All errors raised by the inversion engine derive from InversionError, so
callers can catch one type. Each subclass also derives from the builtin
that best describes it, which keeps ``except ValueError`` working for code
that does not know about invreg.

None of these errors are retried: every condition is a deterministic
function of the inputs.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


class InversionError(Exception):
    """Base class for all invreg errors."""


class DegenerateDesignError(InversionError, ValueError):
    """
    The regression design cannot support the conjugate posterior.

    Raised when the design matrix is rank deficient (XᵗX not invertible)
    or when there are not more observations than coefficients (n <= p),
    which leaves no degrees of freedom for the noise variance.
    """

    def __init__(self, message: str, *, n: int, p: int, rank: int | None = None):
        super().__init__(message)
        self.n = n
        self.p = p
        self.rank = rank


class DegenerateLikelihoodError(InversionError, ArithmeticError):
    """
    Every candidate has zero likelihood under at least one parameter draw.

    Attributes
    ----------
    draws : tuple of int
        Indices of the offending Monte-Carlo draws (empty for the
        large-sample approximation, which has no draws).
    """

    def __init__(self, message: str, *, draws: Sequence[int] = ()):
        super().__init__(message)
        self.draws = tuple(int(d) for d in draws)


class InvalidSupportError(InversionError, ValueError):
    """
    A candidate maps to a position outside the feature map's domain, or to
    one where the feature map is not finite.

    Attributes
    ----------
    candidate : int
        Index of the first offending candidate in the support.
    position : float or tuple of float
        The offending (derived) position; a tuple for vector positions.
    """

    def __init__(self, message: str, *, candidate: int, position: float):
        super().__init__(message)
        self.candidate = int(candidate)
        position = np.asarray(position, dtype=float)
        self.position = (
            float(position) if position.ndim == 0 else tuple(position.ravel().tolist())
        )

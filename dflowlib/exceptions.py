"""
dflowlib.exceptions - Error taxonomy for design flow computation

Every failure of the pipeline is reported as exactly one of these kinds.
"""

from __future__ import annotations

from typing import Optional


class DFlowError(Exception):
    """Base class for all dflowlib errors."""


class InvalidInputError(DFlowError, ValueError):
    """Raised when observations or analysis options are malformed.

    Detected before any computation begins.
    """


class InsufficientDataError(DFlowError):
    """Raised when too few water years remain to fit the distribution.

    Parameters
    ----------
    message : str
        Description of the shortfall.
    n_usable : int
        Number of usable (finite log) annual minima, ``N``.
    n_candidate : int
        Number of candidate water years in the period, ``NY``.
    """

    def __init__(self, message: str, n_usable: int = 0, n_candidate: int = 0) -> None:
        super().__init__(message)
        self.n_usable = n_usable
        self.n_candidate = n_candidate


class DegenerateStatisticsError(DFlowError):
    """Raised when a sample exists but the design flow cannot be estimated from it.

    Parameters
    ----------
    message : str
        Description of the degenerate condition.
    skew : float or None
        Sample skew of the log annual minima, if computed.
    probability : float or None
        Adjusted non-exceedance probability, if computed.
    """

    def __init__(
        self,
        message: str,
        skew: Optional[float] = None,
        probability: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.skew = skew
        self.probability = probability

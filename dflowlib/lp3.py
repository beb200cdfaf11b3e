"""
dflowlib.lp3 - Annual minima and log-Pearson Type III design flow

Follows the DFLOW user's manual (Rossman, 1990): the lowest m-day average of
each water year is fitted by the method of moments in natural-log space, and
the design flow is the flow whose non-exceedance probability is 1/R,
adjusted for the share of candidate years that could not be used.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from .core import (
    DesignFlowResult,
    LogPearsonFit,
    adjusted_probability,
    frequency_factor,
    normal_deviate,
)
from .exceptions import DegenerateStatisticsError, InsufficientDataError

logger = logging.getLogger(__name__)

MIN_USABLE_YEARS = 3

# Skews smaller than this in magnitude are zero up to rounding of the moments
SKEW_TOLERANCE = 1e-8


def annual_minima(filtered: pd.DataFrame) -> pd.Series:
    """
    Lowest m-day average per water year, sorted from lowest to highest.

    Parameters
    ----------
    filtered : pd.DataFrame
        Output of :func:`dflowlib.season.apply_quality_gate`.

    Returns
    -------
    pd.Series
        Minimum ``m_avg`` indexed by water year.
    """
    minima = filtered.groupby("water_year")["m_avg"].min()
    return minima.sort_values(kind="mergesort").rename("annual_minimum")


def fit_log_pearson3(minima: pd.Series, n_candidate: int) -> LogPearsonFit:
    """
    Method-of-moments log-Pearson Type III fit.

    Years whose minimum is zero have no finite log and are left out of the
    sample, but still count toward ``n_candidate``.

    Parameters
    ----------
    minima : pd.Series
        Annual minimum m-day averages of the kept water years.
    n_candidate : int
        Candidate water years in the period before the quality gate (``NY``).

    Returns
    -------
    LogPearsonFit
        Mean, standard deviation (``N - 1``) and skew of the log minima.

    Raises
    ------
    InsufficientDataError
        No candidate years, or fewer than three usable minima.
    """
    values = minima.to_numpy(dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        logs = np.log(values)
    usable = np.isfinite(logs)
    y = logs[usable]
    n = len(y)

    if n_candidate == 0:
        raise InsufficientDataError(
            "No candidate water years in the analysis period", n_usable=n, n_candidate=0
        )
    if n < MIN_USABLE_YEARS:
        raise InsufficientDataError(
            f"At least {MIN_USABLE_YEARS} water years with complete, non-zero flow data "
            f"are required; found {n} of {n_candidate}",
            n_usable=n,
            n_candidate=n_candidate,
        )

    mean_log = float(y.mean())
    if np.ptp(y) == 0:
        std_log, skew = 0.0, float("nan")
    else:
        std_log = float(y.std(ddof=1))
        skew = float(n * np.sum((y - mean_log) ** 3) / ((n - 1) * (n - 2) * std_log**3))

    logger.debug(
        "LP3 fit: N=%d NY=%d U=%.6f S=%.6f G=%.6f", n, n_candidate, mean_log, std_log, skew
    )

    return LogPearsonFit(
        mean_log=mean_log,
        std_log=std_log,
        skew=skew,
        n_usable=n,
        n_candidate=n_candidate,
        n_kept=len(values),
        annual_minima={int(wy): float(q) for wy, q in minima.items()},
    )


def design_flow(
    fit: LogPearsonFit,
    return_period: float,
    averaging_period: int,
    dropped_years: Optional[List[int]] = None,
) -> DesignFlowResult:
    """
    Evaluate the fitted distribution at return period ``R``.

    Parameters
    ----------
    fit : LogPearsonFit
        Fitted log-moments.
    return_period : float
        Return period in years.
    averaging_period : int
        Averaging period the minima were built from (for labelling).
    dropped_years : list of int, optional
        Water years removed by the quality gate (for reporting).

    Returns
    -------
    DesignFlowResult

    Raises
    ------
    DegenerateStatisticsError
        The adjusted probability falls outside (0, 1), or the skew is zero
        (below ``SKEW_TOLERANCE`` in magnitude) or not finite.
    """
    f0 = fit.f0
    p = adjusted_probability(return_period, f0)
    if not 0.0 < p < 1.0:
        raise DegenerateStatisticsError(
            f"Return period {return_period:g} cannot be estimated: {f0:.1%} of "
            f"{fit.n_candidate} candidate years are unusable (adjusted probability {p:.4f})",
            skew=fit.skew,
            probability=p,
        )

    z = normal_deviate(p)

    if fit.is_degenerate:
        # All usable minima are equal; the distribution is a single point
        flow = next(q for q in fit.annual_minima.values() if q > 0)
        k = 0.0
    else:
        if not np.isfinite(fit.skew) or abs(fit.skew) < SKEW_TOLERANCE:
            raise DegenerateStatisticsError(
                f"Skew of the log annual minima is zero (G={fit.skew:.3g}); "
                "frequency factor is undefined",
                skew=fit.skew,
                probability=p,
            )
        k = frequency_factor(fit.skew, z)
        flow = float(np.exp(fit.mean_log + k * fit.std_log))

    return DesignFlowResult(
        design_flow=flow,
        averaging_period=averaging_period,
        return_period=return_period,
        mean_log=fit.mean_log,
        std_log=fit.std_log,
        skew=fit.skew,
        n_usable=fit.n_usable,
        n_candidate=fit.n_candidate,
        n_kept=fit.n_kept,
        f0=f0,
        probability=p,
        z=z,
        k=k,
        dropped_years=list(dropped_years or []),
    )

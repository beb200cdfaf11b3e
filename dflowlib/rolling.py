"""
dflowlib.rolling - m-day rolling average of daily flow
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

logger = logging.getLogger(__name__)


def rolling_mean(flow, averaging_period: int) -> np.ndarray:
    """
    Left-aligned arithmetic m-day mean of a daily flow sequence.

    Element ``i`` is the mean of ``flow[i:i + m]``. It is NaN when any flow
    in that window is missing or when the window runs past the end of the
    sequence; missing flows are never filled.

    Parameters
    ----------
    flow : array-like
        Contiguous daily flows, NaN for missing days.
    averaging_period : int
        Window length ``m`` (>= 1).

    Returns
    -------
    np.ndarray
        Rolling means, same length as ``flow``.
    """
    values = np.asarray(flow, dtype=float)
    result = np.full(values.shape, np.nan)

    n_windows = len(values) - averaging_period + 1
    if n_windows > 0:
        result[:n_windows] = sliding_window_view(values, averaging_period).mean(axis=1)
    return result


def add_rolling_mean(calendar: pd.DataFrame, averaging_period: int) -> pd.DataFrame:
    """
    Attach the m-day rolling mean as column ``m_avg``.

    The mean runs over the whole calendar at once, so windows at the end of
    a water year reach into the next one.
    """
    out = calendar.copy()
    out["m_avg"] = rolling_mean(out["flow"].to_numpy(), averaging_period)

    logger.debug(
        "%d-day averages: %d of %d days without a complete window",
        averaging_period,
        int(out["m_avg"].isna().sum()),
        len(out),
    )
    return out

"""
Synthetic daily flow records with hand-computed design flows.

Each year of the 15-year record flows at a steady base rate except for a
two-week dip in July, so the lowest 7-day average of water year ``wy`` is
exactly ``REFERENCE_MINIMA[wy]``. The expected values below were computed
by hand from the DFLOW equations (Rossman, 1990) on those minima.
"""

from __future__ import annotations

from typing import Dict, Tuple

import pandas as pd

BASE_FLOW = 500.0
DIP_START: Tuple[int, int] = (7, 1)
DIP_DAYS = 14
AVERAGING_PERIOD = 7

REFERENCE_MINIMA: Dict[int, float] = {
    1991: 12.0,
    1992: 8.5,
    1993: 15.25,
    1994: 6.0,
    1995: 9.75,
    1996: 11.25,
    1997: 4.5,
    1998: 8.0,
    1999: 13.5,
    2000: 10.5,
    2001: 5.5,
    2002: 8.75,
    2003: 14.0,
    2004: 7.0,
    2005: 9.25,
}

# Complete record, N = NY = 15
EXPECTED_PARAMETERS: Dict[str, float] = {
    "mean_log": 2.203994926872851,
    "std_log": 0.355466323743078,
    "skew": -0.429541416052157,
    "n_usable": 15,
    "n_candidate": 15,
}
EXPECTED_DESIGN_FLOWS: Dict[float, float] = {
    2: 9.293475947828416,
    10: 5.673131930090866,
    20: 4.847807269560217,
    100: 3.547328547290020,
}

# Water year 1998 unusable (a missing day, or a zero-flow dip), N = 14, NY = 15
DROPPED_YEAR = 1998
GAP_DATE = "1998-03-15"
EXPECTED_PARAMETERS_ONE_DROPPED: Dict[str, float] = {
    "mean_log": 2.212891597243780,
    "std_log": 0.367147700968213,
    "skew": -0.505809736723641,
    "n_usable": 14,
    "n_candidate": 15,
}
EXPECTED_DESIGN_FLOWS_ONE_DROPPED: Dict[float, float] = {
    5: 6.182874963276178,
    10: 4.414061648031478,
}

TOLERANCE_PERCENT = 1e-6


def _record_dates(first_wy: int, last_wy: int, pad_days: int) -> pd.DatetimeIndex:
    start = pd.Timestamp(first_wy - 1, 10, 1)
    end = pd.Timestamp(last_wy, 9, 30) + pd.Timedelta(days=pad_days)
    return pd.date_range(start, end, freq="D")


def synthetic_daily_flows(
    minima: Dict[int, float] = None,
    base_flow: float = BASE_FLOW,
    dip_days: int = DIP_DAYS,
    pad_days: int = AVERAGING_PERIOD - 1,
) -> pd.Series:
    """Daily record whose water-year minima of the 7-day average are ``minima``.

    Covers October 1 before the first water year through September 30 of
    the last, plus ``pad_days`` so the final 7-day windows are complete.
    """
    if minima is None:
        minima = REFERENCE_MINIMA

    dates = _record_dates(min(minima), max(minima), pad_days)
    flow = pd.Series(float(base_flow), index=dates, name="flow")
    for wy, q in minima.items():
        start = pd.Timestamp(wy, *DIP_START)
        flow.loc[start : start + pd.Timedelta(days=dip_days - 1)] = float(q)
    return flow


def constant_daily_flows(
    first_wy: int, last_wy: int, flow: float = 100.0, pad_days: int = AVERAGING_PERIOD - 1
) -> pd.Series:
    """Daily record with the same flow on every day."""
    dates = _record_dates(first_wy, last_wy, pad_days)
    return pd.Series(float(flow), index=dates, name="flow")

"""
dflowlib.calendar - Daily calendar normalization

Builds the dense daily calendar between the analysis bounds, joins the
observed flows onto it and tags every day with its non-leap season day and
water year.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .core import DEFAULT_WYEND, DEFAULT_WYSTART, FlowRecord, parse_month_day, season_day
from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

Observations = Union[pd.Series, pd.DataFrame, Iterable[FlowRecord], Iterable[Tuple]]

CALENDAR_COLUMNS = ["date", "flow", "year", "season_day", "water_year", "in_period"]


def _split_observations(observations: Observations) -> Tuple[list, list]:
    """Separate dates and flows from any supported observation container."""
    if isinstance(observations, pd.Series):
        return list(observations.index), list(observations.to_numpy())

    if isinstance(observations, pd.DataFrame):
        if observations.shape[1] < 2:
            raise InvalidInputError(
                "Observation table must have a date column followed by a flow column"
            )
        return list(observations.iloc[:, 0]), list(observations.iloc[:, 1])

    dates, flows = [], []
    for obs in observations:
        if isinstance(obs, FlowRecord):
            dates.append(obs.date)
            flows.append(obs.flow)
            continue
        try:
            date, flow = obs
        except (TypeError, ValueError):
            raise InvalidInputError(f"Observation must be a (date, flow) pair, got {obs!r}")
        dates.append(date)
        flows.append(flow)
    return dates, flows


def to_daily_series(observations: Observations) -> pd.Series:
    """
    Coerce observations to a date-indexed daily flow series.

    Parameters
    ----------
    observations : Series, DataFrame or iterable
        A Series indexed by date, a DataFrame whose first two columns are
        date and flow, or an iterable of FlowRecord / (date, flow) pairs.
        Missing flows may be given as None or NaN.

    Returns
    -------
    pd.Series
        Float flows named ``flow`` on a sorted, midnight-normalized
        DatetimeIndex.

    Raises
    ------
    InvalidInputError
        Empty input, unparseable dates or flows, negative or infinite
        flows, or duplicate dates.
    """
    raw_dates, raw_flows = _split_observations(observations)
    if not raw_dates:
        raise InvalidInputError("No observations supplied")

    try:
        dates = pd.DatetimeIndex(pd.to_datetime(raw_dates))
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Observation dates could not be parsed: {e}")
    if dates.hasnans:
        raise InvalidInputError("Observation dates must not be missing")
    if dates.tz is not None:
        dates = dates.tz_localize(None)
    dates = dates.normalize()

    try:
        flows = pd.to_numeric(pd.Series(raw_flows, dtype=object), errors="raise").astype(float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Observation flows must be numeric or missing: {e}")
    flows = flows.to_numpy()

    if np.isinf(flows).any():
        raise InvalidInputError("Observation flows must be finite")
    if (flows[~np.isnan(flows)] < 0).any():
        raise InvalidInputError("Observation flows must not be negative")
    if dates.duplicated().any():
        dupes = dates[dates.duplicated()].strftime("%Y-%m-%d")
        raise InvalidInputError(f"Duplicate observation dates: {', '.join(dupes[:5])}")

    return pd.Series(flows, index=dates, name="flow").sort_index()


def analysis_bounds(
    daily: pd.Series,
    averaging_period: int,
    yearstart: Optional[int] = None,
    yearend: Optional[int] = None,
    wystart: str = DEFAULT_WYSTART,
    wyend: str = DEFAULT_WYEND,
) -> Tuple[pd.Timestamp, pd.Timestamp, pd.Timestamp]:
    """
    Start, period end and padded end of the analysis calendar.

    The calendar runs from ``wystart`` in ``yearstart`` to ``wyend`` in
    ``yearend``, padded by ``averaging_period - 1`` days so that the last
    in-period rolling window is complete.
    """
    if yearstart is None:
        yearstart = daily.index.min().year
    if yearend is None:
        yearend = daily.index.max().year

    start = pd.Timestamp(yearstart, *parse_month_day(wystart))
    period_end = pd.Timestamp(yearend, *parse_month_day(wyend))
    end = period_end + pd.Timedelta(days=averaging_period - 1)
    return start, period_end, end


def build_calendar(
    observations: Observations,
    averaging_period: int,
    yearstart: Optional[int] = None,
    yearend: Optional[int] = None,
    wystart: str = DEFAULT_WYSTART,
    wyend: str = DEFAULT_WYEND,
) -> pd.DataFrame:
    """
    Normalize observations onto a contiguous daily calendar.

    Parameters
    ----------
    observations : Series, DataFrame or iterable
        Daily flows (see :func:`to_daily_series`).
    averaging_period : int
        Flow averaging period ``m`` in days.
    yearstart, yearend : int, optional
        Calendar years bounding the analysis; default to the years of the
        earliest and latest observations.
    wystart, wyend : str
        ``"MM-DD"`` bounds of the water year.

    Returns
    -------
    pd.DataFrame
        One row per calendar day with columns ``date``, ``flow`` (NaN where
        no observation exists), ``year``, ``season_day`` (nullable; NA for
        Feb-29), ``water_year`` and ``in_period`` (False for the padding
        days after ``wyend`` of ``yearend``). Observations outside the
        calendar are dropped.
    """
    daily = to_daily_series(observations)
    start, period_end, end = analysis_bounds(
        daily, averaging_period, yearstart, yearend, wystart, wyend
    )
    wy_month, wy_day = parse_month_day(wystart)

    dates = pd.date_range(start, end, freq="D")
    flow = daily.reindex(dates).to_numpy(dtype=float)

    month = dates.month.to_numpy()
    day = dates.day.to_numpy()
    year = dates.year.to_numpy()
    # Feb-29 falls between Feb-28 and Mar-1 and takes their water year
    opens_next = (month * 100 + day) >= (wy_month * 100 + wy_day)

    calendar = pd.DataFrame(
        {
            "date": dates,
            "flow": flow,
            "year": year,
            "season_day": pd.array(
                [season_day(int(mo), int(d)) for mo, d in zip(month, day)], dtype="Int64"
            ),
            "water_year": year + opens_next.astype(int),
            "in_period": dates <= period_end,
        },
        columns=CALENDAR_COLUMNS,
    )

    logger.debug(
        "Calendar %s to %s (%d days, %d without flow)",
        start.date(),
        end.date(),
        len(calendar),
        int(np.isnan(flow).sum()),
    )
    return calendar

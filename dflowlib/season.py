"""
dflowlib.season - Season filter and missing-data quality gate

A water year contributes to the design flow only if every in-season day of
the analysis period has a complete m-day average. Partial years are never
used, so a short or gappy year cannot pull the annual minimum down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import pandas as pd

from .core import SeasonWindow

logger = logging.getLogger(__name__)


@dataclass
class QualityReport:
    """Outcome of the quality gate.

    Parameters
    ----------
    candidate_years : list of int
        Water years with in-season days inside the analysis period, before
        the gate. Their count is ``NY``.
    kept_years : list of int
        Candidate years without a single missing m-day average.
    gap_counts : dict[int, int]
        Missing m-day averages per candidate year.
    """

    candidate_years: List[int] = field(default_factory=list)
    kept_years: List[int] = field(default_factory=list)
    gap_counts: Dict[int, int] = field(default_factory=dict)

    @property
    def n_candidate(self) -> int:
        return len(self.candidate_years)

    @property
    def n_kept(self) -> int:
        return len(self.kept_years)

    @property
    def dropped_years(self) -> List[int]:
        kept = set(self.kept_years)
        return [wy for wy in self.candidate_years if wy not in kept]


def restrict_to_season(calendar: pd.DataFrame, season: SeasonWindow) -> pd.DataFrame:
    """
    Keep in-period calendar days whose season day lies in ``season``.

    Feb-29 (no season day) and the rolling-window padding after the period
    end are always excluded.
    """
    days = calendar["season_day"].fillna(0).to_numpy(dtype=int)
    mask = season.contains(days) & calendar["in_period"].to_numpy(dtype=bool)
    return calendar.loc[mask]


def count_gaps(in_season: pd.DataFrame) -> pd.Series:
    """Number of missing m-day averages per water year, ordered by water year."""
    ordered = in_season.sort_values(["water_year", "date"])
    return ordered["m_avg"].isna().groupby(ordered["water_year"]).sum().astype(int)


def apply_quality_gate(
    calendar: pd.DataFrame, season: SeasonWindow
) -> Tuple[pd.DataFrame, QualityReport]:
    """
    Restrict to the season and drop every water year with any gap.

    Parameters
    ----------
    calendar : pd.DataFrame
        Calendar with an ``m_avg`` column (see
        :func:`dflowlib.rolling.add_rolling_mean`).
    season : SeasonWindow
        Eligible season days.

    Returns
    -------
    tuple
        (filtered, report) where ``filtered`` has one row per eligible day
        of a kept year with columns ``water_year``, ``date`` and ``m_avg``,
        and ``report`` is the :class:`QualityReport`.
    """
    in_season = restrict_to_season(calendar, season)
    gaps = count_gaps(in_season)

    kept = gaps.index[gaps == 0]
    filtered = in_season.loc[
        in_season["water_year"].isin(kept) & in_season["m_avg"].notna(),
        ["water_year", "date", "m_avg"],
    ].reset_index(drop=True)

    report = QualityReport(
        candidate_years=[int(wy) for wy in gaps.index],
        kept_years=[int(wy) for wy in kept],
        gap_counts={int(wy): int(n) for wy, n in gaps.items()},
    )

    if report.dropped_years:
        logger.debug(
            "Dropped %d of %d water years with missing data: %s",
            len(report.dropped_years),
            report.n_candidate,
            report.dropped_years,
        )
    return filtered, report

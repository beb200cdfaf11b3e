"""
dflowlib.core - Core data structures and utility functions
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import ClassVar, Dict, List, Optional, Tuple

import numpy as np

from .exceptions import InvalidInputError

# Non-leap year onto which every month/day is re-stamped for season days
REFERENCE_YEAR = 1900
DAYS_PER_SEASON_YEAR = 365

DEFAULT_WYSTART = "10-01"
DEFAULT_WYEND = "09-30"

# Cube-root approximation constants for the standard normal deviate
_Z_SCALE = 4.91
_Z_EXPONENT = 0.14

_MONTH_DAY = re.compile(r"^\s*(\d{1,2})-(\d{1,2})\s*$")


@dataclass(frozen=True)
class FlowRecord:
    """A single daily observation. ``flow`` is None (or NaN) for a missing day."""

    date: dt.date
    flow: Optional[float] = None


@lru_cache(maxsize=512)
def season_day(month: int, day: int) -> Optional[int]:
    """
    Non-leap ordinal day (1-365) of a month/day, ignoring the actual year.

    Feb-29 has no counterpart in the reference year and returns None,
    which keeps it out of every season window.
    """
    try:
        return dt.date(REFERENCE_YEAR, month, day).timetuple().tm_yday
    except ValueError:
        return None


def parse_month_day(text: str) -> Tuple[int, int]:
    """
    Parse an ``"MM-DD"`` string into a (month, day) tuple.

    Raises
    ------
    InvalidInputError
        If the string is malformed or names a day without a non-leap
        season day (including ``"02-29"``).
    """
    match = _MONTH_DAY.match(str(text))
    if match is None:
        raise InvalidInputError(f"Expected a month-day string in format 'MM-DD', got {text!r}")

    month, day = int(match.group(1)), int(match.group(2))
    if season_day(month, day) is None:
        raise InvalidInputError(f"{text!r} is not a valid day of a non-leap year")
    return month, day


@dataclass(frozen=True)
class SeasonWindow:
    """
    Set of eligible season days, defined by start and end season days.

    When ``start_day`` is not below ``end_day`` the window wraps around the
    year end: ``start_day..365`` plus ``1..end_day``.
    """

    start_day: int
    end_day: int

    @classmethod
    def from_month_day(
        cls, wystart: str = DEFAULT_WYSTART, wyend: str = DEFAULT_WYEND
    ) -> SeasonWindow:
        start = season_day(*parse_month_day(wystart))
        end = season_day(*parse_month_day(wyend))
        return cls(start_day=start, end_day=end)

    @property
    def wraps(self) -> bool:
        return not self.start_day < self.end_day

    @property
    def days(self) -> np.ndarray:
        if not self.wraps:
            return np.arange(self.start_day, self.end_day + 1)
        return np.concatenate(
            [np.arange(self.start_day, DAYS_PER_SEASON_YEAR + 1), np.arange(1, self.end_day + 1)]
        )

    def __len__(self) -> int:
        return len(self.days)

    def contains(self, days: np.ndarray) -> np.ndarray:
        """Boolean mask of which season days fall inside the window (0 never does)."""
        return np.isin(np.asarray(days), self.days)


@dataclass
class LogPearsonFit:
    """Method-of-moments log-Pearson Type III fit to annual minima (natural log)."""

    mean_log: float
    std_log: float
    skew: float
    n_usable: int
    n_candidate: int
    n_kept: int
    annual_minima: Dict[int, float] = field(default_factory=dict)

    @property
    def f0(self) -> float:
        """Fraction of candidate years not used in the fit."""
        return (self.n_candidate - self.n_usable) / self.n_candidate

    @property
    def is_degenerate(self) -> bool:
        """True when every usable log minimum is identical (zero variance)."""
        return self.std_log == 0.0


@dataclass
class DesignFlowResult:
    """Design flow and every intermediate quantity behind it."""

    design_flow: float
    averaging_period: int
    return_period: float
    mean_log: float
    std_log: float
    skew: float
    n_usable: int
    n_candidate: int
    n_kept: int
    f0: float
    probability: float
    z: float
    k: float
    dropped_years: List[int] = field(default_factory=list)

    LABEL_FORMAT: ClassVar[str] = "{m}Q{r}"

    @property
    def label(self) -> str:
        """Conventional statistic name, e.g. ``7Q10``."""
        r = self.return_period
        r_text = str(int(r)) if float(r).is_integer() else f"{r:g}"
        return self.LABEL_FORMAT.format(m=self.averaging_period, r=r_text)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["label"] = self.label
        return d


# =============================================================================
# DISTRIBUTION FUNCTIONS
# =============================================================================


def normal_deviate(p: float) -> float:
    """
    Approximate standard normal deviate for non-exceedance probability ``p``.

    Uses the closed form ``4.91 * (p**0.14 - (1 - p)**0.14)`` from the DFLOW
    user's manual (Rossman, 1990).
    """
    return _Z_SCALE * (p**_Z_EXPONENT - (1.0 - p) ** _Z_EXPONENT)


def frequency_factor(skew: float, z: float) -> float:
    """
    Log-Pearson Type III frequency factor by the Wilson-Hilferty transformation.

    ``skew`` must be non-zero; callers report a zero skew as degenerate.
    """
    return (2.0 / skew) * ((1.0 + skew * z / 6.0 - skew**2 / 36.0) ** 3 - 1.0)


def adjusted_probability(return_period: float, f0: float) -> float:
    """Non-exceedance probability of the design flow, conditional on usable years."""
    return (1.0 / return_period - f0) / (1.0 - f0)

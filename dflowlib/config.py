"""
Design flow analysis configuration.

Holds the averaging period, return period, analysis years and water-year
bounds for a DFLOW computation, validating them before any data is touched.
"""

from __future__ import annotations

import logging
import math
import numbers
import os
from dataclasses import dataclass
from typing import Optional

from .core import DEFAULT_WYEND, DEFAULT_WYSTART, SeasonWindow, parse_month_day
from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DFLOW_"


def validate_averaging_period(m) -> int:
    """Return ``m`` as an int, or raise if it is not a positive integer."""
    if isinstance(m, bool) or not isinstance(m, numbers.Real):
        raise InvalidInputError(f"Averaging period must be a positive integer, got {m!r}")
    if not math.isfinite(m) or m != int(m) or m < 1:
        raise InvalidInputError(f"Averaging period must be a positive integer, got {m!r}")
    return int(m)


def validate_return_period(r) -> float:
    """Return ``r`` as a float, or raise unless it is a finite number greater than 1."""
    if isinstance(r, bool) or not isinstance(r, numbers.Real):
        raise InvalidInputError(f"Return period must be a number greater than 1, got {r!r}")
    r = float(r)
    if not r > 1.0 or not math.isfinite(r):
        raise InvalidInputError(f"Return period must be a finite number greater than 1, got {r!r}")
    return r


def _validate_year(year, name: str) -> Optional[int]:
    if year is None:
        return None
    if isinstance(year, bool) or not isinstance(year, numbers.Real):
        raise InvalidInputError(f"{name} must be an integer calendar year, got {year!r}")
    if not math.isfinite(year) or year != int(year):
        raise InvalidInputError(f"{name} must be an integer calendar year, got {year!r}")
    return int(year)


@dataclass
class DFlowConfig:
    """Options for a design flow computation.

    Parameters
    ----------
    averaging_period : int
        Flow averaging period ``m`` in days.
    return_period : float
        Return period ``R`` in years; must exceed 1.
    yearstart : int or None
        First calendar year of the analysis period. None uses the year of
        the earliest observation.
    yearend : int or None
        Last calendar year of the analysis period. None uses the year of
        the latest observation.
    wystart : str
        Month-day (``"MM-DD"``) that begins the water year and the season.
    wyend : str
        Month-day (``"MM-DD"``) that ends the water year and the season.
    """

    averaging_period: int = 7
    return_period: float = 10.0
    yearstart: Optional[int] = None
    yearend: Optional[int] = None
    wystart: str = DEFAULT_WYSTART
    wyend: str = DEFAULT_WYEND

    def __post_init__(self) -> None:
        self.averaging_period = validate_averaging_period(self.averaging_period)
        self.return_period = validate_return_period(self.return_period)
        self.yearstart = _validate_year(self.yearstart, "yearstart")
        self.yearend = _validate_year(self.yearend, "yearend")
        if self.yearstart is not None and self.yearend is not None and self.yearstart > self.yearend:
            raise InvalidInputError(
                f"yearstart ({self.yearstart}) must not be after yearend ({self.yearend})"
            )
        parse_month_day(self.wystart)
        parse_month_day(self.wyend)

    @property
    def season(self) -> SeasonWindow:
        return SeasonWindow.from_month_day(self.wystart, self.wyend)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> DFlowConfig:
        """Build a configuration from ``DFLOW_*`` environment variables.

        Recognized variables are ``DFLOW_AVERAGING_PERIOD``,
        ``DFLOW_RETURN_PERIOD``, ``DFLOW_YEARSTART``, ``DFLOW_YEAREND``,
        ``DFLOW_WYSTART`` and ``DFLOW_WYEND``. Unset variables keep their
        defaults.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        for name, convert in (
            ("averaging_period", _to_number),
            ("return_period", _to_number),
            ("yearstart", _to_number),
            ("yearend", _to_number),
            ("wystart", str),
            ("wyend", str),
        ):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                kwargs[name] = convert(raw.strip())
                logger.debug("Config %s=%r from environment", name, kwargs[name])

        return cls(**kwargs)


def _to_number(text: str):
    try:
        value = float(text)
    except ValueError:
        raise InvalidInputError(f"Expected a number, got {text!r}")
    return int(value) if value.is_integer() else value

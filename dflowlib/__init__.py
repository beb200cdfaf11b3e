"""
dflowlib - Python library for low-flow design flow analysis

Includes:
- Daily calendar normalization with water years and non-leap season days
- m-day rolling averages with missing-day propagation
- Season filtering with whole-water-year exclusion of gappy years
- EPA DFLOW log-Pearson Type III design flows (e.g. 7Q10), adjusted for
  the fraction of unusable years
- Multi-station batch evaluation and reference benchmarks
"""

from .batch import batch_summary_table, run_multi_site
from .calendar import build_calendar, to_daily_series
from .config import DFlowConfig
from .core import (
    DesignFlowResult,
    FlowRecord,
    LogPearsonFit,
    SeasonWindow,
    adjusted_probability,
    frequency_factor,
    normal_deviate,
    season_day,
)
from .engine import STANDARD_RETURN_PERIODS, DFlowEngine, dflow
from .exceptions import (
    DegenerateStatisticsError,
    DFlowError,
    InsufficientDataError,
    InvalidInputError,
)
from .lp3 import annual_minima, design_flow, fit_log_pearson3
from .rolling import add_rolling_mean, rolling_mean
from .season import QualityReport, apply_quality_gate

__version__ = "0.1.0"
__author__ = "dflowlib"

__all__ = [
    # Core
    "FlowRecord",
    "SeasonWindow",
    "LogPearsonFit",
    "DesignFlowResult",
    "season_day",
    "normal_deviate",
    "frequency_factor",
    "adjusted_probability",
    # Errors
    "DFlowError",
    "InvalidInputError",
    "InsufficientDataError",
    "DegenerateStatisticsError",
    # Configuration
    "DFlowConfig",
    # Pipeline stages
    "to_daily_series",
    "build_calendar",
    "rolling_mean",
    "add_rolling_mean",
    "QualityReport",
    "apply_quality_gate",
    "annual_minima",
    "fit_log_pearson3",
    "design_flow",
    # Engine
    "DFlowEngine",
    "STANDARD_RETURN_PERIODS",
    "dflow",
    # Batch
    "run_multi_site",
    "batch_summary_table",
]

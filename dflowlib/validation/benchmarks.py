"""
Design flow benchmark cases.

Each benchmark is a named, self-contained scenario with a daily flow record
and hand-computed expected results. Used for validating the dflowlib
pipeline end to end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from dflowlib.validation.comparisons import (
    ComparisonResult,
    DesignFlowComparator,
    ReferenceValues,
)

logger = logging.getLogger(__name__)


@dataclass
class Benchmark:
    """A single benchmark case.

    Parameters
    ----------
    name : str
        Short identifier for the benchmark.
    description : str
        Human-readable description.
    flows : pd.Series
        Daily flows indexed by date.
    averaging_period : int
        Flow averaging period in days.
    wystart, wyend : str
        Water-year bounds in ``"MM-DD"`` format.
    yearstart, yearend : int or None
        Analysis years; None uses the record bounds.
    expected_parameters : dict[str, float]
        Expected fit quantities.
    expected_design_flows : dict[float, float]
        Expected return period to design flow mapping.
    tolerance_pct : float
        Tolerance for passing.
    """

    name: str = ""
    description: str = ""
    flows: pd.Series = field(default_factory=lambda: pd.Series(dtype=float))
    averaging_period: int = 7
    wystart: str = "10-01"
    wyend: str = "09-30"
    yearstart: Optional[int] = None
    yearend: Optional[int] = None
    expected_parameters: dict[str, float] = field(default_factory=dict)
    expected_design_flows: dict[float, float] = field(default_factory=dict)
    tolerance_pct: float = 1e-6

    def run_native(self) -> dict[str, Any]:
        """Run the benchmark through :class:`~dflowlib.engine.DFlowEngine`.

        Returns
        -------
        dict
            Computed result in comparison dict format.
        """
        from dflowlib.engine import DFlowEngine

        engine = DFlowEngine(
            averaging_period=self.averaging_period,
            yearstart=self.yearstart,
            yearend=self.yearend,
            wystart=self.wystart,
            wyend=self.wyend,
        )
        fit = engine.fit(self.flows)
        return {
            "averaging_period": self.averaging_period,
            "parameters": {
                "mean_log": fit.mean_log,
                "std_log": fit.std_log,
                "skew": fit.skew,
                "n_usable": fit.n_usable,
                "n_candidate": fit.n_candidate,
            },
            "design_flows": engine.design_flows(list(self.expected_design_flows)),
        }

    def validate_against_expected(self) -> ComparisonResult:
        """Validate computed results against expected values."""
        native = self.run_native()
        reference = ReferenceValues(
            parameters=dict(self.expected_parameters),
            design_flows=dict(self.expected_design_flows),
        )
        comparator = DesignFlowComparator(
            tolerance_pct=self.tolerance_pct,
            parameter_tolerance_pct=self.tolerance_pct,
        )
        return comparator.compare(native, reference)


def _create_synthetic_benchmarks() -> list[Benchmark]:
    """Create the synthetic 15-year and constant-flow benchmarks."""
    from dflowlib.validation import fixtures as fx

    complete = fx.synthetic_daily_flows()

    with_gap = complete.copy()
    with_gap.loc[pd.Timestamp(fx.GAP_DATE)] = float("nan")

    zero_minima = dict(fx.REFERENCE_MINIMA)
    zero_minima[fx.DROPPED_YEAR] = 0.0
    with_zero = fx.synthetic_daily_flows(zero_minima)

    return [
        Benchmark(
            name="synthetic_15yr",
            description="15 complete water years with a July low-flow dip (hand-computed)",
            flows=complete,
            expected_parameters=dict(fx.EXPECTED_PARAMETERS),
            expected_design_flows=dict(fx.EXPECTED_DESIGN_FLOWS),
            tolerance_pct=fx.TOLERANCE_PERCENT,
        ),
        Benchmark(
            name="synthetic_15yr_gap",
            description="Same record with one missing day in water year 1998",
            flows=with_gap,
            expected_parameters=dict(fx.EXPECTED_PARAMETERS_ONE_DROPPED),
            expected_design_flows=dict(fx.EXPECTED_DESIGN_FLOWS_ONE_DROPPED),
            tolerance_pct=fx.TOLERANCE_PERCENT,
        ),
        Benchmark(
            name="synthetic_15yr_zero",
            description="Same record with a zero-flow dip in water year 1998",
            flows=with_zero,
            expected_parameters=dict(fx.EXPECTED_PARAMETERS_ONE_DROPPED),
            expected_design_flows=dict(fx.EXPECTED_DESIGN_FLOWS_ONE_DROPPED),
            tolerance_pct=fx.TOLERANCE_PERCENT,
        ),
        Benchmark(
            name="constant_20yr",
            description="20 water years of constant flow 100 (zero variance)",
            flows=fx.constant_daily_flows(1991, 2010, flow=100.0),
            expected_parameters={"std_log": 0.0, "n_usable": 20, "n_candidate": 20},
            expected_design_flows={10: 100.0},
            tolerance_pct=0.0,
        ),
    ]


# Registry of available benchmarks
BENCHMARKS: dict[str, Benchmark] = {}


def register_benchmarks() -> None:
    """Populate the BENCHMARKS registry with all available benchmarks."""
    for benchmark in _create_synthetic_benchmarks():
        BENCHMARKS.setdefault(benchmark.name, benchmark)


def run_all_benchmarks() -> dict[str, ComparisonResult]:
    """Run all registered benchmarks against expected values.

    Returns
    -------
    dict[str, ComparisonResult]
        Benchmark name to comparison result mapping.
    """
    register_benchmarks()
    results: dict[str, ComparisonResult] = {}

    for name, benchmark in BENCHMARKS.items():
        logger.info("Running benchmark: %s", name)
        try:
            results[name] = benchmark.validate_against_expected()
        except Exception as e:
            logger.error("Benchmark '%s' failed: %s", name, e)
            results[name] = ComparisonResult(
                passed=False,
                summary=f"ERROR: {e}",
            )

    return results


def print_benchmark_report(results: dict[str, ComparisonResult]) -> None:
    """Print a formatted report of benchmark results."""
    print("\n" + "=" * 60)
    print("  dflowlib Benchmark Report")
    print("=" * 60)

    n_pass = sum(1 for r in results.values() if r.passed)
    n_total = len(results)

    for name, result in results.items():
        status = "PASS" if result.passed else "FAIL"
        print(f"\n  [{status}] {name}")
        print(f"         Max diff: {result.max_diff_pct:.3g}%")
        print(f"         {result.summary}")

    print("\n" + "-" * 60)
    print(f"  Total: {n_pass}/{n_total} passed")
    print("=" * 60 + "\n")

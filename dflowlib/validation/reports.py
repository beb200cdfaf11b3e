"""
Validation reports for design flow benchmarks.

Each benchmark is reported with its sample sizes (``N`` usable out of
``NY`` candidate water years and the unusable fraction ``F0``), the fitted
log-moments and one line per design flow statistic.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

from dflowlib.validation.comparisons import ComparisonResult

logger = logging.getLogger(__name__)


def _sample_sizes(computed: dict[str, Any]) -> Tuple[Optional[int], Optional[int], float]:
    """(N, NY, F0) of a computed benchmark output."""
    params = computed.get("parameters", {})
    n = params.get("n_usable")
    ny = params.get("n_candidate")
    f0 = (ny - n) / ny if n is not None and ny else float("nan")
    return n, ny, f0


def _statistic(computed: dict[str, Any], return_period: float) -> str:
    m = computed.get("averaging_period")
    if m is None:
        return f"R={return_period:g}"
    return f"{m}Q{return_period:g}"


def generate_text_report(results: dict[str, ComparisonResult]) -> str:
    """Generate a plain-text validation report.

    Parameters
    ----------
    results : dict[str, ComparisonResult]
        Benchmark name to comparison result mapping.

    Returns
    -------
    str
        One block per benchmark: status, sample sizes, log-moments and
        the design flows with their percent differences.
    """
    n_pass = sum(1 for r in results.values() if r.passed)
    lines = [f"DFLOW benchmark validation: {n_pass} of {len(results)} passed", ""]

    for name, result in results.items():
        lines.append(f"{'PASS' if result.passed else 'FAIL'}  {name}")
        computed = result.computed
        if not computed:
            lines += [f"      {result.summary}", ""]
            continue

        n, ny, f0 = _sample_sizes(computed)
        params = computed.get("parameters", {})
        lines.append(f"      N={n} of NY={ny} water years, F0={f0:.4f}")
        lines.append(
            "      ln-moments "
            f"U={params.get('mean_log', float('nan')):.6f} "
            f"S={params.get('std_log', float('nan')):.6f} "
            f"G={params.get('skew', float('nan')):.6f}"
        )
        worst = max(result.parameter_diffs.values(), default=0.0)
        lines.append(
            f"      worst parameter diff {worst:.3g}% (tolerance {result.tolerance_pct:g}%)"
        )

        flows = computed.get("design_flows", {})
        for r, diff in sorted(result.design_flow_diffs.items()):
            lines.append(f"      {_statistic(computed, r):>8} {flows[r]:>12.4f}  diff {diff:.3g}%")
        lines.append("")

    return "\n".join(lines)


def generate_json_report(results: dict[str, ComparisonResult]) -> str:
    """Generate a JSON validation report.

    Design flows are keyed by statistic name (e.g. ``"7Q10"``).
    """
    benchmarks: dict[str, Any] = {}

    for name, result in results.items():
        entry: dict[str, Any] = {
            "passed": result.passed,
            "summary": result.summary,
            "tolerance_pct": result.tolerance_pct,
            "max_diff_pct": result.max_diff_pct,
        }
        computed = result.computed
        if computed:
            n, ny, f0 = _sample_sizes(computed)
            flows = computed.get("design_flows", {})
            entry.update(
                n_usable=n,
                n_candidate=ny,
                f0=f0,
                parameter_diffs=dict(result.parameter_diffs),
                design_flows={
                    _statistic(computed, r): {
                        "return_period": r,
                        "design_flow": flows.get(r),
                        "diff_pct": diff,
                    }
                    for r, diff in result.design_flow_diffs.items()
                },
            )
        benchmarks[name] = entry

    logger.debug("JSON report for %d benchmarks", len(results))
    return json.dumps(
        {
            "passed": sum(1 for r in results.values() if r.passed),
            "total": len(results),
            "benchmarks": benchmarks,
        },
        indent=2,
    )

"""
Comparison of computed design flow results against reference values.

Reports per-field percent differences with separate tolerances for the
fitted log-moments and the design flows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ReferenceValues:
    """Expected results of a design flow analysis.

    Parameters
    ----------
    parameters : dict[str, float]
        Expected fit quantities (``mean_log``, ``std_log``, ``skew``,
        ``n_usable``, ``n_candidate``).
    design_flows : dict[float, float]
        Expected return period to design flow mapping.
    """

    parameters: dict[str, float] = field(default_factory=dict)
    design_flows: dict[float, float] = field(default_factory=dict)


@dataclass
class ComparisonResult:
    """Result of comparing computed and reference analyses.

    Parameters
    ----------
    passed : bool
        True if all differences are within tolerance.
    tolerance_pct : float
        Tolerance threshold used for design flows.
    parameter_diffs : dict[str, float]
        Parameter name to percent difference mapping.
    design_flow_diffs : dict[float, float]
        Return period to percent difference mapping.
    max_diff_pct : float
        Maximum percent difference across all comparisons.
    summary : str
        Human-readable one-line summary of comparison.
    computed : dict
        The computed output that was compared (empty if the run failed).
    """

    passed: bool = False
    tolerance_pct: float = 1.0
    parameter_diffs: dict[str, float] = field(default_factory=dict)
    design_flow_diffs: dict[float, float] = field(default_factory=dict)
    max_diff_pct: float = 0.0
    summary: str = ""
    computed: dict[str, Any] = field(default_factory=dict)


def _pct_diff(native_val: float, ref_val: float) -> float:
    """Absolute percent difference; 0.0 if both values are zero."""
    if ref_val == 0.0:
        if native_val == 0.0:
            return 0.0
        return 100.0
    return abs((native_val - ref_val) / ref_val) * 100.0


class DesignFlowComparator:
    """Compare a computed design flow analysis against reference values.

    Parameters
    ----------
    tolerance_pct : float
        Tolerance for design flow comparisons.
    parameter_tolerance_pct : float
        Tolerance for fit parameter comparisons.
    """

    def __init__(self, tolerance_pct: float = 0.1, parameter_tolerance_pct: float = 0.1) -> None:
        self.tolerance_pct = tolerance_pct
        self.parameter_tolerance_pct = parameter_tolerance_pct

    def compare(self, native: dict[str, Any], reference: ReferenceValues) -> ComparisonResult:
        """Compare computed output against a reference.

        Parameters
        ----------
        native : dict
            Computed output with keys 'parameters' and 'design_flows'.
        reference : ReferenceValues
            Expected values.

        Returns
        -------
        ComparisonResult
        """
        param_diffs = self.compare_parameters(native, reference)
        flow_diffs = self.compare_design_flows(native, reference)

        all_diffs = list(param_diffs.values()) + list(flow_diffs.values())
        max_diff = max(all_diffs) if all_diffs else 0.0

        params_ok = all(d <= self.parameter_tolerance_pct for d in param_diffs.values())
        flows_ok = all(d <= self.tolerance_pct for d in flow_diffs.values())
        passed = params_ok and flows_ok

        status = "PASS" if passed else "FAIL"
        summary = (
            f"{status}: max diff {max_diff:.3g}% "
            f"(params={len(param_diffs)}, design flows={len(flow_diffs)})"
        )

        return ComparisonResult(
            passed=passed,
            tolerance_pct=self.tolerance_pct,
            parameter_diffs=param_diffs,
            design_flow_diffs=flow_diffs,
            max_diff_pct=max_diff,
            summary=summary,
            computed=native,
        )

    def compare_parameters(self, native: dict[str, Any], ref: ReferenceValues) -> dict[str, float]:
        diffs: dict[str, float] = {}
        native_params = native.get("parameters", {})

        for key, ref_val in ref.parameters.items():
            if key in native_params:
                diffs[key] = _pct_diff(native_params[key], ref_val)
            else:
                logger.debug("Parameter '%s' not in computed output, skipping", key)

        return diffs

    def compare_design_flows(
        self, native: dict[str, Any], ref: ReferenceValues
    ) -> dict[float, float]:
        diffs: dict[float, float] = {}
        native_flows = native.get("design_flows", {})

        for r, ref_val in ref.design_flows.items():
            if r in native_flows:
                diffs[r] = _pct_diff(native_flows[r], ref_val)
            else:
                logger.debug("Return period %s not in computed design flows, skipping", r)

        return diffs

"""
Validation module for dflowlib.

Provides a comparison engine, reference benchmarks, and reporting for
validating the design flow pipeline against hand-computed results.
"""

from dflowlib.validation.comparisons import (
    ComparisonResult,
    DesignFlowComparator,
    ReferenceValues,
)

__all__ = [
    "ComparisonResult",
    "DesignFlowComparator",
    "ReferenceValues",
]

"""Tests for benchmark framework."""

from __future__ import annotations

import pytest

from dflowlib.validation import fixtures as fx
from dflowlib.validation.benchmarks import (
    BENCHMARKS,
    Benchmark,
    register_benchmarks,
    run_all_benchmarks,
)


class TestBenchmark:
    """Tests for Benchmark class."""

    def test_register_benchmarks(self) -> None:
        """register_benchmarks populates the registry."""
        register_benchmarks()
        for name in ("synthetic_15yr", "synthetic_15yr_gap", "synthetic_15yr_zero", "constant_20yr"):
            assert name in BENCHMARKS

    def test_register_is_idempotent(self) -> None:
        """Registering twice keeps the existing entries."""
        register_benchmarks()
        before = dict(BENCHMARKS)
        register_benchmarks()
        assert all(BENCHMARKS[name] is bm for name, bm in before.items())

    def test_run_native(self) -> None:
        """run_native returns fit parameters and design flows."""
        bm = Benchmark(
            name="simple_test",
            flows=fx.synthetic_daily_flows(),
            expected_design_flows={10: 0.0},
        )
        result = bm.run_native()
        assert result["parameters"]["n_usable"] == 15
        assert result["design_flows"][10] == pytest.approx(fx.EXPECTED_DESIGN_FLOWS[10])

    def test_validate_detects_mismatch(self) -> None:
        """A wrong expected design flow fails validation."""
        bm = Benchmark(
            name="wrong",
            flows=fx.synthetic_daily_flows(),
            expected_design_flows={10: 6.0},
            tolerance_pct=1.0,
        )
        result = bm.validate_against_expected()
        assert result.passed is False
        assert result.design_flow_diffs[10] > 5.0

    @pytest.mark.parametrize(
        "name", ["synthetic_15yr", "synthetic_15yr_gap", "synthetic_15yr_zero", "constant_20yr"]
    )
    def test_registered_benchmark_passes(self, name: str) -> None:
        """Each shipped benchmark reproduces its hand-computed values."""
        register_benchmarks()
        result = BENCHMARKS[name].validate_against_expected()
        assert result.passed, result.summary

    def test_run_all_benchmarks(self) -> None:
        """run_all_benchmarks processes all registered benchmarks."""
        results = run_all_benchmarks()
        assert set(results) >= {"synthetic_15yr", "constant_20yr"}
        assert all(r.passed for r in results.values())

    def test_run_all_reports_errors(self, monkeypatch) -> None:
        """A benchmark that raises is reported as a failure, not propagated."""
        register_benchmarks()
        broken = Benchmark(
            name="broken",
            flows=fx.constant_daily_flows(2000, 2000),
            expected_design_flows={10: 100.0},
        )
        monkeypatch.setitem(BENCHMARKS, "broken", broken)
        results = run_all_benchmarks()
        assert results["broken"].passed is False
        assert results["broken"].summary.startswith("ERROR")

"""Tests for multi-station batch evaluation."""

import numpy as np
import pandas as pd
import pytest

from dflowlib import DFlowConfig, batch_summary_table, run_multi_site
from dflowlib.validation import fixtures as fx


@pytest.fixture
def stations():
    gappy = fx.synthetic_daily_flows()
    gappy.loc[pd.Timestamp(fx.GAP_DATE)] = np.nan
    return {
        "01000001": fx.synthetic_daily_flows(),
        "01000002": gappy,
        "01000003": fx.constant_daily_flows(2000, 2000),
    }


class TestRunMultiSite:
    def test_results_per_station(self, stations):
        results = run_multi_site(stations)
        assert set(results) == set(stations)

        ok = results["01000001"]
        assert ok["n"] == 15
        assert ok["n_candidate"] == 15
        assert ok["dropped_years"] == []
        assert ok["design_flows"][10.0] == pytest.approx(fx.EXPECTED_DESIGN_FLOWS[10])

    def test_gappy_station(self, stations):
        result = run_multi_site(stations)["01000002"]
        assert result["n"] == 14
        assert result["dropped_years"] == [fx.DROPPED_YEAR]

    def test_failure_is_isolated(self, stations):
        result = run_multi_site(stations)["01000003"]
        assert set(result) == {"error"}
        assert "water years" in result["error"]

    def test_custom_return_periods(self, stations):
        results = run_multi_site(
            {"a": stations["01000001"]},
            config=DFlowConfig(averaging_period=7),
            return_periods=[2, 20],
        )
        flows = results["a"]["design_flows"]
        assert flows[2] == pytest.approx(fx.EXPECTED_DESIGN_FLOWS[2])
        assert flows[20] == pytest.approx(fx.EXPECTED_DESIGN_FLOWS[20])


class TestBatchSummaryTable:
    def test_columns(self, stations):
        table = batch_summary_table(run_multi_site(stations))
        assert list(table["Site"]) == list(stations)
        for col in ("N", "NY", "Mean (ln)", "Std (ln)", "Skew", "7Q10", "Error"):
            assert col in table.columns

    def test_error_row(self, stations):
        table = batch_summary_table(run_multi_site(stations)).set_index("Site")
        assert pd.isna(table.loc["01000001", "Error"])
        assert isinstance(table.loc["01000003", "Error"], str)
        assert pd.isna(table.loc["01000003", "7Q10"])

    def test_averaging_period_in_column_names(self, stations):
        results = run_multi_site(
            {"a": stations["01000001"]}, config=DFlowConfig(averaging_period=7, return_period=2)
        )
        table = batch_summary_table(results, averaging_period=30)
        assert "30Q2" in table.columns

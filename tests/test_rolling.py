"""Tests for the m-day rolling averager."""

import numpy as np
import pandas as pd
import pytest

from dflowlib import add_rolling_mean, build_calendar, rolling_mean


class TestRollingMean:
    def test_left_aligned(self):
        result = rolling_mean([1.0, 2.0, 3.0, 4.0, 5.0], 3)
        np.testing.assert_allclose(result[:3], [2.0, 3.0, 4.0])

    def test_incomplete_tail_windows_missing(self):
        result = rolling_mean([1.0, 2.0, 3.0, 4.0, 5.0], 3)
        assert np.isnan(result[3:]).all()

    def test_single_day_window_is_identity(self):
        flow = np.array([3.0, np.nan, 7.5])
        np.testing.assert_array_equal(rolling_mean(flow, 1), flow)

    def test_gap_propagates(self):
        """A single missing day removes every window that covers it."""
        flow = np.arange(1.0, 11.0)
        flow[5] = np.nan
        result = rolling_mean(flow, 3)
        assert np.isnan(result[3:6]).all()
        assert not np.isnan(result[:3]).any()
        np.testing.assert_allclose(result[6:8], [8.0, 9.0])

    def test_window_longer_than_record(self):
        assert np.isnan(rolling_mean([1.0, 2.0], 5)).all()

    def test_constant_flow_exact(self):
        assert (rolling_mean(np.full(30, 100.0), 7)[:24] == 100.0).all()


class TestAddRollingMean:
    def test_windows_cross_water_years(self):
        """The last September windows average into October of the next water year."""
        dates = pd.date_range("1990-10-01", "1992-10-06")
        flow = pd.Series(np.where(dates < pd.Timestamp("1991-10-01"), 10.0, 20.0), index=dates)
        calendar = add_rolling_mean(build_calendar(flow, 7), 7)

        sept_28 = calendar.loc[calendar["date"] == pd.Timestamp("1991-09-28")].iloc[0]
        assert sept_28["water_year"] == 1991
        assert sept_28["m_avg"] == pytest.approx((3 * 10.0 + 4 * 20.0) / 7)

    def test_does_not_modify_input(self):
        flow = pd.Series(1.0, index=pd.date_range("1990-10-01", "1991-10-06"))
        calendar = build_calendar(flow, 7)
        add_rolling_mean(calendar, 7)
        assert "m_avg" not in calendar.columns

    def test_last_in_period_window_complete(self):
        flow = pd.Series(1.0, index=pd.date_range("1990-10-01", "1991-10-06"))
        calendar = add_rolling_mean(build_calendar(flow, 7), 7)
        in_period = calendar.loc[calendar["in_period"], "m_avg"]
        assert in_period.notna().all()

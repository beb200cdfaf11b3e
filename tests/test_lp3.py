"""Tests for annual minima and the log-Pearson Type III estimator."""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from dflowlib import (
    DegenerateStatisticsError,
    InsufficientDataError,
    annual_minima,
    design_flow,
    fit_log_pearson3,
)
from dflowlib.validation import fixtures as fx


@pytest.fixture
def reference_minima():
    return pd.Series(fx.REFERENCE_MINIMA, dtype=float)


class TestAnnualMinima:
    def test_minimum_per_water_year(self):
        filtered = pd.DataFrame(
            {"water_year": [2000, 2000, 2001, 2001, 2001], "m_avg": [5.0, 3.0, 9.0, 7.0, 8.0]}
        )
        minima = annual_minima(filtered)
        assert minima.to_dict() == {2000: 3.0, 2001: 7.0}

    def test_sorted_by_flow(self):
        filtered = pd.DataFrame({"water_year": [2000, 2001, 2002], "m_avg": [5.0, 1.0, 3.0]})
        assert list(annual_minima(filtered).index) == [2001, 2002, 2000]


class TestFitLogPearson3:
    def test_hand_computed_moments(self, reference_minima):
        fit = fit_log_pearson3(reference_minima, n_candidate=15)
        assert fit.mean_log == pytest.approx(fx.EXPECTED_PARAMETERS["mean_log"], rel=1e-12)
        assert fit.std_log == pytest.approx(fx.EXPECTED_PARAMETERS["std_log"], rel=1e-12)
        assert fit.skew == pytest.approx(fx.EXPECTED_PARAMETERS["skew"], rel=1e-10)
        assert fit.n_usable == fit.n_candidate == fit.n_kept == 15
        assert fit.f0 == 0.0

    def test_skew_is_bias_corrected_sample_skew(self, reference_minima):
        fit = fit_log_pearson3(reference_minima, n_candidate=15)
        expected = stats.skew(np.log(reference_minima.to_numpy()), bias=False)
        assert fit.skew == pytest.approx(expected, rel=1e-10)

    def test_zero_minimum_excluded_but_counted(self, reference_minima):
        minima = reference_minima.copy()
        minima[fx.DROPPED_YEAR] = 0.0
        fit = fit_log_pearson3(minima, n_candidate=15)
        assert fit.n_kept == 15
        assert fit.n_usable == 14
        assert fit.f0 == pytest.approx(1 / 15)
        assert fit.mean_log == pytest.approx(fx.EXPECTED_PARAMETERS_ONE_DROPPED["mean_log"])

    def test_fewer_than_three_usable(self):
        with pytest.raises(InsufficientDataError) as exc:
            fit_log_pearson3(pd.Series({2000: 1.0, 2001: 2.0, 2002: 0.0}), n_candidate=5)
        assert exc.value.n_usable == 2
        assert exc.value.n_candidate == 5

    def test_no_candidate_years(self):
        with pytest.raises(InsufficientDataError):
            fit_log_pearson3(pd.Series(dtype=float), n_candidate=0)

    def test_zero_variance(self):
        fit = fit_log_pearson3(pd.Series({2000: 4.0, 2001: 4.0, 2002: 4.0}), n_candidate=3)
        assert fit.std_log == 0.0
        assert fit.is_degenerate


class TestDesignFlow:
    @pytest.mark.parametrize("r", sorted(fx.EXPECTED_DESIGN_FLOWS))
    def test_hand_computed_design_flows(self, reference_minima, r):
        fit = fit_log_pearson3(reference_minima, n_candidate=15)
        result = design_flow(fit, r, 7)
        assert result.design_flow == pytest.approx(fx.EXPECTED_DESIGN_FLOWS[r], rel=1e-10)

    def test_missing_year_adjusts_probability(self, reference_minima):
        minima = reference_minima.drop(fx.DROPPED_YEAR)
        fit = fit_log_pearson3(minima, n_candidate=15)
        result = design_flow(fit, 10, 7, dropped_years=[fx.DROPPED_YEAR])
        assert result.probability == pytest.approx(15 / 420)
        assert result.design_flow == pytest.approx(
            fx.EXPECTED_DESIGN_FLOWS_ONE_DROPPED[10], rel=1e-10
        )
        assert result.dropped_years == [fx.DROPPED_YEAR]
        assert result.label == "7Q10"

    def test_design_flow_never_increases_with_return_period(self, reference_minima):
        fit = fit_log_pearson3(reference_minima, n_candidate=15)
        assert fit.skew < 0
        flows = [design_flow(fit, r, 7).design_flow for r in (1.5, 2, 5, 10, 20, 50, 100)]
        assert all(a >= b for a, b in zip(flows, flows[1:]))

    def test_monotonic_for_positive_skew(self):
        minima = pd.Series(dict(zip(range(2000, 2007), [1.0, 1.2, 1.3, 1.5, 2.0, 3.0, 8.0])))
        fit = fit_log_pearson3(minima, n_candidate=7)
        assert fit.skew > 0
        flows = [design_flow(fit, r, 7).design_flow for r in (2, 5, 10, 20, 50)]
        assert all(a >= b for a, b in zip(flows, flows[1:]))

    def test_zero_skew_is_degenerate(self):
        """Log minima symmetric about their mean have zero skew."""
        fit = fit_log_pearson3(pd.Series({2000: 0.5, 2001: 1.0, 2002: 2.0}), n_candidate=3)
        assert fit.skew == 0.0
        with pytest.raises(DegenerateStatisticsError) as exc:
            design_flow(fit, 10, 7)
        assert exc.value.skew == 0.0

    @pytest.mark.parametrize(
        "values",
        [
            [3.0, 15.0, 75.0],
            [2.0, 6.0, 18.0],
            [0.7 * 5.3**k for k in range(4)],
        ],
    )
    def test_rounding_level_skew_is_degenerate(self, values):
        """Geometric minima have symmetric logs; a skew left over from rounding is zero."""
        minima = pd.Series(dict(zip(range(2000, 2000 + len(values)), values)))
        fit = fit_log_pearson3(minima, n_candidate=len(values))
        assert abs(fit.skew) < 1e-8
        with pytest.raises(DegenerateStatisticsError):
            design_flow(fit, 10, 7)

    def test_infeasible_return_period(self, reference_minima):
        """With 40% of years unusable a 10-year event is not estimable."""
        fit = fit_log_pearson3(reference_minima, n_candidate=25)
        with pytest.raises(DegenerateStatisticsError) as exc:
            design_flow(fit, 10, 7)
        assert exc.value.probability <= 0

    def test_zero_variance_returns_common_minimum(self):
        fit = fit_log_pearson3(pd.Series({2000: 4.0, 2001: 4.0, 2002: 4.0, 2003: 0.0}), 4)
        result = design_flow(fit, 2, 7)
        assert result.design_flow == 4.0
        assert result.k == 0.0

    def test_deterministic(self, reference_minima):
        fit = fit_log_pearson3(reference_minima, n_candidate=15)
        assert design_flow(fit, 10, 7).design_flow == design_flow(fit, 10, 7).design_flow

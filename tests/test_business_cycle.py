"""
Tests for the HP business-cycle pipeline.
"""
import numpy as np
import pandas as pd
import pytest

import gdpcycle.business_cycle as business_cycle
from conftest import quarter_headers, synthetic_series, wide_table
from gdpcycle.business_cycle import analyze_business_cycle, real_cycle_inputs
from gdpcycle.config import AnalysisConfig
from gdpcycle.data_loader import GDPTable
from gdpcycle.errors import (
    ConfigurationError, InvalidBaseValueError, RangeError, RequiredSeriesMissingError,
)


def _table(series, headers):
    return GDPTable(wide_table(series, headers), source="synthetic")


@pytest.mark.integration
class TestAnalyzeBusinessCycle:

    def test_end_to_end(self, gdp_table, config):
        result = analyze_business_cycle(gdp_table, config)
        assert len(result.cycles) == 25
        assert list(result.cycles.columns) == ["gdp", "consumption", "investment"]
        assert [s.series for s in result.statistics] == ["GDP", "Consumption", "Investment"]
        assert result.statistics[0].correlation_with_gdp == 1.0
        assert result.sd_gdp > 0
        assert result.span == "2019-Q1 to 2025-Q1"
        assert result.base_label == "2019 1Q"
        assert result.thresholds["shock"] == pytest.approx(2 * result.sd_gdp)

    def test_real_gdp_equals_nominal_at_base(self, gdp_table, config):
        real, base_label = real_cycle_inputs(gdp_table, config)
        gdp0 = synthetic_series()["GDP At Current Market Prices"][0]
        assert base_label == "2019 1Q"
        assert real["gdp"].iloc[0] == pytest.approx(gdp0)
        assert real["Deflator_Rebased"].iloc[0] == pytest.approx(100.0)

    def test_flat_deflator_six_quarters(self):
        nominal = np.array([100, 102, 105, 103, 108, 110], dtype=float)
        series = {
            "GDP At Current Market Prices": nominal,
            "Private Consumption Expenditure": 0.5 * nominal,
            "Gross Fixed Capital Formation": 0.2 * nominal,
            "Changes In Inventories": np.zeros(6),
            "GDP Deflator": np.full(6, 100.0),
        }
        table = _table(series, quarter_headers(6))
        result = analyze_business_cycle(table, AnalysisConfig(base_quarter="2019 1Q"))
        np.testing.assert_allclose(result.real["gdp"].to_numpy(), nominal)
        assert np.any(np.abs(result.cycles["gdp"].to_numpy()) > 1e-6)

    def test_two_quarters_fall_back_to_zero_cycle(self):
        series = {
            "GDP At Current Market Prices": np.array([10.0, 10.0]),
            "Private Consumption Expenditure": np.array([5.0, 5.0]),
            "Gross Fixed Capital Formation": np.array([2.0, 2.0]),
            "GDP Deflator": np.array([50.0, 100.0]),
        }
        table = _table(series, quarter_headers(2))
        result = analyze_business_cycle(table, AnalysisConfig(base_quarter="2019 1Q"))
        np.testing.assert_allclose(result.real["gdp"].to_numpy(), [10.0, 5.0])
        np.testing.assert_array_equal(result.cycles["gdp"].to_numpy(), [0.0, 0.0])
        assert result.turning_points.peaks.size == 0
        assert result.shocks == []

    def test_missing_quarter_is_dropped(self, config):
        series = synthetic_series()
        series["GDP At Current Market Prices"][5] = np.nan
        result = analyze_business_cycle(_table(series, quarter_headers()), config)
        assert len(result.cycles) == 24
        assert result.cycles.notna().all().all()


@pytest.mark.integration
class TestFailures:

    def test_missing_consumption_raises_before_computation(self, config, monkeypatch):
        series = synthetic_series()
        del series["Private Consumption Expenditure"]

        def _forbidden(*args, **kwargs):
            raise AssertionError("numeric work started")

        monkeypatch.setattr(business_cycle, "build_real_series", _forbidden)
        monkeypatch.setattr(business_cycle, "log_cycle_pct", _forbidden)
        with pytest.raises(RequiredSeriesMissingError):
            analyze_business_cycle(_table(series, quarter_headers()), config)

    def test_zero_deflator_at_base(self, config):
        series = synthetic_series()
        series["GDP Deflator"][0] = 0.0
        with pytest.raises(InvalidBaseValueError):
            analyze_business_cycle(_table(series, quarter_headers()), config)

    def test_base_quarter_outside_range(self, gdp_table):
        with pytest.raises(RangeError, match="2019 1Q to 2025 1Q"):
            analyze_business_cycle(gdp_table, AnalysisConfig(base_quarter="1990 1Q"))

    def test_unparseable_base_quarter(self, gdp_table):
        with pytest.raises(ConfigurationError):
            analyze_business_cycle(gdp_table, AnalysisConfig(base_quarter="first quarter"))

    def test_missing_inventories_only_warns(self, config, caplog):
        series = synthetic_series()
        del series["Changes In Inventories"]
        with caplog.at_level("WARNING"):
            result = analyze_business_cycle(_table(series, quarter_headers()), config)
        assert len(result.cycles) == 25
        assert "inventories" in caplog.text

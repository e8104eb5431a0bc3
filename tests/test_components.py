"""
Tests for expenditure components.
"""
import numpy as np
import pytest

from conftest import quarter_headers, synthetic_series, wide_table
from gdpcycle.components import gdp_components, nominal_and_real_gdp
from gdpcycle.data_loader import GDPTable
from gdpcycle.errors import RequiredSeriesMissingError


@pytest.mark.unit
class TestGDPComponents:

    def test_direct_net_exports(self, gdp_table):
        comp = gdp_components(gdp_table)
        assert list(comp.columns) == ["GDP", "C", "I", "G", "NX"]
        series = synthetic_series()
        expected_i = series["Gross Fixed Capital Formation"] + series["Changes In Inventories"]
        np.testing.assert_allclose(comp["I"].to_numpy(), expected_i, rtol=1e-7)
        np.testing.assert_allclose(comp["NX"].to_numpy(), 0.23 * comp["GDP"].to_numpy(), rtol=1e-6)

    def test_exports_minus_imports(self):
        series = synthetic_series(8)
        nx = series.pop("Net Exports Of Goods And Services")
        series["Exports Of Goods And Services"] = 1.5 * nx
        series["Imports Of Goods And Services"] = 1.2 * nx
        table = GDPTable(wide_table(series, quarter_headers(8)))
        comp = gdp_components(table)
        np.testing.assert_allclose(comp["NX"].to_numpy(), 0.3 * nx, rtol=1e-6)

    def test_no_trade_rows_raise(self):
        series = synthetic_series(8)
        del series["Net Exports Of Goods And Services"]
        table = GDPTable(wide_table(series, quarter_headers(8)))
        with pytest.raises(RequiredSeriesMissingError, match="Net exports"):
            gdp_components(table)

    def test_nominal_and_real(self, gdp_table, config):
        nominal, real, base_label = nominal_and_real_gdp(gdp_table, config)
        assert base_label == "2019 1Q"
        assert real.iloc[0] == pytest.approx(nominal.iloc[0])
        assert (real.iloc[1:] < nominal.iloc[1:]).all()

"""
Tests for annual-to-quarterly interpolation.
"""
import numpy as np
import pandas as pd
import pytest

from gdpcycle.errors import DataFormatError
from gdpcycle.interpolation import annual_to_quarterly, load_annual_series, overlapping_years
from gdpcycle.quarters import build_quarter_index


def _quarter_ends(first_year, last_year):
    return build_quarter_index(
        [f"{y} {q}Q" for y in range(first_year, last_year + 1) for q in range(1, 5)]
    ).dates


@pytest.mark.unit
class TestAnnualToQuarterly:

    def test_constant_within_year(self):
        out = annual_to_quarterly([2020, 2021], [100.0, 200.0], _quarter_ends(2020, 2021))
        np.testing.assert_allclose(out.to_numpy(), [100.0] * 4 + [200.0] * 4)

    def test_ramps_between_q4_and_next_q1(self):
        dates = pd.DatetimeIndex(["2020-12-31", "2021-02-14", "2021-03-31"])
        out = annual_to_quarterly([2020, 2021], [100.0, 200.0], dates)
        assert out.iloc[0] == pytest.approx(100.0)
        assert 100.0 < out.iloc[1] < 200.0
        assert out.iloc[2] == pytest.approx(200.0)

    def test_extrapolates_outside_annual_range(self):
        dates = pd.DatetimeIndex(["2019-12-31", "2022-03-31"])
        out = annual_to_quarterly([2020, 2021], [100.0, 200.0], dates)
        assert np.isfinite(out.to_numpy()).all()
        assert out.iloc[0] == pytest.approx(100.0)
        assert out.iloc[1] == pytest.approx(200.0)

    def test_one_output_per_target_quarter(self):
        dates = _quarter_ends(2019, 2024)
        out = annual_to_quarterly(range(2019, 2025), np.arange(6.0), dates)
        assert len(out) == len(dates)
        assert out.index.equals(dates)


@pytest.mark.unit
class TestAnnualInputs:

    def test_load_by_position(self, population_csv):
        employment = load_annual_series(population_csv, 2, "Employment")
        assert employment.loc[2018] == pytest.approx(3600.0)
        assert employment.name == "Employment"

    def test_invalid_years_raise(self, tmp_path):
        fp = tmp_path / "bad.csv"
        fp.write_text("Year,Population\n19,5\n2020,6\n")
        with pytest.raises(DataFormatError, match="Invalid annual data structure"):
            load_annual_series(fp, 1)

    def test_missing_column_raises(self, population_csv):
        with pytest.raises(DataFormatError):
            load_annual_series(population_csv, 5)

    def test_overlap_restricts_to_sample_years(self):
        annual = pd.Series([1.0, 2.0, 3.0, 4.0], index=[2018, 2019, 2020, 2021], name="Pop")
        overlap = overlapping_years(annual, [2019, 2019, 2020, 2020])
        assert list(overlap.index) == [2019, 2020]

    def test_too_little_overlap_names_ranges(self):
        annual = pd.Series([1.0, 2.0], index=[1990, 1991], name="Population")
        with pytest.raises(DataFormatError) as exc:
            overlapping_years(annual, [2020, 2021])
        assert "1990-1991" in str(exc.value)
        assert "2020-2021" in str(exc.value)

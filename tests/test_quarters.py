"""
Tests for quarter header parsing and the chronological quarter index.
"""
import numpy as np
import pandas as pd
import pytest

from gdpcycle.errors import ConfigurationError, DataFormatError, RangeError
from gdpcycle.quarters import QuarterLabel, build_quarter_index, parse_quarter_label


@pytest.mark.unit
class TestParseQuarterLabel:
    """Every accepted header syntax maps to the same canonical label."""

    @pytest.mark.parametrize("text", [
        "2023Q1", "2023q1", "2023 1Q", "2023 Q1",
        "2023-Q1", "2023_Q1", "2023/Q1", "2023-1Q", "20231Q", "x20231Q", "  2023 1Q ",
    ])
    def test_syntaxes_canonicalise(self, text):
        label = parse_quarter_label(text)
        assert label == QuarterLabel(2023, 1)
        assert label.canonical == "2023 1Q"

    @pytest.mark.parametrize("text", ["Data Series", "2023Q5", "2023 0Q", "23Q1", "", "2023"])
    def test_non_quarters_return_none(self, text):
        assert parse_quarter_label(text) is None

    def test_end_date_is_last_day_of_quarter(self):
        assert QuarterLabel(2024, 1).end_date == pd.Timestamp("2024-03-31")
        assert QuarterLabel(2024, 4).end_date == pd.Timestamp("2024-12-31")


@pytest.mark.unit
class TestBuildQuarterIndex:

    def test_reverse_chronological_headers_are_sorted(self):
        headers = ["2024 2Q", "2024 1Q", "2023 4Q"]
        idx = build_quarter_index(headers)
        assert idx.canonical == ["2023 4Q", "2024 1Q", "2024 2Q"]
        np.testing.assert_array_equal(idx.columns, [2, 1, 0])
        assert idx.first == "2023 4Q"
        assert idx.last == "2024 2Q"

    def test_mixed_syntaxes_and_junk_columns(self):
        headers = ["Unit", "2020Q2", "2020 1Q", "notes"]
        idx = build_quarter_index(headers)
        np.testing.assert_array_equal(idx.valid, [False, True, True, False])
        assert idx.canonical == ["2020 1Q", "2020 2Q"]
        np.testing.assert_array_equal(idx.columns, [2, 1])

    def test_dates_are_strictly_increasing(self):
        idx = build_quarter_index(["2021Q3", "2020Q1", "2021Q1", "2020Q4"])
        assert idx.dates.is_monotonic_increasing
        assert idx.dates.is_unique
        assert idx.dates.name == "Quarter"

    def test_duplicate_quarter_keeps_first_column(self, caplog):
        with caplog.at_level("WARNING"):
            idx = build_quarter_index(["2020 1Q", "2020Q1", "2020 2Q"])
        assert len(idx) == 2
        np.testing.assert_array_equal(idx.columns, [0, 2])
        assert "Duplicate quarter header" in caplog.text

    def test_no_valid_headers_raises(self):
        with pytest.raises(DataFormatError, match="No valid quarter headers"):
            build_quarter_index(["Series", "Unit", "Notes"])


@pytest.mark.unit
class TestResolveBaseQuarter:

    @pytest.fixture
    def index(self):
        return build_quarter_index(["2015 1Q", "2014 4Q", "2014 3Q"])

    @pytest.mark.parametrize("base", ["2014 4Q", "2014Q4", "2014-Q4", "x20144Q"])
    def test_any_syntax_resolves(self, index, base):
        assert index.resolve(base) == 1

    def test_unparseable_base_is_configuration_error(self, index):
        with pytest.raises(ConfigurationError):
            index.resolve("Q4 of 2014")

    def test_out_of_range_base_names_range(self, index):
        with pytest.raises(RangeError) as exc:
            index.resolve("1990 1Q")
        message = str(exc.value)
        assert "1990 1Q" in message
        assert "2014 3Q" in message
        assert "2015 1Q" in message


@pytest.mark.unit
class TestUntil:

    def test_truncates_after_end_quarter(self):
        idx = build_quarter_index(["2025 1Q", "2024 4Q", "2024 3Q"])
        cut = idx.until("2024 4Q")
        assert cut.canonical == ["2024 3Q", "2024 4Q"]
        np.testing.assert_array_equal(cut.columns, [2, 1])
        assert cut.resolve("2024 4Q") == 1

    def test_nothing_to_cut_returns_same_index(self):
        idx = build_quarter_index(["2024 1Q", "2024 2Q"])
        assert idx.until("2030 1Q") is idx

    def test_end_before_sample_raises(self):
        idx = build_quarter_index(["2024 1Q", "2024 2Q"])
        with pytest.raises(RangeError, match="Sample end quarter 2000 1Q is before the data range") as exc:
            idx.until("2000 1Q")
        message = str(exc.value)
        assert "Base quarter" not in message
        assert "2024 1Q to 2024 2Q" in message
        assert exc.value.what == "Sample end quarter"

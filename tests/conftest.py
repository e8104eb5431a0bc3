"""
Shared fixtures: small synthetic national-accounts tables written to tmp_path.
"""
import numpy as np
import pandas as pd
import pytest

from gdpcycle.config import AnalysisConfig
from gdpcycle.data_loader import GDPTable

N_QUARTERS = 25  # 2019 1Q .. 2025 1Q


def quarter_headers(n=N_QUARTERS, start_year=2019):
    return [f"{start_year + i // 4} {i % 4 + 1}Q" for i in range(n)]


def synthetic_series(n=N_QUARTERS):
    t = np.arange(n, dtype=float)
    gdp = 100000.0 * np.exp(0.01 * t) * (1 + 0.02 * np.sin(2 * np.pi * t / 8))
    return {
        "GDP At Current Market Prices": gdp,
        "Private Consumption Expenditure": 0.40 * gdp,
        "Government Consumption Expenditure": 0.10 * gdp,
        "Gross Fixed Capital Formation": 0.25 * gdp * (1 + 0.05 * np.cos(2 * np.pi * t / 6)),
        "Changes In Inventories": 0.02 * gdp,
        "Net Exports Of Goods And Services": 0.23 * gdp,
        "GDP Deflator": 100.0 * np.exp(0.005 * t),
    }


def wide_table(series, headers, newest_first=True):
    """Label column plus one text column per quarter, comma thousands."""
    columns = list(headers)
    order = list(range(len(columns)))
    if newest_first:
        order = order[::-1]
    records = []
    for label, values in series.items():
        row = {"Data Series": label}
        for j in order:
            v = values[j]
            row[columns[j]] = "" if np.isnan(v) else f"{v:,.4f}"
        records.append(row)
    return pd.DataFrame(records, columns=["Data Series"] + [columns[j] for j in order])


@pytest.fixture
def gdp_frame():
    return wide_table(synthetic_series(), quarter_headers())


@pytest.fixture
def gdp_csv(tmp_path, gdp_frame):
    fp = tmp_path / "gdp.csv"
    gdp_frame.to_csv(fp, index=False)
    return fp


@pytest.fixture
def gdp_table(gdp_csv):
    return GDPTable.from_csv(gdp_csv)


@pytest.fixture
def population_csv(tmp_path):
    years = np.arange(2018, 2027)
    df = pd.DataFrame({
        "Year": years,
        "Population": 5_600_000 + 50_000 * (years - 2018),
        "Employment": 3_600.0 + 40.0 * (years - 2018),
    })
    fp = tmp_path / "population.csv"
    df.to_csv(fp, index=False)
    return fp


@pytest.fixture
def config():
    return AnalysisConfig(base_quarter="2019 1Q", sample_end="2024 4Q")

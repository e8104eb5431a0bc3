"""
interpolation.py
----------------
Annual-to-quarterly conversion of population and employment.

Each annual value is held at the four quarter-end dates of its year and
the resulting step series is linearly interpolated (and extrapolated)
onto the GDP quarter dates. Within a year the value is constant; across
a year boundary it ramps from Q4 to the next Q1.
"""

import logging

import numpy as np
import pandas as pd
from scipy.interpolate import interp1d

from gdpcycle.config import MIN_VALID_YEAR, QUARTERS_PER_YEAR
from gdpcycle.data_loader import read_text_table, to_numeric
from gdpcycle.errors import DataFormatError

logger = logging.getLogger(__name__)


def _day_number(dates) -> np.ndarray:
    return pd.DatetimeIndex(dates).to_numpy().astype("datetime64[D]").astype(float)


def load_annual_series(path, column: int, name: str = None) -> pd.Series:
    """
    Reads one annual column (positional) keyed by the year in column 0.

    Raises DataFormatError if years are missing or implausible.
    """
    df = read_text_table(path)
    if column >= df.shape[1]:
        raise DataFormatError(
            f"{path} has {df.shape[1]} columns; expected column {column + 1} "
            f"to hold {name or 'the annual series'}."
        )
    years = to_numeric(df.iloc[:, 0])
    values = to_numeric(df.iloc[:, column])
    if np.isnan(years).any() or (years < MIN_VALID_YEAR).any():
        raise DataFormatError(
            f"Invalid annual data structure in {path}. Expected years in column 1, "
            f"{name or 'values'} in column {column + 1}."
        )
    return pd.Series(values, index=pd.Index(years.astype(int), name="Year"),
                     name=name or df.columns[column])


def overlapping_years(annual: pd.Series, quarter_years) -> pd.Series:
    """Restricts ``annual`` to years present in the quarterly sample."""
    wanted = np.unique(np.asarray(quarter_years, dtype=int))
    overlap = annual.loc[annual.index.isin(wanted)]
    if len(overlap) < 2:
        raise DataFormatError(
            f"{annual.name} years ({annual.index.min()}-{annual.index.max()}) overlap "
            f"too little with GDP ({wanted.min()}-{wanted.max()}). Check data range."
        )
    return overlap


def annual_to_quarterly(years, values, dates) -> pd.Series:
    """
    Interpolates annual ``values`` onto quarter-end ``dates``.

    Parameters
    ----------
    years, values : array-like
        Annual observations, one value per year.
    dates : DatetimeIndex
        Target quarter-end dates.
    """
    years = np.asarray(years, dtype=int)
    values = np.asarray(values, dtype=float)
    n = years.size * QUARTERS_PER_YEAR

    step_x = np.empty(n, dtype=float)
    step_y = np.empty(n, dtype=float)
    for i, (yr, val) in enumerate(zip(years, values)):
        for q in range(QUARTERS_PER_YEAR):
            pos = i * QUARTERS_PER_YEAR + q
            q_end = pd.Timestamp(yr, 3 * (q + 1), 1) + pd.offsets.MonthEnd(0)
            step_x[pos] = _day_number([q_end])[0]
            step_y[pos] = val

    order = np.argsort(step_x, kind="stable")
    f = interp1d(step_x[order], step_y[order], kind="linear",
                 fill_value="extrapolate", assume_sorted=True)
    target = pd.DatetimeIndex(dates)
    return pd.Series(f(_day_number(target)), index=target)


def quarterly_from_annual(annual: pd.Series, index) -> pd.Series:
    """Overlap check plus interpolation onto a QuarterIndex."""
    overlap = overlapping_years(annual, index.years)
    quarterly = annual_to_quarterly(overlap.index, overlap.to_numpy(), index.dates)
    quarterly.name = annual.name
    logger.debug(
        "%s interpolated to %d quarters from %d annual observations",
        annual.name, len(quarterly), len(overlap),
    )
    return quarterly

"""
business_cycle.py
-----------------
HP-filter business-cycle analysis of real GDP, consumption and investment.

Pipeline:
    1. Quarter index from the table headers; base quarter resolved.
    2. Required rows located (deflator, nominal GDP, consumption, GFCF)
       before any numeric work; inventories optional.
    3. Deflator rebased to base = 100; nominal series deflated.
    4. Filtered to quarters where every real series and the deflator
       are present.
    5. HP filter (lambda = 1600) on log of each real series; cycles in
       % deviation from trend.
    6. Volatility, comovement with GDP, turning points and shock
       intervals on the unrounded GDP-cycle standard deviation.
"""

import logging
from dataclasses import dataclass

import pandas as pd

from gdpcycle.config import (
    CONTEXT_BAND_SD, HP_LAMBDA_QUARTERLY, PEAK_PROMINENCE_SD, SHOCK_THRESHOLD_SD,
)
from gdpcycle.cycle_stats import (
    compute_cycle_statistics, detect_turning_points, shock_intervals,
)
from gdpcycle.deflator import build_real_series, real_investment
from gdpcycle.filters import log_cycle_pct

logger = logging.getLogger(__name__)

SERIES = ("gdp", "consumption", "investment")


@dataclass
class BusinessCycleResult:
    base_label: str
    dates: pd.DatetimeIndex
    real: pd.DataFrame
    cycles: pd.DataFrame
    trends: pd.DataFrame
    statistics: list
    turning_points: object
    shocks: list
    sd_gdp: float

    @property
    def span(self) -> str:
        if len(self.dates) == 0:
            return ""
        first, last = self.dates[0], self.dates[-1]
        return f"{first.year}-Q{first.quarter} to {last.year}-Q{last.quarter}"

    @property
    def thresholds(self) -> dict:
        return {
            "context": CONTEXT_BAND_SD * self.sd_gdp,
            "shock": SHOCK_THRESHOLD_SD * self.sd_gdp,
            "prominence": PEAK_PROMINENCE_SD * self.sd_gdp,
        }


def locate_cycle_rows(table) -> dict:
    """Row positions of the series the analysis needs. Raises on any missing."""
    rows = {key: table.find_row(key) for key in ("deflator", "nominal_gdp", "consumption", "gfcf")}
    rows["inventories"] = table.find_optional_row("inventories")
    return rows


def real_cycle_inputs(table, config):
    """
    Real GDP, consumption and investment on the valid-quarter subsequence.

    Returns
    -------
    tuple : (pd.DataFrame, str)
        Columns 'gdp', 'consumption', 'investment', 'Deflator_Rebased';
        and the canonical base label.
    """
    index = table.quarter_index()
    base_idx = index.resolve(config.base_quarter)
    base_label = index.labels[base_idx].canonical
    rows = locate_cycle_rows(table)

    deflator = table.series(rows["deflator"], index)
    inventories = (
        table.series(rows["inventories"], index)
        if rows["inventories"] is not None else None
    )
    nominal = {
        "gdp": table.series(rows["nominal_gdp"], index),
        "consumption": table.series(rows["consumption"], index),
        "investment": real_investment(table.series(rows["gfcf"], index), inventories),
    }
    real = build_real_series(deflator, base_idx, nominal, label=base_label)

    valid = real.notna().all(axis=1)
    real = real.loc[valid]
    logger.debug("Filtered to %d valid observations (of %d)", len(real), len(valid))
    return real, base_label


def decompose_real_series(real: pd.DataFrame, lamb: float = HP_LAMBDA_QUARTERLY) -> tuple:
    """HP cycles (% deviation) and log trends for each real series."""
    cycles = pd.DataFrame(index=real.index)
    trends = pd.DataFrame(index=real.index)
    for name in SERIES:
        cycle, trend = log_cycle_pct(real[name], lamb)
        cycles[name] = cycle.to_numpy()
        trends[name] = trend.to_numpy()
    return cycles, trends


def analyze_real_series(real: pd.DataFrame, base_label: str) -> BusinessCycleResult:
    """Decomposition and statistics for already-deflated, NaN-free series."""
    cycles, trends = decompose_real_series(real)
    stats = compute_cycle_statistics(
        cycles["gdp"], cycles["consumption"], cycles["investment"]
    )
    sd_gdp = stats[0].std_dev
    turning = detect_turning_points(cycles["gdp"].to_numpy(), sd_gdp)
    shocks = shock_intervals(cycles["gdp"].to_numpy(), sd_gdp)
    logger.info(
        "Computed HP cycles (sigma_GDP=%.2f): %d peaks, %d troughs, %d shock interval(s)",
        sd_gdp, turning.peaks.size, turning.troughs.size, len(shocks),
    )
    return BusinessCycleResult(
        base_label=base_label,
        dates=pd.DatetimeIndex(real.index),
        real=real,
        cycles=cycles,
        trends=trends,
        statistics=stats,
        turning_points=turning,
        shocks=shocks,
        sd_gdp=sd_gdp,
    )


def analyze_business_cycle(table, config) -> BusinessCycleResult:
    """
    Full business-cycle analysis of a wide GDP table.

    Parameters
    ----------
    table : GDPTable
        Cleaned quarterly national-accounts table.
    config : AnalysisConfig
        Supplies the base quarter.
    """
    logger.info("Running HP-cycle decomposition (base: %s)", config.base_quarter)
    real, base_label = real_cycle_inputs(table, config)
    if real.empty:
        logger.warning("No quarter has all real series present; cycles are empty.")
    return analyze_real_series(real, base_label)

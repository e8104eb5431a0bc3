"""
growth.py
---------
Growth accounting on the quarterly GDP table.

Implements:
    - Annualised nominal and real GDP per capita growth, implied
      inflation, and the Rule of 70 doubling time.
    - Average labour productivity (ALP = real GDP / employment), its log,
      and its annualised growth.

Growth rates are simple quarter-on-quarter changes multiplied by 4 and
expressed in percent. A rate is NaN when either quarter is missing or
the earlier value is zero.

References:
    - Jones, C. & Vollrath, D. (2013). Introduction to Economic Growth,
      3rd ed. Norton. (Rule of 70; labour productivity accounting)
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from gdpcycle.config import (
    EMPLOYMENT_COLUMN, PER_CAPITA_SCALE, POPULATION_COLUMN, QUARTERS_PER_YEAR, RULE_OF_70,
)
from gdpcycle.deflator import deflate_unfloored, rebase_deflator
from gdpcycle.interpolation import load_annual_series, quarterly_from_annual

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthSummary:
    start: str
    end: str
    base_label: str
    avg_nominal_growth: float
    avg_real_growth: float
    implied_inflation: float
    years_to_double: float


@dataclass
class GrowthResult:
    summary: GrowthSummary
    growth: pd.DataFrame
    population: pd.Series


@dataclass
class ProductivityResult:
    start: str
    end: str
    base_label: str
    levels: pd.DataFrame
    growth: pd.DataFrame
    avg_growth: float


def quarterly_growth(series: pd.Series) -> pd.Series:
    """(x_t - x_{t-1}) / x_{t-1}; NaN for a missing or zero previous value."""
    prev = series.shift(1)
    growth = (series - prev) / prev.where(prev != 0)
    return growth.iloc[1:]


def annualize(growth: pd.Series) -> pd.Series:
    return growth * QUARTERS_PER_YEAR * 100


def years_to_double(avg_growth_pct: float) -> float:
    """Rule of 70; infinite for non-positive or undefined growth."""
    if np.isnan(avg_growth_pct) or avg_growth_pct <= 0:
        return float("inf")
    return RULE_OF_70 / avg_growth_pct


def _real_gdp_sample(table, config):
    """Truncated index, base label, nominal GDP and real GDP."""
    index = table.quarter_index().until(config.sample_end)
    base_idx = index.resolve(config.base_quarter)
    base_label = index.labels[base_idx].canonical

    nominal = table.series(table.find_row("nominal_gdp"), index, name="Nominal_GDP")
    deflator = table.series(table.find_row("deflator"), index, name="Deflator")

    rebased = rebase_deflator(deflator, base_idx, base_label)
    real = deflate_unfloored(nominal, rebased)
    real.name = "Real_GDP"
    return index, base_label, nominal, real


def calculate_growth_rates(table, population_path, config) -> GrowthResult:
    """
    Average annualised nominal and real GDP per capita growth.

    Parameters
    ----------
    table : GDPTable
        Quarterly GDP table (nominal GDP and deflator rows).
    population_path : str
        Annual table: year | population | employment.
    config : AnalysisConfig
        Base quarter and sample end.
    """
    logger.info("Calculating GDP per capita growth (base: %s)", config.base_quarter)
    index, base_label, nominal, real = _real_gdp_sample(table, config)

    annual_pop = load_annual_series(population_path, POPULATION_COLUMN, "Population")
    population = quarterly_from_annual(annual_pop, index)

    nominal_pc = nominal / population.to_numpy() * PER_CAPITA_SCALE
    real_pc = real / population.to_numpy() * PER_CAPITA_SCALE

    nominal_growth = annualize(quarterly_growth(nominal_pc))
    real_growth = annualize(quarterly_growth(real_pc))

    avg_nominal = float(nominal_growth.mean())
    avg_real = float(real_growth.mean())
    summary = GrowthSummary(
        start=index.first,
        end=index.last,
        base_label=base_label,
        avg_nominal_growth=avg_nominal,
        avg_real_growth=avg_real,
        implied_inflation=avg_nominal - avg_real,
        years_to_double=years_to_double(avg_real),
    )

    growth = pd.DataFrame({
        "Quarter": nominal_growth.index,
        "Nominal_Ann_Growth_Pct": nominal_growth.to_numpy(),
        "Real_Ann_Growth_Pct": real_growth.to_numpy(),
    })
    population = population.rename("Population_Persons")

    logger.info("Sample Period: %s to %s", summary.start, summary.end)
    logger.info("Average Annualized Nominal GDP per Capita Growth Rate: %.2f%%", avg_nominal)
    logger.info("Average Annualized Real GDP per Capita Growth Rate: %.2f%%", avg_real)
    logger.info("Implied Average Annual Inflation Rate: %.2f%%", summary.implied_inflation)
    logger.info("Years to Double Living Standards (Rule of 70): %.1f years",
                summary.years_to_double)
    return GrowthResult(summary=summary, growth=growth, population=population)


def calculate_labor_productivity(table, employment_path, config) -> ProductivityResult:
    """
    Average labour productivity (real GDP per worker) and its growth.

    Employment is read from the third column of the annual table
    (thousands), so ALP is in thousands of currency per worker when
    GDP is in millions.
    """
    logger.info("Calculating labor productivity (base: %s)", config.base_quarter)
    index, base_label, _, real = _real_gdp_sample(table, config)

    annual_emp = load_annual_series(employment_path, EMPLOYMENT_COLUMN, "Employment")
    employment = quarterly_from_annual(annual_emp, index)

    alp = real / employment.to_numpy()
    with np.errstate(divide="ignore", invalid="ignore"):
        log_alp = np.log(alp)
    alp_growth = annualize(quarterly_growth(alp))
    avg_growth = float(alp_growth.mean())

    levels = pd.DataFrame({
        "Quarter": alp.index,
        "ALP_Thousands_Per_Worker": alp.to_numpy(),
        "Log_ALP": log_alp.to_numpy(),
    })
    growth = pd.DataFrame({
        "Quarter": alp_growth.index,
        "ALP_Ann_Growth_Pct": alp_growth.to_numpy(),
    })
    logger.debug("Growth series length: %d observations", len(growth))
    logger.info("Average Annualized Labor Productivity Growth Rate: %.2f%%", avg_growth)
    return ProductivityResult(
        start=index.first,
        end=index.last,
        base_label=base_label,
        levels=levels,
        growth=growth,
        avg_growth=avg_growth,
    )

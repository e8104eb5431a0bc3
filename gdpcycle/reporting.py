"""
reporting.py
------------
Restructures analysis results into flat tables for CSV export and
console summaries. No computation happens here; values keep full
precision except in the statistics display table, which rounds to
2 decimals.
"""

import logging

import pandas as pd

from gdpcycle.config import STATS_DECIMALS

logger = logging.getLogger(__name__)

CYCLE_COLUMNS = {
    "gdp": "gdp_cycle_pct",
    "consumption": "consumption_cycle_pct",
    "investment": "investment_cycle_pct",
}
TREND_COLUMNS = {
    "gdp": "gdp_log_trend",
    "consumption": "consumption_log_trend",
    "investment": "investment_log_trend",
}


def cycles_frame(result) -> pd.DataFrame:
    """One row per valid quarter: quarter_timestamp plus the three cycles."""
    out = pd.DataFrame({"quarter_timestamp": result.dates})
    for key, col in CYCLE_COLUMNS.items():
        out[col] = result.cycles[key].to_numpy()
    return out


def trends_frame(result) -> pd.DataFrame:
    """Log trend of each real series, one row per valid quarter."""
    out = pd.DataFrame({"quarter_timestamp": result.dates})
    for key, col in TREND_COLUMNS.items():
        out[col] = result.trends[key].to_numpy()
    return out


def statistics_frame(statistics, decimals: int = STATS_DECIMALS) -> pd.DataFrame:
    """Display table: one row per series, rounded std dev and correlation."""
    records = []
    for s in statistics:
        r = s.rounded(decimals)
        records.append(
            {
                "series": r.series,
                "std_dev_cycle_pct": r.std_dev,
                "correlation_with_gdp_cycle": r.correlation_with_gdp,
            }
        )
    return pd.DataFrame(records)


def shocks_frame(result) -> pd.DataFrame:
    """Shock intervals with their quarter bounds."""
    records = []
    for ev in result.shocks:
        records.append(
            {
                "start": result.dates[ev.start],
                "end": result.dates[ev.end],
                "n_quarters": ev.end - ev.start + 1,
                "sign": "positive" if ev.sign > 0 else "negative",
            }
        )
    return pd.DataFrame(records, columns=["start", "end", "n_quarters", "sign"])


def turning_points_frame(result) -> pd.DataFrame:
    """Peak and trough quarters of the GDP cycle, in time order."""
    gdp = result.cycles["gdp"].to_numpy()
    records = []
    for kind, idx in (("peak", result.turning_points.peaks),
                      ("trough", result.turning_points.troughs)):
        for i in idx:
            records.append(
                {"quarter_timestamp": result.dates[i], "type": kind, "gdp_cycle_pct": gdp[i]}
            )
    frame = pd.DataFrame(records, columns=["quarter_timestamp", "type", "gdp_cycle_pct"])
    return frame.sort_values("quarter_timestamp").reset_index(drop=True)


def growth_summary_frame(summary) -> pd.DataFrame:
    """Growth summary as a labelled single-column table."""
    return pd.DataFrame(
        {"Value": [
            summary.avg_nominal_growth,
            summary.avg_real_growth,
            summary.implied_inflation,
            summary.years_to_double,
        ]},
        index=pd.Index(
            ["Avg Nominal Growth (%)", "Avg Real Growth (%)",
             "Implied Inflation (%)", "Years to Double"],
            name="Measure",
        ),
    )


def productivity_summary_frame(result) -> pd.DataFrame:
    return pd.DataFrame(
        {"Value": [result.avg_growth]},
        index=pd.Index(["Avg ALP Growth (%)"], name="Measure"),
    )


def log_statistics(statistics) -> None:
    """Writes the business-cycle statistics table to the log."""
    table = statistics_frame(statistics)
    header = f"{'Series':<14} {'StdDev (%)':>11} {'Corr w/ GDP':>12}"
    logger.info(header)
    logger.info("-" * len(header))
    for row in table.itertuples(index=False):
        logger.info(
            "%-14s %11.2f %12.2f",
            row.series, row.std_dev_cycle_pct, row.correlation_with_gdp_cycle,
        )

"""
plotting.py
-----------
Chart suite for the GDP analysis.

Implements:
    - Business-cycle chart (HP cycles, sigma bands, shock fills,
      turning points, statistics footer)
    - Total GDP and stacked expenditure components
    - Nominal vs real GDP, levels and logs
    - Annualised per-capita growth rates (twin axes)
    - Labour productivity panels

Each chart is written as PNG (300 dpi) and SVG. Smoothed lines are for
display only; shading, markers and footer statistics use the unsmoothed
cycles.
"""

import logging
import os
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.dates as mdates

from gdpcycle.config import HP_LAMBDA_QUARTERLY, SMOOTHING_POLYORDER, SMOOTHING_WINDOWS

warnings.filterwarnings("ignore", category=UserWarning, message=".*tight_layout.*")

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Color Palette
# ---------------------------------------------------------------------------
COLORS = {
    "gdp": "#0D0D0D", "consumption": "#0073D9", "investment": "#D91A1A",
    "government": "#27AE60", "nx_pos": "#E74C3C", "nx_neg": "#C0392B",
    "shock_pos": "#F25959", "shock_neg": "#5973F2",
    "band_outer": "#EDEDED", "band_inner": "#F5F5F5",
    "nominal": "#3366CC", "real": "#CC3333", "alp": "#1F4E9C", "growth": "#1E8449",
}
SERIES_LABELS = {
    "gdp": "Real GDP",
    "consumption": "Real Consumption",
    "investment": "Real Investment",
}


def _apply_style():
    plt.rcParams.update({
        "figure.facecolor": "white", "axes.facecolor": "white",
        "axes.edgecolor": "#CCCCCC", "axes.grid": True,
        "grid.color": "#BFBFBF", "grid.alpha": 0.35, "grid.linewidth": 0.5,
        "font.family": "sans-serif",
        "font.sans-serif": ["DejaVu Sans", "Arial", "Helvetica"],
        "font.size": 10, "axes.titlesize": 13, "axes.titleweight": "bold",
        "axes.labelsize": 11, "xtick.labelsize": 9, "ytick.labelsize": 9,
        "legend.fontsize": 10, "legend.framealpha": 0.95,
        "legend.edgecolor": "#CCCCCC", "figure.dpi": 100,
        "axes.spines.top": False, "axes.spines.right": False,
    })


def _save(fig, out_dir, stem) -> list:
    os.makedirs(out_dir, exist_ok=True)
    paths = []
    for ext in ("png", "svg"):
        fp = os.path.join(out_dir, f"{stem}.{ext}")
        fig.savefig(fp, dpi=300, bbox_inches="tight", facecolor="white")
        paths.append(fp)
    plt.close(fig)
    logger.info("%s saved: %s", stem, paths[0])
    return paths


# =========================================================================
# BUSINESS CYCLE
# =========================================================================
@dataclass
class CycleChart:
    """Everything the business-cycle chart draws, already computed."""

    dates: pd.DatetimeIndex
    raw: dict
    smoothed: dict
    sd_gdp: float
    thresholds: dict
    peaks: np.ndarray
    troughs: np.ndarray
    positive_shocks: list
    negative_shocks: list
    statistics: list
    base_label: str
    span: str


def build_cycle_chart(result, smoother) -> CycleChart:
    """Assembles the chart payload; smoothing applies to the plotted lines only."""
    raw = {key: result.cycles[key].to_numpy() for key in SERIES_LABELS}
    smoothed = {
        key: smoother(values, SMOOTHING_WINDOWS[key], SMOOTHING_POLYORDER)
        for key, values in raw.items()
    }
    return CycleChart(
        dates=result.dates,
        raw=raw,
        smoothed=smoothed,
        sd_gdp=result.sd_gdp,
        thresholds=result.thresholds,
        peaks=result.turning_points.peaks,
        troughs=result.turning_points.troughs,
        positive_shocks=[(ev.start, ev.end) for ev in result.shocks if ev.sign > 0],
        negative_shocks=[(ev.start, ev.end) for ev in result.shocks if ev.sign < 0],
        statistics=result.statistics,
        base_label=result.base_label,
        span=result.span,
    )


def plot_business_cycle(chart: CycleChart, out_dir, stem="business_cycle") -> list:
    _apply_style()
    fig, ax = plt.subplots(figsize=(14, 6.5))
    t = chart.dates
    gdp = chart.raw["gdp"]
    thr1, thr2 = chart.thresholds["context"], chart.thresholds["shock"]

    if len(t):
        ax.fill_between([t[0], t[-1]], -thr2, thr2, color=COLORS["band_outer"], zorder=0)
        ax.fill_between([t[0], t[-1]], -thr1, thr1, color=COLORS["band_inner"], zorder=0)

    for intervals, color in ((chart.positive_shocks, COLORS["shock_pos"]),
                             (chart.negative_shocks, COLORS["shock_neg"])):
        for start, end in intervals:
            idx = slice(start, end + 1)
            ax.fill_between(t[idx], 0, gdp[idx], color=color, alpha=0.30,
                            linewidth=0, zorder=1)

    widths = {"gdp": 2.8, "consumption": 2.2, "investment": 2.0}
    for key, label in SERIES_LABELS.items():
        ax.plot(t, chart.smoothed[key], color=COLORS[key], linewidth=widths[key],
                label=label, zorder=4)

    ax.axhline(0, color="#595959", linewidth=1.1, linestyle=":")
    ax.plot(t, gdp, color="#333333", alpha=0.35, linewidth=1.0, zorder=3)

    for idx in (chart.peaks, chart.troughs):
        if len(idx):
            ax.scatter(t[idx], gdp[idx], s=32, color="black", edgecolors="white", zorder=5)

    extremes = [0.0]
    for values in (gdp, chart.raw["consumption"], chart.smoothed["investment"]):
        if len(values):
            extremes += [np.nanmin(values), np.nanmax(values)]
    sd = chart.sd_gdp if np.isfinite(chart.sd_gdp) else 0.0
    lo = min(np.floor(min(extremes + [-2.2 * sd])), -15)
    hi = max(np.ceil(max(extremes + [2.2 * sd])), 15)
    ax.set_ylim(lo, hi)
    ax.set_yticks(np.unique(np.round(np.linspace(lo, hi, 11))))
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))

    ax.set_xlabel("Quarter"); ax.set_ylabel("% deviation from trend")
    ax.set_title(
        f"HP Cycles (λ={HP_LAMBDA_QUARTERLY}), Deflator rebased: {chart.base_label} = 100"
        f"   |   {chart.span}", fontsize=14,
    )
    ax.legend(loc="upper left")

    by_name = {s.series: s for s in chart.statistics}
    footer = (
        f"Std dev (%):  GDP {by_name['GDP'].std_dev:.2f} | C {by_name['Consumption'].std_dev:.2f}"
        f" | I {by_name['Investment'].std_dev:.2f}     "
        f"Corr(C,Y)={by_name['Consumption'].correlation_with_gdp:.2f}, "
        f"Corr(I,Y)={by_name['Investment'].correlation_with_gdp:.2f}     "
        f"(σ_Y={chart.sd_gdp:.2f})"
    )
    fig.text(0.98, 0.01, footer, ha="right", va="bottom", fontsize=9, color="#262626")

    plt.tight_layout(rect=(0, 0.04, 1, 1))
    return _save(fig, out_dir, stem)


# =========================================================================
# GDP LEVELS AND COMPONENTS
# =========================================================================
def plot_gdp_total(gdp: pd.Series, out_dir, stem="gdp_total") -> list:
    _apply_style()
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(gdp.index, gdp.values, color="#1A4DB3", linewidth=2.5)
    ax.set_title("Singapore GDP at Current Market Prices", fontsize=15)
    ax.set_xlabel("Year"); ax.set_ylabel("GDP (Million SGD)")
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    plt.tight_layout()
    return _save(fig, out_dir, stem)


def plot_gdp_components(components: pd.DataFrame, out_dir, stem="gdp_components") -> list:
    """
    Stacked C, I and G with net exports split by sign: the positive part
    stacks on top of G, the negative part is drawn below zero.
    """
    _apply_style()
    fig, ax = plt.subplots(figsize=(12, 6.5))
    t = components.index
    nx = components["NX"].fillna(0).to_numpy()
    stack = [components[c].fillna(0).to_numpy() for c in ("C", "I", "G")]

    ax.stackplot(t, *stack, np.clip(nx, 0, None),
                 labels=["Consumption (C)", "Investment (I)", "Government (G)",
                         "Net Exports (NX > 0)"],
                 colors=[COLORS["consumption"], COLORS["investment"],
                         COLORS["government"], COLORS["nx_pos"]],
                 alpha=0.75)
    negative = np.clip(nx, None, 0)
    if (negative < 0).any():
        ax.fill_between(t, negative, 0, color=COLORS["nx_neg"], alpha=0.75,
                        label="Net Exports (NX < 0)")
    ax.plot(t, components["GDP"].values, color="black", linewidth=1.6, label="GDP")
    ax.axhline(0, color="#AAAAAA", linewidth=0.8)

    ax.set_title("GDP by Expenditure Component (Current Prices)", fontsize=15)
    ax.set_xlabel("Year"); ax.set_ylabel("Million SGD")
    ax.legend(loc="upper left", ncol=2)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    plt.tight_layout()
    return _save(fig, out_dir, stem)


def plot_gdp_with_log(series: pd.Series, title, ylabel, color, out_dir, stem) -> list:
    """Level on the left panel, natural log on the right."""
    _apply_style()
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5.5))
    ax1.plot(series.index, series.values, color=color, linewidth=2.2)
    ax1.set_title(title); ax1.set_ylabel(ylabel); ax1.set_xlabel("Year")
    with np.errstate(divide="ignore", invalid="ignore"):
        logged = np.log(series.values)
    ax2.plot(series.index, logged, color=color, linewidth=2.2)
    ax2.set_title(f"Log {title}"); ax2.set_ylabel(f"ln({ylabel})"); ax2.set_xlabel("Year")
    for ax in (ax1, ax2):
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    plt.tight_layout()
    return _save(fig, out_dir, stem)


def plot_nominal_real_gdp(nominal: pd.Series, real: pd.Series, base_label, out_dir) -> list:
    paths = plot_gdp_with_log(nominal, "Nominal GDP", "Million SGD", COLORS["nominal"],
                              out_dir, "gdp_nominal_and_log")
    paths += plot_gdp_with_log(real, f"Real GDP ({base_label} prices)", "Million SGD",
                               COLORS["real"], out_dir, "gdp_real_and_log")
    return paths


# =========================================================================
# GROWTH AND PRODUCTIVITY
# =========================================================================
def plot_growth_rates(growth: pd.DataFrame, summary, out_dir, stem="gdp_growth_rates") -> list:
    _apply_style()
    fig, ax1 = plt.subplots(figsize=(12, 7))
    t = growth["Quarter"]
    l1 = ax1.plot(t, growth["Nominal_Ann_Growth_Pct"], color=COLORS["nominal"],
                  linewidth=2.5, label="Nominal Growth")
    ax1.set_ylabel("Nominal Growth Rate (%)", color=COLORS["nominal"], fontweight="bold")
    ax1.tick_params(axis="y", colors=COLORS["nominal"])

    ax2 = ax1.twinx()
    l2 = ax2.plot(t, growth["Real_Ann_Growth_Pct"], color=COLORS["real"],
                  linewidth=2.5, label="Real Growth")
    ax2.set_ylabel("Real Growth Rate (%)", color=COLORS["real"], fontweight="bold")
    ax2.tick_params(axis="y", colors=COLORS["real"])
    ax2.grid(False)

    ax1.axhline(0, color="#808080", linewidth=1, linestyle="--", alpha=0.7)
    ax1.set_xlabel("Year", fontweight="bold")
    ax1.set_title(
        f"Annualized GDP per Capita Growth Rates ({summary.start} to {summary.end})\n"
        f"Average Real Growth: {summary.avg_real_growth:.2f}% | "
        f"Doubling Time: {summary.years_to_double:.1f} years", fontsize=15,
    )
    ax1.legend(l1 + l2, [ln.get_label() for ln in l1 + l2], loc="upper right", frameon=False)
    ax1.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    plt.tight_layout()
    return _save(fig, out_dir, stem)


def plot_labor_productivity(result, out_dir) -> list:
    _apply_style()
    levels, growth, avg = result.levels, result.growth, result.avg_growth
    fig, axes = plt.subplots(2, 2, figsize=(14, 8))

    ax = axes[0, 0]
    ax.plot(levels["Quarter"], levels["ALP_Thousands_Per_Worker"], color=COLORS["alp"], linewidth=2)
    ax.set_title("Average Labor Productivity Levels"); ax.set_ylabel("ALP (Thousands per Worker)")

    ax = axes[0, 1]
    ax.plot(levels["Quarter"], levels["Log_ALP"], color=COLORS["real"], linewidth=2)
    ax.set_title("Natural Log of Labor Productivity"); ax.set_ylabel("ln(ALP)")

    ax = axes[1, 0]
    ax.plot(growth["Quarter"], growth["ALP_Ann_Growth_Pct"], color=COLORS["growth"], linewidth=1.5)
    ax.axhline(avg, color=COLORS["growth"], linewidth=2, linestyle="--", label=f"Avg: {avg:.2f}%")
    ax.axhline(0, color="black", linewidth=1, linestyle="--")
    ax.set_title("Annualized Labor Productivity Growth"); ax.set_ylabel("Growth Rate (%)")
    ax.legend(loc="upper right")

    for ax in (axes[0, 0], axes[0, 1], axes[1, 0]):
        ax.set_xlabel("Quarter")
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))

    ax = axes[1, 1]
    values = growth["ALP_Ann_Growth_Pct"].dropna()
    ax.hist(values, bins=20, color="#4D99E6", edgecolor="black", alpha=0.7)
    ax.axvline(avg, color="red", linewidth=3, label=f"Mean: {avg:.2f}%")
    ax.set_title("Distribution of Productivity Growth")
    ax.set_xlabel("Growth Rate (%)"); ax.set_ylabel("Frequency")
    ax.legend(loc="upper right")

    fig.suptitle(f"Labor Productivity Analysis ({result.start} to {result.end})",
                 fontsize=16, fontweight="bold")
    plt.tight_layout()
    return _save(fig, out_dir, "labor_productivity_analysis")


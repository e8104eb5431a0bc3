"""
main.py
-------
Orchestration pipeline for the Singapore GDP analysis.

Pipeline stages:
    1. Raw data cleaning (raw_data -> processed_data)
    2. GDP levels, expenditure components, nominal vs real GDP charts
    3. Annualised GDP per capita growth rates
    4. Labour productivity
    5. HP-filter business cycle (statistics, turning points, shocks, chart)
    6. Artefact summary

Each stage after cleaning is isolated: a failure is logged and the
remaining stages still run.

Usage:
    python main.py [--data-dir data] [--output-dir outputs]
                   [--base-quarter "1990 1Q"] [--smoother savgol|moving_average]
                   [--force] [--verbose]
"""

import os
import logging
import argparse
import traceback

from gdpcycle.config import (
    ANALYSIS_TITLE, DEFAULT_BASE_QUARTER, GROWTH_SAMPLE_END, PROCESSED_FILES,
    RAW_FILES, SMOOTHERS, AnalysisConfig,
)
from gdpcycle.business_cycle import analyze_business_cycle
from gdpcycle.components import gdp_components, nominal_and_real_gdp
from gdpcycle.data_loader import GDPTable, process_raw_data, resolve_input
from gdpcycle.errors import AnalysisError
from gdpcycle.growth import calculate_growth_rates, calculate_labor_productivity
from gdpcycle.plotting import (
    build_cycle_chart, plot_business_cycle, plot_gdp_components, plot_gdp_total,
    plot_growth_rates, plot_labor_productivity, plot_nominal_real_gdp,
)
from gdpcycle.reporting import (
    cycles_frame, growth_summary_frame, log_statistics, productivity_summary_frame,
    shocks_frame, statistics_frame, trends_frame, turning_points_frame,
)
from gdpcycle.smoothing import select_smoother

# ---------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s | %(name)-18s | %(levelname)-7s | %(message)s"
logger = logging.getLogger("gdpcycle")

# Failures that make one task unusable but leave the others intact.
TASK_ERRORS = (AnalysisError, OSError, ValueError, KeyError)

EXPECTED_TABLES = (
    "business_cycle_stats.csv", "hp_cycles_series.csv",
    "gdp_growth_summary.csv", "gdp_growth_series.csv",
    "interpolated_population.csv", "productivity_summary.csv",
    "labor_productivity_levels.csv", "labor_productivity_growth.csv",
)
EXPECTED_FIGURES = (
    "business_cycle.png", "gdp_total.png", "gdp_components.png",
    "gdp_nominal_and_log.png", "gdp_real_and_log.png",
    "gdp_growth_rates.png", "labor_productivity_analysis.png",
)


def _run_task(name, func, *args):
    """Runs one stage; logs and swallows task-level failures."""
    logger.info("-" * 70)
    logger.info("TASK: %s", name)
    try:
        return func(*args)
    except TASK_ERRORS as e:
        logger.warning("%s failed (non-fatal, continuing): %s", name, e)
        logger.debug(traceback.format_exc())
        return None


# =========================================================================
# TASKS
# =========================================================================
def task_gdp_overview(table, config, fig_dir):
    components = gdp_components(table)
    plot_gdp_total(components["GDP"], fig_dir)
    plot_gdp_components(components, fig_dir)
    nominal, real, base_label = nominal_and_real_gdp(table, config)
    plot_nominal_real_gdp(nominal, real, base_label, fig_dir)
    return True


def task_growth_rates(table, population_path, config, fig_dir, tab_dir):
    result = calculate_growth_rates(table, population_path, config)
    growth_summary_frame(result.summary).to_csv(
        os.path.join(tab_dir, "gdp_growth_summary.csv"))
    result.growth.to_csv(os.path.join(tab_dir, "gdp_growth_series.csv"), index=False)
    result.population.reset_index().to_csv(
        os.path.join(tab_dir, "interpolated_population.csv"), index=False)
    plot_growth_rates(result.growth, result.summary, fig_dir)
    return result


def task_labor_productivity(table, population_path, config, fig_dir, tab_dir):
    result = calculate_labor_productivity(table, population_path, config)
    productivity_summary_frame(result).to_csv(
        os.path.join(tab_dir, "productivity_summary.csv"))
    result.levels.to_csv(os.path.join(tab_dir, "labor_productivity_levels.csv"), index=False)
    result.growth.to_csv(os.path.join(tab_dir, "labor_productivity_growth.csv"), index=False)
    plot_labor_productivity(result, fig_dir)
    return result


def task_business_cycle(table, config, smoother, fig_dir, tab_dir):
    result = analyze_business_cycle(table, config)
    log_statistics(result.statistics)

    statistics_frame(result.statistics).to_csv(
        os.path.join(tab_dir, "business_cycle_stats.csv"), index=False)
    cycles_frame(result).to_csv(os.path.join(tab_dir, "hp_cycles_series.csv"), index=False)
    trends_frame(result).to_csv(os.path.join(tab_dir, "hp_trends_series.csv"), index=False)
    turning_points_frame(result).to_csv(
        os.path.join(tab_dir, "business_cycle_turning_points.csv"), index=False)
    shocks_frame(result).to_csv(
        os.path.join(tab_dir, "business_cycle_shocks.csv"), index=False)

    chart = build_cycle_chart(result, smoother)
    plot_business_cycle(chart, fig_dir)
    return result


def log_artefact_summary(fig_dir, tab_dir):
    logger.info("=" * 70)
    logger.info("OUTPUT SUMMARY")
    logger.info("=" * 70)
    n_found = 0
    for folder, names in ((tab_dir, EXPECTED_TABLES), (fig_dir, EXPECTED_FIGURES)):
        for name in names:
            fp = os.path.join(folder, name)
            exists = os.path.exists(fp)
            n_found += exists
            logger.info("  [%s] %s", "x" if exists else " ", fp)
    total = len(EXPECTED_TABLES) + len(EXPECTED_FIGURES)
    logger.info("%d/%d expected artefacts present.", n_found, total)
    return n_found, total


# =========================================================================
# ENTRY POINT
# =========================================================================
def run(data_dir, output_dir, config, force=False):
    raw_dir = os.path.join(data_dir, "raw_data")
    processed_dir = os.path.join(data_dir, "processed_data")
    fig_dir = os.path.join(output_dir, "figures")
    tab_dir = os.path.join(output_dir, "tables")
    for d in (processed_dir, fig_dir, tab_dir):
        os.makedirs(d, exist_ok=True)

    logger.info("=" * 70)
    logger.info(ANALYSIS_TITLE)
    smoother = select_smoother(config.smoother)
    logger.info("Base quarter: %s | Smoother: %s", config.base_quarter, smoother.name)
    logger.info("=" * 70)

    _run_task("Raw data processing", process_raw_data, raw_dir, processed_dir, force)

    gdp_path = resolve_input(
        os.path.join(processed_dir, PROCESSED_FILES["gdp"]),
        os.path.join(raw_dir, RAW_FILES["gdp"]),
    )
    population_path = resolve_input(
        os.path.join(processed_dir, PROCESSED_FILES["population"]),
        os.path.join(raw_dir, RAW_FILES["population"]),
    )
    table = _run_task("Load GDP table", GDPTable.from_csv, gdp_path)

    results = {}
    if table is None:
        logger.warning("GDP table unavailable; skipping all analysis tasks.")
    else:
        results["overview"] = _run_task(
            "GDP levels and components", task_gdp_overview, table, config, fig_dir)
        results["growth"] = _run_task(
            "GDP per capita growth rates", task_growth_rates,
            table, population_path, config, fig_dir, tab_dir)
        results["productivity"] = _run_task(
            "Labor productivity", task_labor_productivity,
            table, population_path, config, fig_dir, tab_dir)
        results["business_cycle"] = _run_task(
            "HP business cycle", task_business_cycle,
            table, config, smoother, fig_dir, tab_dir)

    log_artefact_summary(fig_dir, tab_dir)
    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description=ANALYSIS_TITLE)
    parser.add_argument("--data-dir", default="data",
                        help="Directory holding raw_data/ and processed_data/")
    parser.add_argument("--output-dir", default="outputs",
                        help="Directory for figures/ and tables/")
    parser.add_argument("--base-quarter", default=DEFAULT_BASE_QUARTER,
                        help='Deflator base quarter, e.g. "1990 1Q" or 1990Q1')
    parser.add_argument("--sample-end", default=GROWTH_SAMPLE_END,
                        help="Last quarter used for growth and productivity")
    parser.add_argument("--smoother", default="savgol", choices=SMOOTHERS,
                        help="Presentation smoother for the business-cycle chart")
    parser.add_argument("--force", action="store_true", default=False,
                        help="Re-clean raw data even if processed files exist")
    parser.add_argument("--verbose", action="store_true", default=False)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M",
    )
    config = AnalysisConfig(
        base_quarter=args.base_quarter,
        verbose=args.verbose,
        smoother=args.smoother,
        sample_end=args.sample_end,
    )
    return run(args.data_dir, args.output_dir, config, force=args.force)


if __name__ == "__main__":
    main()

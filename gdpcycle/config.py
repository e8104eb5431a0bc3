"""
config.py
---------
Central configuration for the GDP business-cycle analysis.

Defines the base quarter convention, HP filter parameters, statistics
thresholds, and the ordered matcher lists used to locate quarter headers
and series rows in the national-accounts tables. All economic
assumptions are documented inline with references.

References:
    - Hodrick, R. & Prescott, E. (1997). Postwar US Business Cycles.
      Journal of Money, Credit and Banking, 29(1), 1-16.
    - Ravn, M. & Uhlig, H. (2002). On adjusting the HP filter for the
      frequency of observations. Review of Economics and Statistics, 84(2).
    - Savitzky, A. & Golay, M. (1964). Smoothing and Differentiation of
      Data by Simplified Least Squares Procedures. Analytical Chemistry,
      36(8), 1627-1639.
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Base Period
# ---------------------------------------------------------------------------
# Deflator is rebased so that this quarter equals 100. Passed explicitly
# through AnalysisConfig; this is only the CLI default.
DEFAULT_BASE_QUARTER = "1990 1Q"

# Growth and productivity samples stop at the last complete year.
GROWTH_SAMPLE_END = "2024 4Q"

# ---------------------------------------------------------------------------
# Hodrick-Prescott Filter
# ---------------------------------------------------------------------------
# 1600 is the quarterly convention (Hodrick & Prescott 1997). Fixed for
# every pipeline call.
HP_LAMBDA_QUARTERLY = 1600

# Below this length the second-difference system is too small to be
# stable; the filter returns the input as trend.
HP_MIN_OBSERVATIONS = 6

# Floors applied before log() and before dividing by the deflator ratio.
LOG_FLOOR = 1e-12
DEFLATOR_FLOOR = 1e-12

# ---------------------------------------------------------------------------
# Cycle Statistics
# ---------------------------------------------------------------------------
# Peaks/troughs must stand out by this many GDP-cycle standard deviations.
PEAK_PROMINENCE_SD = 0.8

# |cycle| >= 2 sd marks a shock quarter; 1 sd is the lighter context band.
SHOCK_THRESHOLD_SD = 2.0
CONTEXT_BAND_SD = 1.0

STATS_DECIMALS = 2

# ---------------------------------------------------------------------------
# Presentation Smoothing
# ---------------------------------------------------------------------------
SMOOTHING_WINDOWS = {
    "gdp": 5,
    "consumption": 5,
    "investment": 7,
}
SMOOTHING_POLYORDER = 2
SMOOTHERS = ("savgol", "moving_average")

# ---------------------------------------------------------------------------
# Growth Accounting
# ---------------------------------------------------------------------------
# GDP is in millions and population in persons: scale to currency per head.
PER_CAPITA_SCALE = 1e6
QUARTERS_PER_YEAR = 4
RULE_OF_70 = 70.0

# Annual population table: year | population | employment (thousands)
POPULATION_COLUMN = 1
EMPLOYMENT_COLUMN = 2
MIN_VALID_YEAR = 1900

# ---------------------------------------------------------------------------
# Quarter Header Grammar
# ---------------------------------------------------------------------------
# Tried in order, first match wins. The leading "x" appears when headers
# were sanitised into identifiers by a spreadsheet export.
QUARTER_PATTERNS = (
    re.compile(r"^x?(\d{4})([1-4])Q$", re.IGNORECASE),    # x20231Q, 20231Q
    re.compile(r"^(\d{4})Q([1-4])$", re.IGNORECASE),       # 2023Q1
    re.compile(r"^(\d{4})\s+([1-4])Q$", re.IGNORECASE),    # 2023 1Q
    re.compile(r"^(\d{4})\s*Q([1-4])$", re.IGNORECASE),    # 2023 Q1
    re.compile(r"^(\d{4})[-_/]Q([1-4])$", re.IGNORECASE),  # 2023-Q1
    re.compile(r"^(\d{4})[-_/]([1-4])Q$", re.IGNORECASE),  # 2023-1Q
)

# ---------------------------------------------------------------------------
# Series Row Matchers
# ---------------------------------------------------------------------------
# Case-insensitive substring phrases, tried in priority order. The first
# phrase matching any row wins, and within a phrase the first row wins.
SERIES_CANDIDATES = {
    "deflator": (
        "gdp deflator",
        "gdp_deflator",
        "deflator",
        "implicit price deflator",
        "gdp implicit price",
    ),
    "nominal_gdp": (
        "gdp at current market prices",
        "nominal gdp",
        "gdp current",
        "gdp at current",
        "gross domestic product, current",
    ),
    "consumption": (
        "private consumption expenditure",
        "consumption expenditure of households",
        "personal consumption expenditure",
        "consumption, private",
    ),
    "government": (
        "government consumption expenditure",
        "general government final consumption",
    ),
    "gfcf": (
        "gross fixed capital formation",
        "fixed investment",
        "gfcf",
    ),
    "inventories": (
        "changes in inventories",
        "inventory change",
        "change in stocks",
    ),
    "net_exports": (
        "net exports of goods",
        "net exports",
    ),
    "exports": ("exports of goods",),
    "imports": ("imports of goods",),
}

SERIES_NAMES = {
    "deflator": "GDP deflator",
    "nominal_gdp": "Nominal GDP",
    "consumption": "Nominal private consumption",
    "government": "Government consumption",
    "gfcf": "Nominal gross fixed capital formation",
    "inventories": "Changes in inventories",
    "net_exports": "Net exports",
    "exports": "Exports of goods and services",
    "imports": "Imports of goods and services",
}

# ---------------------------------------------------------------------------
# Input / Output Layout
# ---------------------------------------------------------------------------
RAW_FILES = {
    "gdp": "gdp.csv",
    "population": "sg_annual_population_employment_1990_2025.csv",
    "deflator": "gdp_deflator_base_2015.csv",
}
PROCESSED_FILES = {
    "gdp": "gdp_cleaned.csv",
    "population": "population_employment_cleaned.csv",
    "deflator": "gdp_deflator_cleaned.csv",
}

ANALYSIS_TITLE = "Singapore GDP Analysis (1990-2024)"


@dataclass(frozen=True)
class AnalysisConfig:
    """Run-time settings threaded through every analysis entry point."""

    base_quarter: str = DEFAULT_BASE_QUARTER
    verbose: bool = False
    smoother: str = "savgol"
    sample_end: str = GROWTH_SAMPLE_END

    def __post_init__(self):
        if self.smoother not in SMOOTHERS:
            raise ValueError(
                f"Unknown smoother '{self.smoother}'. Expected one of {SMOOTHERS}."
            )

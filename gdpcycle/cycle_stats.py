"""
cycle_stats.py
--------------
Business-cycle statistics on HP cycles (in % deviation from trend).

Contains:
    - CycleStatistics: volatility and comovement with the GDP cycle.
    - Turning points: local peaks/troughs filtered by prominence.
    - Shock bands: quarters beyond +/- k standard deviations, grouped
      into contiguous intervals for presentation.

Rounding to 2 decimals happens only in display tables. Thresholds are
always derived from the unrounded standard deviation.

References:
    - Kydland, F. & Prescott, E. (1990). Business Cycles: Real Facts and
      a Monetary Myth. Federal Reserve Bank of Minneapolis Quarterly
      Review, 14(2), 3-18. (Volatility/comovement stylised facts)
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
import pandas as pd
from scipy.signal import find_peaks

from gdpcycle.config import PEAK_PROMINENCE_SD, SHOCK_THRESHOLD_SD, STATS_DECIMALS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleStatistics:
    series: str
    std_dev: float
    correlation_with_gdp: float

    def rounded(self, decimals: int = STATS_DECIMALS) -> "CycleStatistics":
        return CycleStatistics(
            self.series,
            round(self.std_dev, decimals),
            round(self.correlation_with_gdp, decimals),
        )


class TurningPoints(NamedTuple):
    peaks: np.ndarray
    troughs: np.ndarray
    prominence: float


class ShockEvent(NamedTuple):
    start: int
    end: int
    sign: int


def cycle_std(cycle: pd.Series) -> float:
    """Population standard deviation over non-missing observations."""
    return float(pd.Series(cycle, dtype=float).std(ddof=0))


def pairwise_corr(x: pd.Series, y: pd.Series) -> float:
    """Pearson correlation over observations present in both series."""
    a = pd.Series(np.asarray(x, dtype=float))
    b = pd.Series(np.asarray(y, dtype=float))
    both = a.notna() & b.notna()
    a, b = a[both], b[both]
    if len(a) < 2 or a.std(ddof=0) == 0 or b.std(ddof=0) == 0:
        logger.warning(
            "Correlation undefined (%d paired obs or zero variance); reporting NaN.",
            len(a),
        )
        return float("nan")
    return float(a.corr(b))


def compute_cycle_statistics(gdp_cycle, consumption_cycle, investment_cycle) -> list:
    """
    Standard deviation of each cycle and its correlation with the GDP
    cycle. GDP's self-correlation is exactly 1.
    """
    stats = [CycleStatistics("GDP", cycle_std(gdp_cycle), 1.0)]
    for name, cycle in (("Consumption", consumption_cycle), ("Investment", investment_cycle)):
        stats.append(
            CycleStatistics(name, cycle_std(cycle), pairwise_corr(cycle, gdp_cycle))
        )
    for s in stats:
        logger.debug(
            "%-12s sd=%.4f corr=%.4f", s.series, s.std_dev, s.correlation_with_gdp
        )
    return stats


def _prominent_extrema(values: np.ndarray, prominence: float) -> np.ndarray:
    # plateau_size=1 exposes left_edges: a flat extremum is reported at its
    # earliest index rather than scipy's midpoint.
    _, props = find_peaks(values, prominence=prominence, plateau_size=1)
    return np.asarray(props["left_edges"], dtype=int)


def detect_turning_points(cycle, sd: float = None,
                          prominence_sd: float = PEAK_PROMINENCE_SD) -> TurningPoints:
    """
    Local maxima/minima of ``cycle`` whose prominence is at least
    ``prominence_sd * sd``.

    Parameters
    ----------
    cycle : array-like
        GDP cycle in % deviation. Must be NaN-free.
    sd : float, optional
        Unrounded cycle standard deviation. Computed when omitted.
    """
    values = np.asarray(cycle, dtype=float)
    if sd is None:
        sd = cycle_std(values)
    prominence = prominence_sd * sd
    if values.size < 3 or not np.isfinite(prominence) or prominence <= 0:
        empty = np.array([], dtype=int)
        return TurningPoints(empty, empty, prominence)

    peaks = _prominent_extrema(values, prominence)
    troughs = _prominent_extrema(-values, prominence)
    logger.debug(
        "Turning points (prominence %.3f): %d peaks, %d troughs",
        prominence, peaks.size, troughs.size,
    )
    return TurningPoints(peaks, troughs, prominence)


def classify_shocks(cycle, sd: float, k: float = SHOCK_THRESHOLD_SD) -> tuple:
    """Boolean masks (positive, negative) for |cycle| beyond k * sd."""
    values = np.asarray(cycle, dtype=float)
    if not np.isfinite(sd) or sd <= 0:
        none = np.zeros(values.shape, dtype=bool)
        return none, none.copy()
    threshold = k * sd
    return values >= threshold, values <= -threshold


def mask_intervals(mask) -> list:
    """Inclusive (start, end) index pairs of each contiguous True run."""
    padded = np.concatenate([[False], np.asarray(mask, dtype=bool), [False]])
    d = np.diff(padded.astype(int))
    starts = np.flatnonzero(d == 1)
    ends = np.flatnonzero(d == -1) - 1
    return list(zip(starts.tolist(), ends.tolist()))


def shock_intervals(cycle, sd: float, k: float = SHOCK_THRESHOLD_SD) -> list:
    """ShockEvents ordered by start index; sign is +1 or -1."""
    positive, negative = classify_shocks(cycle, sd, k)
    events = [ShockEvent(s, e, 1) for s, e in mask_intervals(positive)]
    events += [ShockEvent(s, e, -1) for s, e in mask_intervals(negative)]
    return sorted(events, key=lambda ev: ev.start)

"""
smoothing.py
------------
Cosmetic smoothing of cycle series for charts.

Two strategies share the Smoother interface:
    - SavitzkyGolaySmoother: local polynomial regression
      (scipy.signal.savgol_filter).
    - MovingAverageSmoother: centred moving average whose window is
      truncated at the edges (fewer neighbours, no padding), so the
      output length equals the input length.

The strategy is chosen once, by select_smoother(), when the run starts.
Smoothed output feeds charts only; statistics and thresholds are always
computed on the unsmoothed cycles.

References:
    - Savitzky, A. & Golay, M. (1964). Smoothing and Differentiation of
      Data by Simplified Least Squares Procedures. Analytical Chemistry,
      36(8), 1627-1639.
"""

import logging

import numpy as np
import pandas as pd
from scipy import signal

logger = logging.getLogger(__name__)


def coerce_window(window: int) -> int:
    """Nearest odd integer >= 3 (even widths round up)."""
    return max(3, 2 * (int(window) // 2) + 1)


class Smoother:
    """Interface: subclasses set ``name`` and implement ``smooth``."""

    name = None

    def smooth(self, series, window: int, polyorder: int = 2) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, series, window, polyorder=2):
        return self.smooth(series, window, polyorder)


class SavitzkyGolaySmoother(Smoother):
    name = "savgol"

    def smooth(self, series, window, polyorder=2):
        values = np.asarray(series, dtype=float)
        if values.size == 0:
            return values
        window = coerce_window(window)
        polyorder = min(int(polyorder), window - 1)
        # "interp" fits the edge windows directly but needs a full window.
        mode = "interp" if values.size >= window else "nearest"
        return signal.savgol_filter(values, window, polyorder, mode=mode)


class MovingAverageSmoother(Smoother):
    name = "moving_average"

    def smooth(self, series, window, polyorder=2):
        window = coerce_window(window)
        s = pd.Series(np.asarray(series, dtype=float))
        return s.rolling(window, center=True, min_periods=1).mean().to_numpy()


_SMOOTHERS = {
    SavitzkyGolaySmoother.name: SavitzkyGolaySmoother,
    MovingAverageSmoother.name: MovingAverageSmoother,
}


def select_smoother(preferred: str = "savgol") -> Smoother:
    """
    Returns the smoother strategy for this run.

    scipy is a hard dependency, so the capability check only guards
    against scipy releases that predate ``savgol_filter``; there the
    centred moving average is used instead. The choice is made once per
    run and never re-evaluated per call.
    """
    if preferred == SavitzkyGolaySmoother.name and not hasattr(signal, "savgol_filter"):
        logger.warning("savgol_filter unavailable; using centred moving average.")
        preferred = MovingAverageSmoother.name
    smoother = _SMOOTHERS[preferred]()
    logger.debug("Presentation smoother: %s", smoother.name)
    return smoother

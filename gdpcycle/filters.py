"""
filters.py
----------
Time-series decomposition utilities.

Implements the Hodrick-Prescott (1997) filter to separate cyclical
fluctuations from the underlying trend component. For an input y of
length T the trend tau minimises

    sum_t (y_t - tau_t)^2 + lambda * sum_{t=2}^{T-1} (tau_{t+1} - 2 tau_t + tau_{t-1})^2

whose unique solution satisfies (I + lambda D'D) tau = y, with D the
(T-2) x T second-difference operator. The system is pentadiagonal and
is solved as a sparse system by statsmodels. The cycle is the residual
y - tau.

SHORT SAMPLES:
    With T < 6 the second-difference system is too small to be stable.
    The filter then returns the input as trend and a zero cycle.

PRECONDITION, NO MISSING VALUES:
    The filter does not validate its input. NaN values propagate through
    the solve. Callers pass the filtered subsequence of valid quarters
    (see business_cycle.py).

References:
    - Hodrick, R. & Prescott, E. (1997). Postwar US Business Cycles:
      An Empirical Investigation. Journal of Money, Credit and Banking,
      29(1), 1-16. DOI:10.2307/2953682
    - Ravn, M. & Uhlig, H. (2002). On Adjusting the Hodrick-Prescott
      Filter for the Frequency of Observations. Review of Economics and
      Statistics, 84(2), 371-376. DOI:10.1162/003465302317411604
      (Source of lambda=1600 quarterly)
"""

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm

from gdpcycle.config import HP_LAMBDA_QUARTERLY, HP_MIN_OBSERVATIONS, LOG_FLOOR

logger = logging.getLogger(__name__)


def hp_decompose(y, lamb: float = HP_LAMBDA_QUARTERLY) -> tuple:
    """
    Splits ``y`` into (trend, cycle) with cycle = y - trend.

    Parameters
    ----------
    y : array-like
        Input sequence. Must not contain NaN values.
    lamb : float
        Smoothing strength. The pipeline always uses 1600.

    Returns
    -------
    tuple : (np.ndarray, np.ndarray)
        Trend component and cyclical component.
    """
    values = np.asarray(y, dtype=float).ravel()
    if values.size < HP_MIN_OBSERVATIONS:
        logger.warning(
            "HP filter: %d observation(s) < %d; returning input as trend.",
            values.size, HP_MIN_OBSERVATIONS,
        )
        return values.copy(), np.zeros_like(values)

    _, trend = sm.tsa.filters.hpfilter(values, lamb=lamb)
    trend = np.asarray(trend, dtype=float)
    return trend, values - trend


def extract_cycle(series: pd.Series, lamb: float = HP_LAMBDA_QUARTERLY) -> tuple:
    """
    Decomposes a pandas series, keeping its index.

    Returns
    -------
    tuple : (pd.Series, pd.Series)
        Cyclical component and trend component.
    """
    trend, cycle = hp_decompose(series.to_numpy(dtype=float), lamb)
    name = series.name or "series"
    return (
        pd.Series(cycle, index=series.index, name=f"{name}_cycle"),
        pd.Series(trend, index=series.index, name=f"{name}_trend"),
    )


def log_cycle_pct(series: pd.Series, lamb: float = HP_LAMBDA_QUARTERLY) -> tuple:
    """
    HP-filters log(max(series, floor)).

    Returns
    -------
    tuple : (pd.Series, pd.Series)
        Cycle as 100 x log deviation (approximate % from trend) and the
        log trend.
    """
    logged = pd.Series(
        np.log(np.maximum(series.to_numpy(dtype=float), LOG_FLOOR)),
        index=series.index,
        name=series.name,
    )
    cycle, trend = extract_cycle(logged, lamb)
    return 100 * cycle, trend


def second_difference_energy(trend) -> float:
    """Sum of squared second differences, the HP smoothness penalty."""
    return float(np.sum(np.diff(np.asarray(trend, dtype=float), n=2) ** 2))

"""
deflator.py
-----------
Deflator rebasing and construction of real (constant-price) series.

    rebased[i] = raw[i] / raw[base] * 100
    real[i]    = nominal[i] / max(rebased[i] / 100, floor)

The floor only guards against dividing by exactly zero; NaN deflator
values propagate to NaN real values. All outputs share the deflator's
timestamp index. Callers filter to the mutually valid subsequence before
any HP decomposition.
"""

import logging

import numpy as np
import pandas as pd

from gdpcycle.config import DEFLATOR_FLOOR
from gdpcycle.errors import InvalidBaseValueError

logger = logging.getLogger(__name__)


def rebase_deflator(deflator: pd.Series, base_index: int, label: str = None) -> pd.Series:
    """
    Rescales ``deflator`` so the observation at ``base_index`` equals 100.

    Raises InvalidBaseValueError if the base value is NaN or zero.
    """
    base_value = float(deflator.iloc[base_index])
    if label is None:
        label = str(deflator.index[base_index])
    if np.isnan(base_value) or base_value == 0:
        raise InvalidBaseValueError(label, base_value)

    rebased = deflator / base_value * 100
    rebased.name = "Deflator_Rebased"

    n_nonpos = int((rebased <= 0).sum())
    if n_nonpos:
        logger.warning(
            "Rebased deflator has %d non-positive value(s); real values there "
            "are floored at %g.", n_nonpos, DEFLATOR_FLOOR,
        )
    return rebased


def deflate(nominal: pd.Series, rebased: pd.Series, floor: float = DEFLATOR_FLOOR) -> pd.Series:
    """Converts a nominal series to real terms using a rebased deflator."""
    ratio = np.maximum(rebased.to_numpy(dtype=float) / 100, floor)
    real = nominal.to_numpy(dtype=float) / ratio
    return pd.Series(real, index=rebased.index, name=nominal.name)


def deflate_unfloored(nominal: pd.Series, rebased: pd.Series) -> pd.Series:
    """Plain ratio deflation, used by the growth and productivity tables."""
    return pd.Series(
        nominal.to_numpy(dtype=float) / (rebased.to_numpy(dtype=float) / 100),
        index=rebased.index,
        name=nominal.name,
    )


def real_investment(gfcf: pd.Series, inventories: pd.Series = None) -> pd.Series:
    """
    Nominal investment = gross fixed capital formation + change in inventories.

    A missing inventory row contributes zero; the loss of accuracy is
    logged rather than raised.
    """
    if inventories is None:
        logger.warning(
            "Changes in inventories row not found; investment uses GFCF only."
        )
        inventories = pd.Series(0.0, index=gfcf.index)
    total = gfcf + inventories.to_numpy(dtype=float)
    total.name = "Investment_Nominal"
    return total


def build_real_series(deflator, base_index, nominal, label=None, floor=DEFLATOR_FLOOR):
    """
    Rebases ``deflator`` and deflates every series in ``nominal``.

    Parameters
    ----------
    deflator : pd.Series
        Raw deflator, indexed by quarter-end timestamps.
    base_index : int
        Chronological position of the base quarter.
    nominal : dict of str -> pd.Series
        Nominal series sharing the deflator's index.

    Returns
    -------
    pd.DataFrame
        One column per nominal series (real terms) plus 'Deflator_Rebased'.
    """
    rebased = rebase_deflator(deflator, base_index, label)
    real = pd.DataFrame(index=deflator.index)
    for name, series in nominal.items():
        real[name] = deflate(series, rebased, floor)
    real["Deflator_Rebased"] = rebased
    return real

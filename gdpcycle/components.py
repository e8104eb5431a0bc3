"""
components.py
-------------
Expenditure-side GDP components: C, I (GFCF + inventories), G and NX.
Net exports come from a direct row when present, otherwise exports
minus imports.
"""

import logging

import pandas as pd

from gdpcycle.config import SERIES_CANDIDATES, SERIES_NAMES
from gdpcycle.deflator import build_real_series
from gdpcycle.errors import RequiredSeriesMissingError

logger = logging.getLogger(__name__)


def gdp_components(table) -> pd.DataFrame:
    """
    Nominal GDP and its components on the chronological quarter axis.

    Returns
    -------
    pd.DataFrame
        Columns 'GDP', 'C', 'I', 'G', 'NX'.
    """
    index = table.quarter_index()
    rows = {key: table.find_row(key) for key in
            ("nominal_gdp", "consumption", "government", "gfcf", "inventories")}

    nx_row = table.find_optional_row("net_exports")
    if nx_row is not None:
        nx = table.series(nx_row, index)
    else:
        x_row = table.find_optional_row("exports")
        m_row = table.find_optional_row("imports")
        if x_row is None or m_row is None:
            candidates = SERIES_CANDIDATES["net_exports"] + SERIES_CANDIDATES["exports"] \
                + SERIES_CANDIDATES["imports"]
            raise RequiredSeriesMissingError(
                f"{SERIES_NAMES['net_exports']} (or exports and imports)",
                candidates, source=table.source,
            )
        logger.debug("Net exports computed as exports minus imports")
        nx = table.series(x_row, index) - table.series(m_row, index)

    series = {key: table.series(row, index) for key, row in rows.items()}
    return pd.DataFrame({
        "GDP": series["nominal_gdp"],
        "C": series["consumption"],
        "I": series["gfcf"] + series["inventories"],
        "G": series["government"],
        "NX": nx,
    })


def nominal_and_real_gdp(table, config) -> tuple:
    """
    Nominal GDP and real GDP at ``config.base_quarter`` prices over the
    full quarter range.

    Returns
    -------
    tuple : (pd.Series, pd.Series, str)
        Nominal GDP, real GDP and the canonical base label.
    """
    index = table.quarter_index()
    base_idx = index.resolve(config.base_quarter)
    base_label = index.labels[base_idx].canonical
    nominal = table.series(table.find_row("nominal_gdp"), index, name="Nominal_GDP")
    deflator = table.series(table.find_row("deflator"), index, name="Deflator")
    real = build_real_series(deflator, base_idx, {"Real_GDP": nominal}, label=base_label)
    return nominal, real["Real_GDP"], base_label

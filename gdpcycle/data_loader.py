"""
data_loader.py
--------------
National-accounts data ingestion for the GDP analysis.

Cleans the raw CSV exports (blank rows, padded labels, duplicate rows,
preamble lines), and wraps the wide quarterly GDP table: one row per
series, first column = series label, remaining columns = quarters.
"""

import logging
import os

import numpy as np
import pandas as pd

from gdpcycle.config import PROCESSED_FILES, RAW_FILES, SERIES_CANDIDATES, SERIES_NAMES
from gdpcycle.errors import RequiredSeriesMissingError
from gdpcycle.quarters import build_quarter_index

logger = logging.getLogger(__name__)


def read_text_table(path) -> pd.DataFrame:
    """Reads a CSV with every cell as text so that labels and headers survive."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input table not found: {path}")
    return pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)


def to_numeric(values) -> np.ndarray:
    """
    Converts table cells to floats.

    Thousands separators are stripped; blanks and non-numeric text
    (e.g. "na", "-") become NaN.
    """
    s = pd.Series(values, dtype="object").astype(str).str.strip()
    s = s.str.replace(",", "", regex=False)
    return pd.to_numeric(s, errors="coerce").to_numpy(dtype=float)


# =========================================================================
# RAW DATA CLEANING
# =========================================================================
def clean_gdp_table(raw_path, out_path) -> pd.DataFrame:
    """
    Trims series labels, drops rows with no data cells, and drops exact
    duplicate rows. Writes the cleaned table to ``out_path``.
    """
    df = read_text_table(raw_path)
    label_col = df.columns[0]
    df[label_col] = df[label_col].str.strip()

    data = df.iloc[:, 1:].apply(lambda col: col.str.strip())
    empty = (data == "").all(axis=1)
    if empty.any():
        logger.debug("Dropping %d empty row(s) from %s", int(empty.sum()), raw_path)
    df = df.loc[~empty]

    n_before = len(df)
    df = df.drop_duplicates()
    if len(df) < n_before:
        logger.warning(
            "%s: %d duplicate row(s) removed.", raw_path, n_before - len(df)
        )

    df.to_csv(out_path, index=False)
    logger.debug("Saved cleaned GDP table to %s", out_path)
    return df


def clean_population_table(raw_path, out_path) -> pd.DataFrame:
    """Keeps only rows whose first column is a numeric year."""
    df = read_text_table(raw_path)
    years = pd.to_numeric(df.iloc[:, 0].str.strip(), errors="coerce")
    df = df.loc[years.notna()]
    df.to_csv(out_path, index=False)
    logger.debug("Saved cleaned population table to %s", out_path)
    return df


def clean_deflator_table(raw_path, out_path) -> pd.DataFrame:
    """
    Drops the preamble above the row labelled 'Data Series' and promotes
    that row to the header. Tables already headed by it pass through.
    """
    df = read_text_table(raw_path)
    hits = np.flatnonzero(
        df.iloc[:, 0].str.contains("Data Series", case=False, regex=False).to_numpy()
    )
    if hits.size:
        header = df.iloc[hits[0]].str.strip().tolist()
        df = df.iloc[hits[0] + 1:]
        df.columns = header
    df.to_csv(out_path, index=False)
    logger.debug("Saved cleaned deflator table to %s", out_path)
    return df


def process_raw_data(raw_dir, processed_dir, force=False) -> dict:
    """
    Hydrates ``processed_dir`` from ``raw_dir``.

    Files already processed are left alone unless ``force`` is set. The
    deflator file is optional. Returns {'gdp': path, 'population': path,
    ['deflator': path]}.
    """
    os.makedirs(processed_dir, exist_ok=True)
    logger.info("Processing raw data files from %s", raw_dir)

    cleaners = {
        "gdp": clean_gdp_table,
        "population": clean_population_table,
        "deflator": clean_deflator_table,
    }
    summary = {}
    for key, cleaner in cleaners.items():
        raw_path = os.path.join(raw_dir, RAW_FILES[key])
        out_path = os.path.join(processed_dir, PROCESSED_FILES[key])
        if key == "deflator" and not os.path.exists(raw_path):
            continue
        if force or not os.path.exists(out_path):
            logger.debug("Cleaning %s dataset: %s", key, raw_path)
            cleaner(raw_path, out_path)
        else:
            logger.debug("%s dataset already processed (use --force to refresh).", key)
        summary[key] = out_path

    logger.info("Raw data processing complete (output dir: %s).", processed_dir)
    return summary


def resolve_input(processed_path, raw_path):
    """Prefers the processed artefact and falls back to the raw file."""
    return processed_path if os.path.exists(processed_path) else raw_path


# =========================================================================
# WIDE GDP TABLE
# =========================================================================
class GDPTable:
    """
    Wide quarterly table: first column holds series labels, the remaining
    columns hold one quarter each.
    """

    def __init__(self, frame: pd.DataFrame, source: str = None):
        self.frame = frame
        self.source = source

    @classmethod
    def from_csv(cls, path) -> "GDPTable":
        frame = read_text_table(path)
        logger.debug("Read GDP table: %s (%d rows x %d columns)", path, *frame.shape)
        return cls(frame, source=str(path))

    @property
    def labels(self) -> pd.Series:
        return self.frame.iloc[:, 0].astype(str)

    @property
    def quarter_headers(self) -> list:
        return list(self.frame.columns[1:])

    def quarter_index(self):
        """Builds the QuarterIndex over the quarter columns."""
        return build_quarter_index(self.quarter_headers, source=self.source)

    def find_optional_row(self, key, candidates=None):
        """
        Returns the row position for ``key`` or None.

        Candidate phrases are tried in priority order; the first phrase
        contained (case-insensitively) in any label wins, and among the
        matching rows the first is taken.
        """
        if candidates is None:
            candidates = SERIES_CANDIDATES[key]
        rows = self.labels.str.lower()
        for phrase in candidates:
            hits = np.flatnonzero(rows.str.contains(phrase.lower(), regex=False).to_numpy())
            if hits.size:
                logger.debug(
                    "%s -> row %d ('%s') via '%s'",
                    key, hits[0], self.labels.iloc[hits[0]], phrase,
                )
                return int(hits[0])
        return None

    def find_row(self, key, candidates=None) -> int:
        """Like find_optional_row, but raises RequiredSeriesMissingError."""
        if candidates is None:
            candidates = SERIES_CANDIDATES[key]
        row = self.find_optional_row(key, candidates)
        if row is None:
            raise RequiredSeriesMissingError(
                SERIES_NAMES.get(key, key), candidates, source=self.source
            )
        return row

    def series(self, row, index, name=None) -> pd.Series:
        """Numeric values of ``row`` in chronological order of ``index``."""
        # +1 skips the label column
        cells = self.frame.iloc[row, index.columns + 1].to_numpy()
        return pd.Series(
            to_numeric(cells),
            index=index.dates,
            name=name or self.labels.iloc[row],
        )

"""
quarters.py
-----------
Quarter index construction for wide national-accounts tables.

Column headers arrive in several surface syntaxes ("2023Q1", "2023 1Q",
"2023-Q1", "x20231Q", ...). This module parses them into (year, quarter)
pairs, orders them chronologically, and resolves the base quarter used
for deflator rebasing.

Canonical form for matching and display is "{year} {quarter}Q".
"""

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
import pandas as pd

from gdpcycle.config import QUARTER_PATTERNS
from gdpcycle.errors import ConfigurationError, DataFormatError, RangeError

logger = logging.getLogger(__name__)


class QuarterLabel(NamedTuple):
    year: int
    quarter: int

    @property
    def canonical(self) -> str:
        return f"{self.year} {self.quarter}Q"

    @property
    def ordinal(self) -> int:
        return self.year * 4 + self.quarter - 1

    @property
    def end_date(self) -> pd.Timestamp:
        """Last calendar day of the quarter (e.g. 2023-03-31)."""
        return pd.Timestamp(self.year, self.quarter * 3, 1) + pd.offsets.MonthEnd(0)


def parse_quarter_label(text, patterns=QUARTER_PATTERNS):
    """
    Parses a single header into a QuarterLabel.

    Patterns are tried in order and the first match wins. Returns None
    when nothing matches.
    """
    s = str(text).strip()
    for pattern in patterns:
        match = pattern.match(s)
        if match is None:
            continue
        year, quarter = int(match.group(1)), int(match.group(2))
        if 1 <= quarter <= 4:
            return QuarterLabel(year, quarter)
    return None


@dataclass(frozen=True)
class QuarterIndex:
    """
    Chronological time axis built from raw column headers.

    Attributes
    ----------
    headers : tuple of str
        Raw headers in table order.
    valid : np.ndarray of bool
        Parallel to ``headers``; True where the header parsed.
    parsed : tuple of QuarterLabel
        Parsed labels of the valid headers, in table order.
    order : np.ndarray of int
        Permutation of ``parsed`` into chronological order.
    columns : np.ndarray of int
        Positions in ``headers`` of each quarter, chronologically.
    labels : tuple of QuarterLabel
        Labels in chronological order.
    positions : dict
        Canonical label -> chronological position.
    """

    headers: tuple
    valid: np.ndarray
    parsed: tuple
    order: np.ndarray
    columns: np.ndarray
    labels: tuple
    positions: dict = field(repr=False)

    def __len__(self):
        return len(self.labels)

    @property
    def canonical(self) -> list:
        return [q.canonical for q in self.labels]

    @property
    def first(self) -> str:
        return self.labels[0].canonical

    @property
    def last(self) -> str:
        return self.labels[-1].canonical

    @property
    def dates(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex([q.end_date for q in self.labels], name="Quarter")

    @property
    def years(self) -> np.ndarray:
        return np.array([q.year for q in self.labels], dtype=int)

    def resolve(self, base_quarter, patterns=QUARTER_PATTERNS) -> int:
        """
        Returns the chronological position of ``base_quarter``.

        Raises ConfigurationError if the string does not parse and
        RangeError if it parses but is absent from the observed range.
        """
        label = parse_quarter_label(base_quarter, patterns)
        if label is None:
            raise ConfigurationError(f"Invalid base quarter: '{base_quarter}'")
        position = self.positions.get(label.canonical)
        if position is None:
            raise RangeError(label.canonical, self.first, self.last)
        return position

    def until(self, end_quarter, patterns=QUARTER_PATTERNS) -> "QuarterIndex":
        """Restricts the index to quarters on or before ``end_quarter``."""
        label = parse_quarter_label(end_quarter, patterns)
        if label is None:
            raise ConfigurationError(f"Invalid sample end quarter: '{end_quarter}'")
        keep = np.array([q.ordinal <= label.ordinal for q in self.labels], dtype=bool)
        if keep.all():
            return self
        if not keep.any():
            raise RangeError(
                label.canonical, self.first, self.last,
                what="Sample end quarter", problem="is before the",
            )
        labels = tuple(q for q, k in zip(self.labels, keep) if k)
        logger.debug(
            "Sample truncated at %s: %d of %d quarters kept",
            label.canonical, len(labels), len(self.labels),
        )
        return QuarterIndex(
            headers=self.headers,
            valid=self.valid,
            parsed=self.parsed,
            order=self.order[keep],
            columns=self.columns[keep],
            labels=labels,
            positions={q.canonical: i for i, q in enumerate(labels)},
        )


def build_quarter_index(headers, patterns=QUARTER_PATTERNS, source=None) -> QuarterIndex:
    """
    Parses every header and returns the chronological QuarterIndex.

    Headers that fail to parse are kept out of the axis (``valid`` is
    False). A repeated quarter keeps its first column; later duplicates
    are marked invalid so the axis stays strictly increasing.

    Raises DataFormatError when no header parses.
    """
    headers = tuple(str(h) for h in headers)
    valid = np.zeros(len(headers), dtype=bool)
    parsed = []
    seen = set()

    for i, header in enumerate(headers):
        label = parse_quarter_label(header, patterns)
        if label is None:
            continue
        if label.canonical in seen:
            logger.warning(
                "Duplicate quarter header '%s' (%s) ignored; keeping first occurrence.",
                header, label.canonical,
            )
            continue
        seen.add(label.canonical)
        valid[i] = True
        parsed.append(label)

    if not parsed:
        where = f" in {source}" if source else ""
        raise DataFormatError(f"No valid quarter headers{where}")

    n_invalid = len(headers) - len(parsed)
    if n_invalid:
        logger.debug("%d header(s) did not parse as quarters", n_invalid)

    ordinals = np.array([q.ordinal for q in parsed])
    order = np.argsort(ordinals, kind="stable")
    columns = np.flatnonzero(valid)[order]
    labels = tuple(parsed[i] for i in order)

    return QuarterIndex(
        headers=headers,
        valid=valid,
        parsed=tuple(parsed),
        order=order,
        columns=columns,
        labels=labels,
        positions={q.canonical: i for i, q in enumerate(labels)},
    )

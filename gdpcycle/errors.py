"""
errors.py
---------
Failure taxonomy for the analysis pipeline.

Every error is unrecoverable for the dataset it was raised on. The
orchestrator in main.py catches AnalysisError per task so that an
independent task (e.g. growth rates) still runs when another (e.g.
business-cycle analysis) fails.
"""


class AnalysisError(Exception):
    """Base class for all analysis failures."""


class DataFormatError(AnalysisError, ValueError):
    """Input table has no usable structure (e.g. no parseable quarter headers)."""


class RequiredSeriesMissingError(AnalysisError, LookupError):
    """A mandatory row could not be matched by any of its candidate phrases."""

    def __init__(self, series, candidates=(), source=None):
        self.series = series
        self.candidates = tuple(candidates)
        where = f" in {source}" if source else ""
        tried = ", ".join(f"'{c}'" for c in self.candidates)
        super().__init__(
            f"{series} row not found{where} (tried: {tried})"
        )


class ConfigurationError(AnalysisError, ValueError):
    """A configuration value (e.g. the base quarter) cannot be parsed."""


class RangeError(AnalysisError, ValueError):
    """A parsed quarter lies outside the observed data range."""

    def __init__(self, label, first, last, what="Base quarter", problem="not found in"):
        self.label = label
        self.first = first
        self.last = last
        self.what = what
        super().__init__(
            f"{what} {label} {problem} data range: {first} to {last}"
        )


class InvalidBaseValueError(AnalysisError, ValueError):
    """The deflator at the base quarter is zero or missing."""

    def __init__(self, label, value):
        self.label = label
        self.value = value
        super().__init__(
            f"Deflator at base quarter ({label}) is invalid: {value}"
        )

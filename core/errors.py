"""Exception taxonomy for the chart pipeline."""

from __future__ import annotations


class ChartError(Exception):
    """Base class for errors raised while fetching or rendering a chart."""


class TransportError(ChartError):
    """The data source was unreachable or answered with a non-success status."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EmptyDatasetError(ChartError):
    """The dataset holds no samples, so no domain can be computed."""


class MalformedSampleError(ChartError, ValueError):
    """A single sample could not be parsed into a timestamp/value pair."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index

"""Nearest-sample lookup over an ascending timestamp sequence."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import numpy as np

from core.dataset import Dataset, Sample, epoch_array
from core.errors import EmptyDatasetError
from core.scales import to_epoch_seconds


def nearest_index(times: np.ndarray, t: float) -> int:
    """
    Return the index of the entry in ascending ``times`` closest to ``t``.

    Bisects for ``i`` with ``times[i-1] <= t < times[i]``; the later candidate
    wins only when strictly closer, so exact ties resolve to the earlier one.
    """
    n = int(times.shape[0])
    if n == 0:
        raise EmptyDatasetError("cannot locate a sample in an empty sequence")
    idx = int(np.searchsorted(times, t, side="right"))
    if idx <= 0:
        return 0
    if idx >= n:
        return n - 1
    left = idx - 1
    if t - times[left] > times[idx] - t:
        return idx
    return left


def _query_seconds(query_time: datetime | float) -> float:
    if isinstance(query_time, datetime):
        return to_epoch_seconds(query_time)
    return float(query_time)


class NearestSampleLocator:
    """Precomputes the timestamp array once so each query costs O(log n)."""

    __slots__ = ("_samples", "_times")

    def __init__(self, samples: Sequence[Sample] | Dataset) -> None:
        if isinstance(samples, Dataset):
            self._samples = samples.samples
            self._times = samples.epoch_seconds()
        else:
            self._samples = tuple(samples)
            self._times = epoch_array(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def locate(self, query_time: datetime | float) -> Sample:
        """``query_time`` is a datetime or POSIX seconds."""
        return self._samples[nearest_index(self._times, _query_seconds(query_time))]


def locate(samples: Sequence[Sample], query_time: datetime | float) -> Sample:
    """One-shot lookup; build a ``NearestSampleLocator`` for repeated queries."""
    return NearestSampleLocator(samples).locate(query_time)

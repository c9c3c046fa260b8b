# core/dataset.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from core.errors import EmptyDatasetError, MalformedSampleError
from core.scales import to_epoch_seconds

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Sample:
    """One observation of the series. ``value`` is ``None`` when the provider had no measurement."""

    timestamp: datetime
    value: float | None


@dataclass(frozen=True)
class Dataset:
    """
    Immutable series handed to the renderer for one render cycle.
    - ``samples`` are sorted ascending by timestamp (not re-checked here).
    - ``unit`` labels every value of the series (e.g. ``"Wh"``).
    """

    unit: str
    samples: tuple[Sample, ...] = ()
    time_unit: str = ""
    _epoch: np.ndarray | None = field(default=None, init=False, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    def epoch_seconds(self) -> np.ndarray:
        """Timestamps as POSIX seconds (float64), cached on first use."""
        if self._epoch is None:
            arr = epoch_array(self.samples)
            arr.setflags(write=False)
            object.__setattr__(self, "_epoch", arr)
        return self._epoch

    def tzinfo(self):
        """Offset of the first sample; used to label times the way the provider reported them."""
        if not self.samples:
            return timezone.utc
        return self.samples[0].timestamp.tzinfo or timezone.utc


def epoch_array(samples: Sequence[Sample]) -> np.ndarray:
    """POSIX seconds for each sample; naive timestamps count as UTC."""
    return np.fromiter(
        (to_epoch_seconds(s.timestamp) for s in samples),
        dtype=np.float64,
        count=len(samples),
    )


def time_domain(dataset: Dataset) -> tuple[datetime, datetime]:
    if dataset.is_empty:
        raise EmptyDatasetError("dataset has no samples")
    stamps = [s.timestamp for s in dataset.samples]
    return min(stamps), max(stamps)


def value_domain(dataset: Dataset) -> tuple[float, float]:
    """Return ``(0, max value)``; missing values are ignored and the bound is never negative."""
    if dataset.is_empty:
        raise EmptyDatasetError("dataset has no samples")
    # Lower bound stays at zero; an all-negative series gives [0, 0], widened to [0, 1] by the value scale.
    present = [s.value for s in dataset.samples if s.value is not None]
    upper = max(present) if present else 0.0
    return 0.0, max(0.0, float(upper))


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an ISO-8601 timestamp.
    Accepts a trailing ``Z`` and a space separator; naive values are taken as UTC.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"timestamp must be a non-empty string, got {raw!r}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_sample(entry: Mapping[str, Any], *, index: int | None = None) -> Sample:
    if not isinstance(entry, Mapping):
        raise MalformedSampleError(f"sample is not an object: {entry!r}", index=index)
    try:
        when = parse_timestamp(entry.get("date"))
    except (TypeError, ValueError) as exc:
        raise MalformedSampleError(f"bad date {entry.get('date')!r}: {exc}", index=index) from exc

    raw_value = entry.get("value")
    if raw_value is None:
        value = None
    elif isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
        raise MalformedSampleError(f"bad value {raw_value!r}", index=index)
    elif not math.isfinite(raw_value):
        value = None
    else:
        value = float(raw_value)
    return Sample(when, value)


def parse_samples(entries: Iterable[Mapping[str, Any]]) -> tuple[Sample, ...]:
    """Parse entries in order, skipping (and logging) the ones that are malformed."""
    out: list[Sample] = []
    for idx, entry in enumerate(entries):
        try:
            out.append(parse_sample(entry, index=idx))
        except MalformedSampleError as exc:
            LOG.warning("Skipping sample %d: %s", idx, exc)
    return tuple(out)


def parse_dataset(payload: Mapping[str, Any]) -> Dataset:
    """
    Build a Dataset from the energy payload.

    Both the full response ``{"energy": {...}}`` and the bare inner object with
    ``unit`` / ``values`` keys are accepted.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("payload must be a JSON object")
    body = payload.get("energy", payload)
    if not isinstance(body, Mapping):
        raise ValueError("'energy' must be a JSON object")
    unit = body.get("unit")
    values = body.get("values")
    if not isinstance(unit, str):
        raise ValueError("payload is missing a string 'unit'")
    if not isinstance(values, Sequence) or isinstance(values, (str, bytes)):
        raise ValueError("payload is missing a 'values' list")
    time_unit = body.get("timeUnit") or ""
    return Dataset(unit=unit, samples=parse_samples(values), time_unit=str(time_unit))

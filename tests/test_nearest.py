import random
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from core.dataset import Dataset, Sample
from core.errors import EmptyDatasetError
from core.nearest import NearestSampleLocator, locate, nearest_index


BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _samples(offsets_s, values=None):
    values = values if values is not None else list(range(len(offsets_s)))
    return [Sample(BASE + timedelta(seconds=o), v) for o, v in zip(offsets_s, values)]


def test_locate_returns_nearest_sample():
    samples = _samples([0.0, 0.5, 1.0, 1.5], [10.0, 12.0, 14.0, 18.0])

    hit = locate(samples, BASE + timedelta(seconds=0.6))
    assert hit.value == pytest.approx(12.0)

    hit = locate(samples, BASE + timedelta(seconds=1.4))
    assert hit.value == pytest.approx(18.0)


def test_exact_tie_prefers_earlier_sample():
    samples = _samples([0, 60, 120])
    assert locate(samples, BASE + timedelta(seconds=30)) is samples[0]
    assert locate(samples, BASE + timedelta(seconds=90)) is samples[1]


def test_exact_match_returns_that_sample():
    samples = _samples([0, 60, 120])
    for s in samples:
        assert locate(samples, s.timestamp) is s


def test_queries_outside_span_clamp_to_ends():
    samples = _samples([0, 60, 120])
    assert locate(samples, BASE - timedelta(hours=1)) is samples[0]
    assert locate(samples, BASE + timedelta(hours=1)) is samples[-1]


def test_single_sample_always_wins():
    samples = _samples([42])
    assert locate(samples, BASE) is samples[0]
    assert locate(samples, BASE + timedelta(days=3)) is samples[0]


def test_empty_sequence_raises():
    with pytest.raises(EmptyDatasetError):
        locate([], BASE)
    with pytest.raises(EmptyDatasetError):
        nearest_index(np.zeros(0), 0.0)


def test_locator_accepts_dataset_and_posix_seconds():
    samples = tuple(_samples([0, 900, 1800]))
    locator = NearestSampleLocator(Dataset(unit="Wh", samples=samples))
    assert len(locator) == 3
    assert locator.locate(BASE.timestamp() + 1000.0) is samples[1]


def test_naive_query_is_treated_as_utc():
    samples = _samples([0, 3600])
    naive = datetime(2024, 1, 1, 0, 50)
    assert locate(samples, naive) is samples[1]


def test_matches_linear_scan_on_random_series():
    rng = random.Random(7)
    for _ in range(50):
        offsets = sorted(rng.sample(range(0, 100_000), rng.randint(1, 40)))
        times = np.asarray(offsets, dtype=float)
        for _ in range(30):
            q = rng.uniform(offsets[0], offsets[-1])
            idx = nearest_index(times, q)
            dists = np.abs(times - q)
            best = int(np.flatnonzero(dists == dists.min())[0])
            assert idx == best


def test_naive_samples_ignore_host_timezone(new_york_host_tz):
    samples = [Sample(datetime(2024, 1, 1, h), float(h)) for h in (0, 1, 5)]
    assert locate(samples, datetime(2024, 1, 1, 0, 50)) is samples[1]
    locator = NearestSampleLocator(Dataset(unit="Wh", samples=tuple(samples)))
    assert locator.locate(datetime(2024, 1, 1, 4, tzinfo=timezone.utc)) is samples[2]

#!/usr/bin/env python3
"""Time nearest-sample lookups and hover updates over large synthetic series."""
from __future__ import annotations

import argparse
import time
from datetime import datetime, timedelta, timezone

import numpy as np

from core.chart_model import build_chart
from core.dataset import Dataset, Sample
from core.nearest import NearestSampleLocator
from core.viewport import Viewport


def make_dataset(n: int, *, step_s: float = 900.0, seed: int = 0) -> Dataset:
    rng = np.random.default_rng(seed)
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    values = rng.uniform(0.0, 1500.0, size=n)
    samples = tuple(
        Sample(start + timedelta(seconds=i * step_s), float(v)) for i, v in enumerate(values)
    )
    return Dataset(unit="Wh", samples=samples)


def _time_queries(locator: NearestSampleLocator, queries: np.ndarray) -> float:
    t0 = time.perf_counter()
    for q in queries:
        locator.locate(float(q))
    return time.perf_counter() - t0


def _time_hover(dataset: Dataset, viewport: Viewport, n_events: int) -> float:
    controller = build_chart(dataset, viewport).hover_controller()
    xs = np.linspace(viewport.plot_left, viewport.plot_right, n_events)
    t0 = time.perf_counter()
    for x in xs:
        controller.on_pointer_move(float(x), viewport.plot_top + 1.0)
    return time.perf_counter() - t0


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--sizes", type=int, nargs="+", default=[96, 10_000, 1_000_000])
    p.add_argument("--queries", type=int, default=20_000)
    args = p.parse_args()

    viewport = Viewport()
    for n in args.sizes:
        dataset = make_dataset(n)
        times = dataset.epoch_seconds()
        locator = NearestSampleLocator(dataset)
        queries = np.random.default_rng(1).uniform(times[0], times[-1], size=args.queries)
        elapsed = _time_queries(locator, queries)
        hover = _time_hover(dataset, viewport, min(args.queries, 5_000))
        print(
            f"n={n:>9d}  locate={elapsed / args.queries * 1e6:7.2f} us/query  "
            f"hover={hover / min(args.queries, 5_000) * 1e6:7.2f} us/event"
        )


if __name__ == "__main__":
    main()

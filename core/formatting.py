"""Text formatting shared by the tooltip and the axes."""
from __future__ import annotations

from datetime import datetime
from math import floor, isfinite, log10

CLOCK_FORMAT = "%H:%M"


def format_clock(when: datetime) -> str:
    """Clock time in the timestamp's own UTC offset, e.g. ``"01:00"``."""
    return when.strftime(CLOCK_FORMAT)


def format_value(value: float | None) -> str:
    """Thousands-separated value with two decimals; missing values read as zero."""
    if value is None:
        value = 0.0
    numeric = float(value)
    if not isfinite(numeric):
        return ""
    return f"{numeric:,.2f}"


def format_quantity(value: float | None, unit: str) -> str:
    text = format_value(value)
    return f"{text} {unit}" if unit else text


def axis_title(unit: str) -> str:
    return f"energy ({unit})" if unit else "energy"


def format_tick_values(values) -> list[str]:
    """Labels for evenly spaced value ticks, with just enough decimals for the step."""
    seq = [float(v) for v in values]
    if not seq:
        return []
    decimals = 0
    if len(seq) > 1:
        step = abs(seq[1] - seq[0])
        if step > 0 and isfinite(step):
            decimals = max(0, -floor(log10(step) + 1e-9))
    return [f"{v:,.{decimals}f}" if isfinite(v) else "" for v in seq]

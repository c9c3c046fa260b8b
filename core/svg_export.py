"""Static SVG rendition of a laid-out chart (no hover overlay)."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from core.chart_model import ChartModel
from core.formatting import format_clock, format_tick_values
from core.scales import TimeScale


def _time_labels(scale: TimeScale, seconds) -> list[str]:
    return [format_clock(datetime.fromtimestamp(float(t), tz=scale.tz)) for t in seconds]


def chart_to_svg(
    model: ChartModel,
    *,
    line_color: str = "steelblue",
    fill_color: str = "lightgreen",
    foreground: str = "currentColor",
    grid_alpha: float = 0.1,
) -> str:
    vp = model.viewport
    left, top, right, bottom = vp.plot_rect
    out: list[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{vp.width:g}" height="{vp.height:g}" '
        f'viewBox="0 0 {vp.width:g} {vp.height:g}" font-family="sans-serif" font-size="10">',
    ]

    # x axis: domain line along the bottom, no outer ticks
    out.append(
        f'  <g fill="none" stroke="{foreground}">'
        f'<line x1="{left:.3f}" y1="{bottom:.3f}" x2="{right:.3f}" y2="{bottom:.3f}"/></g>'
    )
    for px, label in zip(model.x_ticks.pixels, _time_labels(model.time_scale, model.x_ticks.values)):
        out.append(
            f'  <line x1="{px:.3f}" y1="{bottom:.3f}" x2="{px:.3f}" y2="{bottom + 6:.3f}" '
            f'stroke="{foreground}"/>'
        )
        out.append(
            f'  <text x="{px:.3f}" y="{bottom + 9:.3f}" dy="0.71em" text-anchor="middle" '
            f'fill="{foreground}">{escape(label)}</text>'
        )

    # y axis: ticks plus gridlines, no domain line
    for py, label in zip(model.y_ticks.pixels, format_tick_values(model.y_ticks.values)):
        out.append(
            f'  <line x1="{left - 6:.3f}" y1="{py:.3f}" x2="{left:.3f}" y2="{py:.3f}" '
            f'stroke="{foreground}"/>'
        )
        out.append(
            f'  <line x1="{left:.3f}" y1="{py:.3f}" x2="{right:.3f}" y2="{py:.3f}" '
            f'stroke="{foreground}" stroke-opacity="{grid_alpha:g}"/>'
        )
        out.append(
            f'  <text x="{left - 9:.3f}" y="{py:.3f}" dy="0.32em" text-anchor="end" '
            f'fill="{foreground}">{escape(label)}</text>'
        )
    out.append(
        f'  <text x="0" y="10" fill="{foreground}" text-anchor="start">{escape(model.y_title)}</text>'
    )

    out.append(f'  <path d="{model.area.to_svg_path()}Z" fill="{fill_color}" stroke="none"/>')
    out.append(
        f'  <path d="{model.path.to_svg_path()}" fill="none" stroke="{line_color}" stroke-width="2"/>'
    )
    out.append("</svg>")
    return "\n".join(out) + "\n"


def write_chart_svg(path: str | Path, model: ChartModel, **style) -> Path:
    path = Path(path)
    path.write_text(chart_to_svg(model, **style), encoding="utf-8")
    return path

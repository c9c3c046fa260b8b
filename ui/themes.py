"""Theme definitions for the energy chart window."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeDefinition:
    """Palette configuration for the chart.

    Parameters
    ----------
    name:
        Human-friendly display name for the theme.
    background / foreground:
        Canvas background and the color used for axes and labels.
    line_color / line_width:
        Pen for the series line.
    fill_color:
        Brush for the area under the line.
    grid_alpha:
        Opacity of horizontal gridlines (0..1).
    crosshair_color / marker_fill / marker_edge:
        Hover overlay colors.
    tooltip_background / tooltip_text:
        Colors of the floating tooltip.
    stylesheet:
        Application stylesheet snippet tailored to this palette.
    """

    name: str
    background: str
    foreground: str
    line_color: str
    fill_color: str
    crosshair_color: str
    marker_fill: str
    marker_edge: str
    tooltip_background: str
    tooltip_text: str
    stylesheet: str
    line_width: float = 2.0
    grid_alpha: float = 0.1


STYLESHEET_TEMPLATE = """
QMainWindow {{ background-color: {window_bg}; color: {text_primary}; }}
QLabel {{ font-size: 13px; color: {text_primary}; }}
QLabel#statusLabel {{ color: {text_muted}; padding: 12px; }}
QLabel#errorLabel {{ color: {error}; font-weight: 600; padding: 12px; }}
"""


def _stylesheet(*, window_bg: str, text_primary: str, text_muted: str, error: str) -> str:
    return STYLESHEET_TEMPLATE.format(
        window_bg=window_bg,
        text_primary=text_primary,
        text_muted=text_muted,
        error=error,
    )


THEMES: dict[str, ThemeDefinition] = {
    "Light": ThemeDefinition(
        name="Light",
        background="#ffffff",
        foreground="#000000",
        line_color="#4682b4",  # steelblue
        fill_color="#90ee90",  # lightgreen
        crosshair_color="#999999",
        marker_fill="#4682b4",
        marker_edge="#ffffff",
        tooltip_background="#ffffffe6",
        tooltip_text="#222222",
        stylesheet=_stylesheet(
            window_bg="#ffffff", text_primary="#222222", text_muted="#666666", error="#b3261e"
        ),
    ),
    "Midnight": ThemeDefinition(
        name="Midnight",
        background="#0f172a",
        foreground="#cbd5e1",
        line_color="#5f8bff",
        fill_color="#1f6f4a",
        crosshair_color="#94a3b8",
        marker_fill="#5f8bff",
        marker_edge="#0f172a",
        tooltip_background="#1e293be6",
        tooltip_text="#f1f5f9",
        stylesheet=_stylesheet(
            window_bg="#0f172a", text_primary="#e2e8f0", text_muted="#94a3b8", error="#f87171"
        ),
        grid_alpha=0.15,
    ),
}

DEFAULT_THEME = "Light"


def resolve_theme(name: str | None) -> ThemeDefinition:
    """Case-insensitive lookup that falls back to ``DEFAULT_THEME``."""
    if name:
        for key, theme in THEMES.items():
            if key.lower() == name.strip().lower():
                return theme
    return THEMES[DEFAULT_THEME]

"""Core package exports for the energy chart application."""

# Re-export commonly used modules for convenience.
from . import chart_model, dataset, energy_source, errors, formatting, hover, nearest, path_builder, scales, svg_export, ticks, viewport

__all__ = [
    "chart_model",
    "dataset",
    "energy_source",
    "errors",
    "formatting",
    "hover",
    "nearest",
    "path_builder",
    "scales",
    "svg_export",
    "ticks",
    "viewport",
]

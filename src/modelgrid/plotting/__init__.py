"""Plotly figures for grids and augmented tables (requires plotly)."""

from modelgrid.plotting.figures import prediction_figure, residual_figure

__all__ = [
    "prediction_figure",
    "residual_figure",
]

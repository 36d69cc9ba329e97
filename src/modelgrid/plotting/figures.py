"""Plotly figure dictionaries built from grids and augmented tables.

These helpers sit on the visualization side of the boundary: they read the
plain tables produced by GridBuilder, ModelAugmenter and
ComparativeFitPipeline and never feed anything back into them. The core
packages do not import this module.
"""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from modelgrid.config import AugmentConfig
from modelgrid.errors import InvalidArgument
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)


def _axis_values(s: pd.Series) -> list:
    """Plain list for a trace axis; non-numeric values become strings."""
    if pd.api.types.is_numeric_dtype(s) or pd.api.types.is_datetime64_any_dtype(s):
        return s.tolist()
    return s.astype(str).tolist()


def _require(frame: pd.DataFrame, columns: Sequence[str], what: str) -> None:
    absent = [c for c in columns if c not in frame.columns]
    if absent:
        raise InvalidArgument(f"{what} is missing columns {absent}")


def prediction_figure(
    data: pd.DataFrame,
    predictions: pd.DataFrame,
    x: str,
    y: str,
    labels: Sequence[str],
    *,
    color_col: Optional[str] = None,
    config: Optional[AugmentConfig] = None,
) -> dict:
    """Raw points of y against x, overlaid with one prediction line per model.

    Args:
        data: Raw dataset holding x and y.
        predictions: Output of ComparativeFitPipeline.compare() (or any table with
            x and prediction_<label> columns).
        x: Column on the x axis.
        y: Observed response column.
        labels: Model labels to draw, in legend order.
        color_col: Optional grid column; draws one line per model per value.
        config: Naming config used to locate prediction columns.

    Returns:
        Plotly figure dictionary.
    """
    config = config or AugmentConfig()
    pred_cols = [config.prediction_column(str(label)) for label in labels]
    _require(data, [x, y], "data")
    _require(predictions, [x, *pred_cols] + ([color_col] if color_col else []), "predictions")

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=_axis_values(data[x]),
        y=data[y].tolist(),
        mode="markers",
        name="data",
        marker=dict(color="rgba(120, 120, 120, 0.5)"),
    ))

    if color_col:
        groups = [(str(v), g) for v, g in predictions.groupby(color_col, sort=False, observed=True)]
    else:
        groups = [("", predictions)]

    for label, col in zip(labels, pred_cols):
        for group_name, g in groups:
            name = f"{label} ({color_col}={group_name})" if color_col else str(label)
            fig.add_trace(go.Scatter(
                x=_axis_values(g[x]),
                y=g[col].tolist(),
                mode="lines+markers",
                name=name,
            ))

    fig.update_layout(
        margin=dict(l=40, r=20, t=40, b=60),
        xaxis_title=x,
        yaxis_title=y,
        uirevision="keep",
    )
    logger.debug(f"prediction_figure: {len(fig.data)} traces, labels={list(labels)}")
    return fig.to_dict()


def residual_figure(
    augmented: pd.DataFrame,
    x: str,
    labels: Sequence[str],
    *,
    config: Optional[AugmentConfig] = None,
) -> dict:
    """Residuals of each model against x, with a zero reference line.

    Rows with an absent residual (missing response) are skipped.
    """
    config = config or AugmentConfig()
    resid_cols = [config.residual_column(str(label)) for label in labels]
    _require(augmented, [x, *resid_cols], "augmented")

    fig = go.Figure()
    for label, col in zip(labels, resid_cols):
        present = augmented[augmented[col].notna()]
        fig.add_trace(go.Scatter(
            x=_axis_values(present[x]),
            y=present[col].tolist(),
            mode="markers",
            name=str(label),
        ))
    fig.add_hline(y=0, line_width=2, line_color="white")
    fig.update_layout(
        margin=dict(l=40, r=20, t=40, b=60),
        xaxis_title=x,
        yaxis_title="residual",
        uirevision="keep",
    )
    return fig.to_dict()

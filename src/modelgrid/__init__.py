"""
modelgrid: prediction grids and model augmentation for model-based visualization.

This package provides:
- GridBuilder: distinct combinations of column values, with nested columns
- ModelAugmenter: prediction and residual columns from any fitted model
- ComparativeFitPipeline: competing models side by side over one grid
- Logging utilities for library and script use

Plotly figure helpers live in ``modelgrid.plotting`` and are not imported here.

For logging output in standalone scripts:
    ```python
    from modelgrid.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from modelgrid.utils.logging import configure_logging, get_logger

from modelgrid.augment import (
    BaseFittedModel,
    FittedModel,
    FunctionModel,
    LookupModel,
    ModelAugmenter,
    StatsmodelsModel,
    add_predictions,
    add_residuals,
    gather_predictions,
)
from modelgrid.config import AugmentConfig
from modelgrid.dataset import ColumnKind
from modelgrid.errors import (
    InvalidArgument,
    LabelCollision,
    MissingPredictor,
    ModelGridError,
    ModelUnavailable,
    PredictorMismatch,
    ResponseRequired,
)
from modelgrid.grid import GridBuilder, NestGroup, SeqRange, data_grid, nest, seq_range, weekday_levels
from modelgrid.pipeline import ComparativeFitPipeline

# NullHandler so library logs don't reach the root logger unless an
# application (or configure_logging()) sets up handlers.
_logger = logging.getLogger("modelgrid")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "AugmentConfig",
    "BaseFittedModel",
    "ColumnKind",
    "ComparativeFitPipeline",
    "FittedModel",
    "FunctionModel",
    "GridBuilder",
    "InvalidArgument",
    "LabelCollision",
    "LookupModel",
    "MissingPredictor",
    "ModelAugmenter",
    "ModelGridError",
    "ModelUnavailable",
    "NestGroup",
    "PredictorMismatch",
    "ResponseRequired",
    "SeqRange",
    "StatsmodelsModel",
    "add_predictions",
    "add_residuals",
    "configure_logging",
    "data_grid",
    "gather_predictions",
    "get_logger",
    "nest",
    "seq_range",
    "weekday_levels",
]

__version__ = "0.1.0"

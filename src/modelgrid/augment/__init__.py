"""Model augmentation: prediction and residual columns from fitted models."""

from modelgrid.augment.fitted_model import (
    BaseFittedModel,
    FittedModel,
    FunctionModel,
    LookupModel,
    StatsmodelsModel,
)
from modelgrid.augment.model_augmenter import (
    ModelAugmenter,
    add_predictions,
    add_residuals,
    gather_predictions,
)

__all__ = [
    "BaseFittedModel",
    "FittedModel",
    "FunctionModel",
    "LookupModel",
    "ModelAugmenter",
    "StatsmodelsModel",
    "add_predictions",
    "add_residuals",
    "gather_predictions",
]

"""Side-by-side predictions from competing models over one grid.

ComparativeFitPipeline builds a grid spanning exactly the predictors of the
supplied models and predicts every model over it. Validation runs before the
grid is built and before any model is called.
"""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from modelgrid.augment.model_augmenter import ModelAugmenter, ModelsLike, gather_predictions, normalize_models
from modelgrid.dataset import DataLike
from modelgrid.errors import PredictorMismatch
from modelgrid.grid.column_spec import ColumnSpec, spec_columns
from modelgrid.grid.grid_builder import GridBuilder
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)


class ComparativeFitPipeline:
    """Orchestrates GridBuilder and ModelAugmenter for model comparison.

    Attributes:
        grid_builder: Builds the prediction grid (level orderings live here).
        augmenter: Adds prediction columns (naming and execution config live here).
    """

    def __init__(
        self,
        grid_builder: Optional[GridBuilder] = None,
        augmenter: Optional[ModelAugmenter] = None,
    ) -> None:
        self.grid_builder = grid_builder or GridBuilder()
        self.augmenter = augmenter or ModelAugmenter()

    def compare(
        self,
        dataset: DataLike,
        column_specs_for_grid: Sequence[ColumnSpec],
        models_by_label: ModelsLike,
    ) -> pd.DataFrame:
        """Grid over the models' predictors plus one prediction column per model.

        Returns:
            DataFrame with columns [grid columns..., prediction_<label>...] in the
            order models were supplied; one row per grid row. No residuals.

        Raises:
            LabelCollision: duplicate labels.
            PredictorMismatch: grid columns differ from the union of model predictors.
        """
        models = normalize_models(models_by_label, self.augmenter.config)
        grid_columns = spec_columns(column_specs_for_grid)
        self.validate_predictors(grid_columns, models)

        grid = self.grid_builder.build(dataset, column_specs_for_grid)
        result = self.augmenter.predict(grid, models)
        logger.info(
            f"ComparativeFitPipeline.compare: {len(result)} grid rows, "
            f"models={[label for label, _ in models]}"
        )
        return result

    def compare_long(
        self,
        dataset: DataLike,
        column_specs_for_grid: Sequence[ColumnSpec],
        models_by_label: ModelsLike,
    ) -> pd.DataFrame:
        """compare() melted to [grid columns..., "model", "prediction"], model-major."""
        models = normalize_models(models_by_label, self.augmenter.config)
        wide = self.compare(dataset, column_specs_for_grid, models)
        return gather_predictions(wide, [label for label, _ in models], config=self.augmenter.config)

    def raw_residuals(self, dataset: DataLike, models_by_label: ModelsLike) -> pd.DataFrame:
        """Predictions and residuals against the original dataset (for residual plots)."""
        return self.augmenter.augment(dataset, models_by_label, include_residuals=True)

    @staticmethod
    def validate_predictors(grid_columns: Sequence[str], models: Sequence[tuple[str, object]]) -> None:
        """Raise PredictorMismatch unless grid_columns equal the union of the models' predictors."""
        grid_set = set(grid_columns)
        needed: set[str] = set()
        for label, model in models:
            predictors = set(model.predictor_columns())
            lacking = sorted(predictors - grid_set)
            if lacking:
                raise PredictorMismatch(f"Model {label!r} needs {lacking}, which the grid does not span")
            needed |= predictors
        unused = [c for c in grid_columns if c not in needed]
        if unused:
            raise PredictorMismatch(f"Grid columns {unused} are not predictors of any model")

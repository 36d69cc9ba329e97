"""Append model predictions and residuals to a dataset.

ModelAugmenter takes a dataset (raw data or a grid) and labelled fitted
models, and returns a new DataFrame with one ``prediction_<label>`` column per
model and, on request, one ``residual_<label>`` column per model whose
response column is present in the data.

Augmentation is all-or-nothing: every label, predictor and response is
validated, and every new column computed, before the result frame is built.
The input frame is never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from modelgrid.augment.fitted_model import FittedModel, response_column_of
from modelgrid.config import AugmentConfig
from modelgrid.dataset import DataLike, as_frame, frame_rows
from modelgrid.errors import (
    InvalidArgument,
    LabelCollision,
    MissingPredictor,
    ModelUnavailable,
    ResponseRequired,
)
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)

ModelsLike = Union[Mapping[Any, Any], Iterable[tuple[Any, Any]]]


def normalize_models(models_by_label: ModelsLike, config: Optional[AugmentConfig] = None) -> list[tuple[str, Any]]:
    """Turn a label -> model mapping (or a sequence of pairs) into ordered (str label, model) pairs.

    Raises:
        InvalidArgument: malformed pair, empty label, or an object that is not a FittedModel.
        LabelCollision: two labels that produce the same output column name.
    """
    config = config or AugmentConfig()
    if isinstance(models_by_label, Mapping):
        items = list(models_by_label.items())
    else:
        items = list(models_by_label)

    out: list[tuple[str, Any]] = []
    output_columns: dict[str, str] = {}
    for item in items:
        try:
            raw_label, model = item
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"Expected (label, model) pairs, got {item!r}") from e
        label = str(raw_label)
        if not label:
            raise InvalidArgument("Model labels must be non-empty")
        if not isinstance(model, FittedModel):
            raise InvalidArgument(
                f"Model {label!r} ({type(model).__name__}) does not provide predictor_columns() and predict()"
            )
        for col in (config.prediction_column(label), config.residual_column(label)):
            if col in output_columns:
                raise LabelCollision(
                    f"Labels {output_columns[col]!r} and {label!r} both produce output column {col!r}"
                )
            output_columns[col] = label
        out.append((label, model))
    return out


class ModelAugmenter:
    """Adds prediction and residual columns for labelled fitted models.

    Attributes:
        config: Output column naming and execution settings.
    """

    def __init__(self, config: Optional[AugmentConfig] = None) -> None:
        self.config = config or AugmentConfig()

    def predict(self, dataset: DataLike, models_by_label: ModelsLike) -> pd.DataFrame:
        """Dataset plus ``prediction_<label>`` for every model, in model order."""
        return self._augment(dataset, models_by_label, with_predictions=True, with_residuals=False)

    def residuals(self, dataset: DataLike, models_by_label: ModelsLike) -> pd.DataFrame:
        """Dataset plus ``residual_<label>`` for every model whose response column is present."""
        return self._augment(dataset, models_by_label, with_predictions=False, with_residuals=True)

    def augment(
        self,
        dataset: DataLike,
        models_by_label: ModelsLike,
        include_residuals: bool = False,
    ) -> pd.DataFrame:
        """Dataset plus all prediction columns, then (optionally) all residual columns."""
        return self._augment(dataset, models_by_label, with_predictions=True, with_residuals=include_residuals)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _augment(
        self,
        dataset: DataLike,
        models_by_label: ModelsLike,
        *,
        with_predictions: bool,
        with_residuals: bool,
    ) -> pd.DataFrame:
        df = as_frame(dataset)
        models = normalize_models(models_by_label, self.config)

        responses: dict[str, str] = {}
        if with_residuals:
            responses = self._residual_responses(df, models)

        planned: list[str] = []
        if with_predictions:
            planned += [self.config.prediction_column(label) for label, _ in models]
        planned += [self.config.residual_column(label) for label in responses]
        existing = [c for c in planned if c in df.columns]
        if existing:
            raise LabelCollision(f"Output columns already exist in dataset: {existing}")

        needed = [(label, model) for label, model in models if with_predictions or label in responses]
        for label, model in needed:
            check_predictors(df, label, model)

        predictions = {label: self._predict_model(df, label, model) for label, model in needed}

        new_columns: dict[str, pd.Series] = {}
        if with_predictions:
            for label, _ in models:
                new_columns[self.config.prediction_column(label)] = pd.Series(predictions[label], index=df.index)
        for label, response in responses.items():
            observed = _numeric_response(df, response)
            new_columns[self.config.residual_column(label)] = pd.Series(observed - predictions[label], index=df.index)

        logger.info(
            f"ModelAugmenter: {len(df)} rows, labels={[label for label, _ in models]}, "
            f"added columns={list(new_columns)}"
        )
        return df.assign(**new_columns)

    def _residual_responses(self, df: pd.DataFrame, models: list[tuple[str, Any]]) -> dict[str, str]:
        """label -> response column for models whose response is in df; ResponseRequired if undeclared."""
        responses: dict[str, str] = {}
        for label, model in models:
            response = response_column_of(model)
            if not response:
                raise ResponseRequired(f"Residuals requested for model {label!r}, which declares no response column")
            if response not in df.columns:
                logger.warning(
                    f"Response column {response!r} of model {label!r} not in dataset; no residual column added"
                )
                continue
            responses[label] = response
        return responses

    def _predict_model(self, df: pd.DataFrame, label: str, model: Any) -> np.ndarray:
        subset = df[list(model.predictor_columns())]
        if len(subset) == 0:
            return np.empty(0, dtype=float)

        if self.config.max_workers > 1:
            def run() -> Sequence[Any]:
                rows = frame_rows(subset)
                with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                    return list(pool.map(model.predict, rows))
        elif hasattr(model, "predict_frame"):
            def run() -> Sequence[Any]:
                return model.predict_frame(subset)
        else:
            def run() -> Sequence[Any]:
                return [model.predict(row) for row in frame_rows(subset)]

        raw = self._call_model(label, run)
        try:
            values = np.asarray(raw, dtype=float)
        except (TypeError, ValueError) as e:
            raise ModelUnavailable(f"Model {label!r} returned non-numeric predictions") from e
        if values.shape != (len(df),):
            raise ModelUnavailable(
                f"Model {label!r} returned {values.shape} predictions for {len(df)} rows"
            )
        return values

    def _call_model(self, label: str, run: Callable[[], Sequence[Any]]) -> Sequence[Any]:
        """Invoke a prediction pass, mapping any failure or timeout to ModelUnavailable."""
        try:
            if self.config.timeout is None:
                return run()
            executor = ThreadPoolExecutor(max_workers=1)
            try:
                future = executor.submit(run)
                done, _ = wait([future], timeout=self.config.timeout)
                if not done:
                    raise ModelUnavailable(f"Model {label!r} did not finish within {self.config.timeout}s")
                return future.result()
            finally:
                executor.shutdown(wait=False, cancel_futures=True)
        except ModelUnavailable:
            raise
        except Exception as e:
            raise ModelUnavailable(f"Model {label!r} failed to predict: {e}") from e


def check_predictors(df: pd.DataFrame, label: str, model: Any) -> None:
    """Raise MissingPredictor if df lacks a predictor column or a row has no value for one."""
    predictors = list(model.predictor_columns())
    absent = [c for c in predictors if c not in df.columns]
    if absent:
        raise MissingPredictor(f"Model {label!r} needs columns {absent} that the dataset lacks")
    if not predictors or df.empty:
        return
    isna = df[predictors].isna()
    incomplete = isna.any(axis=1).to_numpy()
    if incomplete.any():
        pos = int(np.argmax(incomplete))
        cols = [c for c, flag in zip(predictors, isna.iloc[pos]) if flag]
        raise MissingPredictor(
            f"Model {label!r}: {int(incomplete.sum())} row(s) lack predictor values "
            f"(first at index {df.index[pos]!r}, missing {cols})"
        )


def _numeric_response(df: pd.DataFrame, response: str) -> np.ndarray:
    try:
        return pd.to_numeric(df[response], errors="raise").to_numpy(dtype=float, na_value=np.nan)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Response column {response!r} holds non-numeric values") from e


def gather_predictions(
    frame: pd.DataFrame,
    labels: Sequence[str],
    kind: str = "prediction",
    config: Optional[AugmentConfig] = None,
) -> pd.DataFrame:
    """Melt wide ``prediction_<label>`` (or ``residual_<label>``) columns to long form.

    Returns a frame with the non-model columns, a "model" column holding the
    label, and a value column named kind. Rows are model-major: all rows for
    the first label, then all rows for the next.
    """
    config = config or AugmentConfig()
    if kind == "prediction":
        column_for = config.prediction_column
    elif kind == "residual":
        column_for = config.residual_column
    else:
        raise InvalidArgument(f"kind must be 'prediction' or 'residual', got {kind!r}")

    labels = [str(label) for label in labels]
    value_columns = [column_for(label) for label in labels]
    absent = [c for c in value_columns if c not in frame.columns]
    if absent:
        raise InvalidArgument(f"Columns not found in frame: {absent}")

    model_columns = {config.prediction_column(l) for l in labels} | {config.residual_column(l) for l in labels}
    id_columns = [c for c in frame.columns if c not in model_columns]
    long = frame.melt(id_vars=id_columns, value_vars=value_columns, var_name="model", value_name=kind)
    long["model"] = long["model"].map(dict(zip(value_columns, labels)))
    return long


def add_predictions(
    dataset: DataLike,
    models_by_label: ModelsLike,
    config: Optional[AugmentConfig] = None,
) -> pd.DataFrame:
    """Convenience wrapper for ModelAugmenter(config).predict()."""
    return ModelAugmenter(config).predict(dataset, models_by_label)


def add_residuals(
    dataset: DataLike,
    models_by_label: ModelsLike,
    config: Optional[AugmentConfig] = None,
) -> pd.DataFrame:
    """Convenience wrapper for ModelAugmenter(config).residuals()."""
    return ModelAugmenter(config).residuals(dataset, models_by_label)

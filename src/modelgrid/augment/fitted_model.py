"""Fitted-model capability interface and adapters.

ModelAugmenter needs exactly three things from a fitted model:

1. predictor_columns() -> the dataset columns it reads;
2. predict(row) -> one number for one row;
3. response_column() -> the observed column it models (only for residuals).

FittedModel is that interface as a Protocol. BaseFittedModel adds a
row-batch predict_frame() that adapters may override with a vectorized call.
Adapters here cover hand-written models (FunctionModel, LookupModel) and
statsmodels results objects (StatsmodelsModel).
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Hashable, Mapping, Sequence
from typing import Any, Optional, Protocol, runtime_checkable

import numpy as np
import pandas as pd

from modelgrid.dataset import DataLike, as_frame, frame_rows
from modelgrid.errors import InvalidArgument
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class FittedModel(Protocol):
    """Anything that can predict one number from one row."""

    def predictor_columns(self) -> Collection[str]:
        ...

    def predict(self, row: Mapping[str, Any]) -> float:
        ...


def response_column_of(model: Any) -> Optional[str]:
    """The model's declared response column, or None if it declares none."""
    getter = getattr(model, "response_column", None)
    if getter is None:
        return None
    return getter()


class BaseFittedModel(ABC):
    """Base class for adapters. Subclasses implement predictor_columns() and predict()."""

    @abstractmethod
    def predictor_columns(self) -> Collection[str]:
        """Columns read by predict()."""

    @abstractmethod
    def predict(self, row: Mapping[str, Any]) -> float:
        """Prediction for one row (a mapping holding at least the predictor columns)."""

    def response_column(self) -> Optional[str]:
        """Observed column this model predicts; None if undeclared."""
        return None

    def predict_frame(self, frame: pd.DataFrame) -> Sequence[float]:
        """Predictions for every row of frame, in row order."""
        return [self.predict(row) for row in frame_rows(frame)]


class FunctionModel(BaseFittedModel):
    """Wrap a plain ``row -> number`` callable.

    Example:
        FunctionModel(lambda row: 10.0, predictors=["day"], response="count")
    """

    def __init__(
        self,
        func: Callable[[Mapping[str, Any]], float],
        predictors: Sequence[str],
        response: Optional[str] = None,
    ) -> None:
        self.func = func
        self.predictors = tuple(predictors)
        self.response = response

    def predictor_columns(self) -> Collection[str]:
        return self.predictors

    def response_column(self) -> Optional[str]:
        return self.response

    def predict(self, row: Mapping[str, Any]) -> float:
        return self.func(row)


class LookupModel(BaseFittedModel):
    """Prediction looked up by the tuple of predictor values.

    Keys of table are tuples ordered like predictors (a bare value is accepted
    when there is a single predictor). A key with no entry falls back to
    default; with no default it raises KeyError.
    """

    def __init__(
        self,
        table: Mapping[Any, float],
        predictors: Sequence[str],
        response: Optional[str] = None,
        default: Optional[float] = None,
    ) -> None:
        if not predictors:
            raise InvalidArgument("LookupModel needs at least one predictor column")
        self.predictors = tuple(predictors)
        self.table: dict[tuple, float] = {
            (k if isinstance(k, tuple) else (k,)): float(v) for k, v in table.items()
        }
        self.response = response
        self.default = default

    @classmethod
    def from_group_means(cls, dataset: DataLike, by: Sequence[str], response: str) -> "LookupModel":
        """Model predicting the mean response of each observed group."""
        df = as_frame(dataset)
        by = [by] if isinstance(by, str) else list(by)
        missing = [c for c in [*by, response] if c not in df.columns]
        if missing:
            raise InvalidArgument(f"Columns not found in dataset: {missing}")
        means = df.groupby(by, sort=False, observed=True)[response].mean()
        logger.debug(f"LookupModel.from_group_means: {len(means)} groups by {by}")
        return cls(dict(means.items()), predictors=by, response=response)

    def predictor_columns(self) -> Collection[str]:
        return self.predictors

    def response_column(self) -> Optional[str]:
        return self.response

    def predict(self, row: Mapping[str, Any]) -> float:
        key: tuple[Hashable, ...] = tuple(row[c] for c in self.predictors)
        if key in self.table:
            return self.table[key]
        if self.default is not None:
            return self.default
        raise KeyError(f"No lookup entry for {dict(zip(self.predictors, key))}")


_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


class StatsmodelsModel(BaseFittedModel):
    """Adapter for a fitted statsmodels results object (OLS, RLM, MixedLM, GLM, ...).

    For models built with the formula API the predictor and response columns
    are read from the formula: every identifier that names a column of the
    training frame. Pass them explicitly for array-API models or to override.

    Example:
        results = smf.ols("y ~ x + C(g)", data=df).fit()
        model = StatsmodelsModel(results)  # predictors ("x", "g"), response "y"
    """

    def __init__(
        self,
        results: Any,
        predictors: Optional[Sequence[str]] = None,
        response: Optional[str] = None,
    ) -> None:
        self.results = results
        derived_predictors, derived_response = _formula_columns(results)
        if predictors is None:
            predictors = derived_predictors
        if predictors is None:
            raise InvalidArgument(
                "Cannot infer predictor columns from a model without a formula; pass predictors="
            )
        self.predictors = tuple(predictors)
        self.response = response if response is not None else derived_response

    def predictor_columns(self) -> Collection[str]:
        return self.predictors

    def response_column(self) -> Optional[str]:
        return self.response

    def predict(self, row: Mapping[str, Any]) -> float:
        frame = pd.DataFrame([{c: row[c] for c in self.predictors}])
        return float(self.predict_frame(frame)[0])

    def predict_frame(self, frame: pd.DataFrame) -> Sequence[float]:
        predicted = self.results.predict(frame[list(self.predictors)])
        return np.asarray(predicted, dtype=float)


def _formula_columns(results: Any) -> tuple[Optional[list[str]], Optional[str]]:
    model = getattr(results, "model", None)
    formula = getattr(model, "formula", None)
    frame = getattr(getattr(model, "data", None), "frame", None)
    if not isinstance(formula, str) or "~" not in formula or frame is None:
        return None, None

    lhs, rhs = formula.split("~", 1)
    rhs_names = set(_IDENTIFIER.findall(rhs))
    lhs_names = set(_IDENTIFIER.findall(lhs))
    predictors = [str(c) for c in frame.columns if c in rhs_names]
    responses = [str(c) for c in frame.columns if c in lhs_names]
    response = responses[0] if len(responses) == 1 else None
    logger.debug(f"formula {formula!r}: predictors={predictors}, response={response}")
    return predictors, response

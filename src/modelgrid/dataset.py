"""Tabular dataset helpers: input coercion and column kinds.

Every table in modelgrid is a pandas DataFrame. This module converts the
accepted input shapes into one and classifies columns as categorical,
continuous or temporal.
"""

from __future__ import annotations

import datetime as _dt
import numbers
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from modelgrid.errors import InvalidArgument

DataLike = Union[pd.DataFrame, list[Mapping[str, Any]], Mapping[str, Any]]

_NUMERIC_KINDS = {"i", "u", "f"}  # int, unsigned, float (pandas dtype.kind)
_TEMPORAL_KINDS = {"M", "m"}  # datetime64, timedelta64


class ColumnKind(Enum):
    """Kind of values held by a column."""
    CATEGORICAL = "categorical"
    CONTINUOUS = "continuous"
    TEMPORAL = "temporal"


def as_frame(data: DataLike) -> pd.DataFrame:
    """Convert input data into a pandas DataFrame.

    Accepts a DataFrame (returned as-is, never copied or mutated), a list of
    row mappings, or a mapping of column name -> sequence of values. Rows that
    lack a field get a missing value for it.

    Raises:
        InvalidArgument: for any other input type, or a list holding non-mapping rows.
    """
    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, list):
        if all(isinstance(row, Mapping) for row in data):
            return pd.DataFrame.from_records([dict(row) for row in data])
        raise InvalidArgument("List input must contain mapping/dict-like rows.")
    if isinstance(data, Mapping):
        return pd.DataFrame(dict(data))
    raise InvalidArgument(
        f"Unsupported dataset type {type(data).__name__}. "
        "Expected pandas.DataFrame, list[dict] or dict of columns."
    )


def _value_kind(value: Any) -> ColumnKind:
    if isinstance(value, (bool, np.bool_)):
        return ColumnKind.CATEGORICAL
    if isinstance(value, numbers.Number):
        return ColumnKind.CONTINUOUS
    if isinstance(value, (_dt.date, _dt.datetime, _dt.timedelta, pd.Period, np.datetime64)):
        return ColumnKind.TEMPORAL
    return ColumnKind.CATEGORICAL


def column_kind(series: pd.Series) -> ColumnKind:
    """Infer the kind of a column from its dtype (or its values for object columns).

    Raises:
        InvalidArgument: if an object column mixes values of different kinds.
    """
    dtype = series.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return ColumnKind.CATEGORICAL
    if isinstance(dtype, pd.PeriodDtype) or getattr(dtype, "kind", None) in _TEMPORAL_KINDS:
        return ColumnKind.TEMPORAL
    if getattr(dtype, "kind", None) == "b":
        return ColumnKind.CATEGORICAL
    if getattr(dtype, "kind", None) in _NUMERIC_KINDS:
        return ColumnKind.CONTINUOUS

    kinds = {_value_kind(v) for v in series.dropna()}
    if len(kinds) > 1:
        names = sorted(k.value for k in kinds)
        raise InvalidArgument(f"Column {series.name!r} mixes values of kinds {names}")
    return kinds.pop() if kinds else ColumnKind.CATEGORICAL


def column_kinds(
    df: pd.DataFrame,
    overrides: Optional[Mapping[str, ColumnKind]] = None,
) -> dict[str, ColumnKind]:
    """Kind of every column, with caller-declared kinds taking precedence."""
    overrides = dict(overrides or {})
    out: dict[str, ColumnKind] = {}
    for col in df.columns:
        if col in overrides:
            out[col] = ColumnKind(overrides[col])
        else:
            out[col] = column_kind(df[col])
    return out


def frame_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows of frame as plain dicts; a frame with no columns still yields one {} per row."""
    if len(frame.columns) == 0:
        return [{} for _ in range(len(frame))]
    return frame.to_dict(orient="records")

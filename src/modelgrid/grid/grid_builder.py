"""Grid construction over a tabular dataset.

GridBuilder produces every distinct combination of requested column values.
Independent columns are crossed with each other; columns declared as a
NestGroup only contribute combinations observed together in the data.

Ordering rules:

1. Categorical/temporal columns: first-seen order, re-ordered by an external
   level ordering when one is supplied (or the column is an ordered Categorical).
2. Continuous columns: ascending.
3. SeqRange columns: ascending evenly spaced points, endpoints snapped to the data.
4. NestGroup tuples: lexicographic by the member columns' orders.
5. Rows: Cartesian product in spec order, rightmost spec varying fastest.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Hashable, Optional, Sequence

import numpy as np
import pandas as pd

from modelgrid.dataset import ColumnKind, DataLike, as_frame, column_kind
from modelgrid.errors import InvalidArgument
from modelgrid.grid.column_spec import ColumnSpec, NestGroup, SeqRange, normalize_specs, spec_columns
from modelgrid.grid.level_order import apply_level_order, check_levels
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)


class GridBuilder:
    """Builds combinatorial grids from a dataset and a list of column specs.

    Attributes:
        level_orders: Column name -> explicit level ordering (e.g. weekday_levels("Sun")).
        kinds: Column name -> ColumnKind, overriding dtype inference.
    """

    def __init__(
        self,
        level_orders: Optional[Mapping[str, Sequence[Hashable]]] = None,
        kinds: Optional[Mapping[str, ColumnKind]] = None,
    ) -> None:
        self.level_orders: dict[str, list[Hashable]] = {
            col: check_levels(col, levels) for col, levels in (level_orders or {}).items()
        }
        self.kinds: dict[str, ColumnKind] = {col: ColumnKind(k) for col, k in (kinds or {}).items()}

    def build(self, dataset: DataLike, column_specs: Sequence[ColumnSpec]) -> pd.DataFrame:
        """Build the grid.

        Args:
            dataset: Source data (DataFrame, list of row dicts or dict of columns).
            column_specs: Ordered specs; see modelgrid.grid.column_spec.

        Returns:
            New DataFrame, one row per combination, columns in spec order.
            An empty spec list gives a single row with no columns.

        Raises:
            InvalidArgument: malformed spec, unknown column, duplicate column
                across specs, or a SeqRange over a non-numeric column.
        """
        df = as_frame(dataset)
        specs = normalize_specs(column_specs)

        missing = [c for c in spec_columns(specs) if c not in df.columns]
        if missing:
            raise InvalidArgument(f"Grid columns not found in dataset: {missing}")

        factors = [self._factor(df, spec) for spec in specs]
        grid = _cartesian(factors)
        logger.info(
            f"GridBuilder.build: {len(grid)} rows from {len(df)} source rows, "
            f"factor sizes={[len(f) for f in factors]}, columns={list(grid.columns)}"
        )
        return grid

    # ------------------------------------------------------------------
    # Factors: one DataFrame of distinct values (or tuples) per spec
    # ------------------------------------------------------------------

    def _factor(self, df: pd.DataFrame, spec) -> pd.DataFrame:
        if isinstance(spec, NestGroup):
            return self._nest_factor(df, spec)
        if isinstance(spec, SeqRange):
            return self._seq_range_factor(df, spec).to_frame()
        return self.distinct_values(df, spec).to_frame()

    def _kind(self, df: pd.DataFrame, col: str) -> ColumnKind:
        return self.kinds.get(col) or column_kind(df[col])

    def distinct_values(self, df: pd.DataFrame, col: str) -> pd.Series:
        """Distinct non-missing values of one column, in grid order, dtype preserved."""
        s = df[col]
        observed = s.dropna()

        levels = self.level_orders.get(col)
        if levels is None and isinstance(s.dtype, pd.CategoricalDtype) and s.cat.ordered:
            levels = list(s.cat.categories)

        if levels is None and self._kind(df, col) == ColumnKind.CONTINUOUS:
            values = observed.drop_duplicates().sort_values(kind="mergesort")
            return values.reset_index(drop=True)

        values = observed.drop_duplicates().reset_index(drop=True)
        if levels is not None:
            position = {v: i for i, v in enumerate(values)}
            ordered = apply_level_order(list(position), levels)
            values = values.iloc[[position[v] for v in ordered]].reset_index(drop=True)
        return values

    def _seq_range_factor(self, df: pd.DataFrame, spec: SeqRange) -> pd.Series:
        col = spec.column
        if self._kind(df, col) != ColumnKind.CONTINUOUS:
            raise InvalidArgument(f"SeqRange requires a numeric column; {col!r} is {self._kind(df, col).value}")
        try:
            x = df[col].dropna().astype(float)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"SeqRange column {col!r} holds values that are not numeric") from e
        if x.empty:
            return pd.Series([], dtype=float, name=col)

        if spec.trim > 0:
            lo, hi = float(x.quantile(spec.trim)), float(x.quantile(1.0 - spec.trim))
        else:
            lo, hi = float(x.min()), float(x.max())
        points = np.linspace(lo, hi, spec.n)
        # snap to the observed endpoints so predictions never extrapolate
        points[0] = lo
        points[-1] = hi
        # zero-width range collapses to a single value
        points = np.unique(points)
        return pd.Series(points, name=col)

    def _nest_factor(self, df: pd.DataFrame, group: NestGroup) -> pd.DataFrame:
        cols = list(group.columns)
        observed = df[cols].dropna().drop_duplicates().reset_index(drop=True)
        if observed.empty:
            return observed

        ranks = []
        for col in cols:
            position = {v: i for i, v in enumerate(self.distinct_values(df, col))}
            ranks.append(np.array([position[v] for v in observed[col]]))
        # np.lexsort treats the last key as primary
        order = np.lexsort(ranks[::-1])
        logger.debug(f"NestGroup {cols}: {len(observed)} observed combinations")
        return observed.iloc[order].reset_index(drop=True)


def _cartesian(factors: list[pd.DataFrame]) -> pd.DataFrame:
    """Odometer-ordered Cartesian product of factor frames (rightmost fastest)."""
    if not factors:
        return pd.DataFrame(index=pd.RangeIndex(1))

    sizes = [len(f) for f in factors]
    columns: dict[str, pd.Series] = {}
    for i, factor in enumerate(factors):
        inner = int(np.prod(sizes[i + 1:]))
        outer = int(np.prod(sizes[:i]))
        idx = np.tile(np.repeat(np.arange(sizes[i]), inner), outer)
        part = factor.iloc[idx].reset_index(drop=True)
        for col in part.columns:
            columns[col] = part[col]
    return pd.DataFrame(columns)


def data_grid(
    dataset: DataLike,
    *column_specs: ColumnSpec,
    level_orders: Optional[Mapping[str, Sequence[Hashable]]] = None,
    kinds: Optional[Mapping[str, ColumnKind]] = None,
) -> pd.DataFrame:
    """Convenience wrapper: ``data_grid(df, "day", nest("state", "county"))``."""
    return GridBuilder(level_orders=level_orders, kinds=kinds).build(dataset, list(column_specs))

"""Grid construction: distinct combinations of column values, with nesting."""

from modelgrid.grid.column_spec import NestGroup, SeqRange, nest, seq_range, spec_columns
from modelgrid.grid.grid_builder import GridBuilder, data_grid
from modelgrid.grid.level_order import WEEKDAYS, rotate_levels, weekday_levels

__all__ = [
    "GridBuilder",
    "NestGroup",
    "SeqRange",
    "WEEKDAYS",
    "data_grid",
    "nest",
    "rotate_levels",
    "seq_range",
    "spec_columns",
    "weekday_levels",
]

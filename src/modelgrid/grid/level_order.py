"""Externally supplied level orderings for categorical grid columns.

Single source of truth for how an explicit ordering combines with the
first-seen order of observed values, used by GridBuilder for independent
columns and NestGroup members alike.
"""

from __future__ import annotations

from typing import Any, Hashable, Sequence

from modelgrid.errors import InvalidArgument

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def rotate_levels(levels: Sequence[Any], start: Any) -> list[Any]:
    """Rotate levels so that start comes first.

    Args:
        levels: Full cyclic ordering (e.g. WEEKDAYS).
        start: Level to begin with; must be one of levels.

    Returns:
        New list, e.g. rotate_levels(WEEKDAYS, "Sun") -> ["Sun", "Mon", ..., "Sat"].
    """
    levels = list(levels)
    if start not in levels:
        raise InvalidArgument(f"Start level {start!r} is not one of {levels}")
    i = levels.index(start)
    return levels[i:] + levels[:i]


def weekday_levels(week_start: str = "Mon") -> list[str]:
    """Abbreviated weekday names for a week starting on week_start."""
    return rotate_levels(WEEKDAYS, week_start)


def check_levels(column: str, levels: Sequence[Hashable]) -> list[Hashable]:
    """Validate an external ordering: a sequence with no duplicate entries."""
    if isinstance(levels, str):
        raise InvalidArgument(f"Level ordering for {column!r} must be a sequence, not a string")
    levels = list(levels)
    if len(set(levels)) != len(levels):
        raise InvalidArgument(f"Level ordering for {column!r} has duplicate entries")
    return levels


def apply_level_order(observed: Sequence[Hashable], levels: Sequence[Hashable]) -> list[Hashable]:
    """Order observed values by an external level list.

    Rule: observed values named in levels come first, in the order of levels;
    observed values not named follow in their original (first-seen) order.
    Levels that were never observed are not added.
    """
    present = set(observed)
    head = [lv for lv in levels if lv in present]
    named = set(head)
    tail = [v for v in observed if v not in named]
    return head + tail

# tests/grid/conftest.py
"""Pytest configuration and fixtures for grid tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure modelgrid package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@pytest.fixture
def week_df() -> pd.DataFrame:
    """Two observations for every (day, group) pair; days first seen Mon..Sun."""
    rows = []
    for rep in range(2):
        for day in DAYS:
            for group in ["A", "B"]:
                rows.append({"day": day, "group": group, "count": 10 + rep + len(rows) % 3})
    return pd.DataFrame(rows)


@pytest.fixture
def nested_df() -> pd.DataFrame:
    """County only meaningful within its state; years crossed freely."""
    return pd.DataFrame({
        "state": ["NY", "CA", "CA", "NY", "CA", "CA"],
        "county": ["NYC", "SF", "LA", "NYC", "SF", "LA"],
        "year": [2001, 2001, 2000, 2000, 2000, 2001],
        "value": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
    })

# tests/conftest.py
"""Pytest configuration shared by all test packages."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure modelgrid package is importable when running tests from repo root.
    src_dir = Path(__file__).resolve().parents[1] / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


class CountingModel:
    """Protocol-only model (no base class) that records the rows it sees."""

    def __init__(self, value: float = 10.0, predictors=("day",), response="count") -> None:
        self.value = value
        self.predictors = set(predictors)
        self.response = response
        self.rows_seen: list[dict] = []

    def predictor_columns(self):
        return self.predictors

    def response_column(self):
        return self.response

    def predict(self, row):
        self.rows_seen.append(dict(row))
        return self.value


@pytest.fixture
def model_factory():
    """Build CountingModel instances with custom value/predictors/response."""
    return CountingModel

# tests/augment/conftest.py
"""Fixtures for augmentation tests."""
from __future__ import annotations

import pandas as pd
import pytest


@pytest.fixture
def counts_df() -> pd.DataFrame:
    """Daily counts with one missing response; non-default index."""
    return pd.DataFrame(
        {"day": ["Mon", "Tue", "Wed"], "count": [12.0, None, 7.0]},
        index=[10, 20, 30],
    )


@pytest.fixture
def counting_model(model_factory):
    return model_factory()

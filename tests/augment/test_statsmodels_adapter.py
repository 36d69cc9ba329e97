"""Tests for StatsmodelsModel with real statsmodels fits (OLS, RLM)."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

sm = pytest.importorskip("statsmodels.api")
smf = pytest.importorskip("statsmodels.formula.api")

from modelgrid.augment.fitted_model import StatsmodelsModel
from modelgrid.augment.model_augmenter import ModelAugmenter
from modelgrid.errors import InvalidArgument
from modelgrid.grid.column_spec import seq_range
from modelgrid.pipeline.comparative_fit import ComparativeFitPipeline


@pytest.fixture
def linear_df() -> pd.DataFrame:
    """y close to 2x + 1, two groups offset by 5."""
    x = np.arange(20, dtype=float)
    noise = np.tile([0.1, -0.1, 0.2, -0.2], 5)
    g = np.where(x % 2 == 0, "a", "b")
    y = 2 * x + 1 + np.where(g == "b", 5.0, 0.0) + noise
    return pd.DataFrame({"x": x, "g": g, "y": y, "unused": 0})


def test_formula_columns_are_derived(linear_df):
    results = smf.ols("y ~ x + C(g)", data=linear_df).fit()
    model = StatsmodelsModel(results)
    assert model.predictor_columns() == ("x", "g")
    assert model.response_column() == "y"


def test_explicit_predictors_override(linear_df):
    results = smf.ols("y ~ x", data=linear_df).fit()
    model = StatsmodelsModel(results, predictors=["x"], response="y")
    assert model.predictor_columns() == ("x",)


def test_array_api_model_needs_explicit_predictors(linear_df):
    exog = sm.add_constant(linear_df[["x"]])
    results = sm.OLS(linear_df["y"], exog).fit()
    with pytest.raises(InvalidArgument):
        StatsmodelsModel(results)


def test_ols_residuals_match_statsmodels(linear_df):
    results = smf.ols("y ~ x + C(g)", data=linear_df).fit()
    out = ModelAugmenter().augment(linear_df, {"ols": StatsmodelsModel(results)}, include_residuals=True)

    np.testing.assert_allclose(out["prediction_ols"].to_numpy(), results.fittedvalues.to_numpy())
    np.testing.assert_allclose(out["residual_ols"].to_numpy(), results.resid.to_numpy())


def test_single_row_predict_matches_batch(linear_df):
    results = smf.ols("y ~ x", data=linear_df).fit()
    model = StatsmodelsModel(results)
    batch = model.predict_frame(linear_df.iloc[[3]])
    assert model.predict({"x": 3.0}) == pytest.approx(batch[0])


def test_ols_and_rlm_compared_over_grid(linear_df):
    """Linear and robust fits side by side over an evenly spaced x grid."""
    ols = StatsmodelsModel(smf.ols("y ~ x", data=linear_df).fit())
    rlm = StatsmodelsModel(smf.rlm("y ~ x", data=linear_df).fit())

    out = ComparativeFitPipeline().compare(linear_df, [seq_range("x", 10)], {"ols": ols, "rlm": rlm})

    assert list(out.columns) == ["x", "prediction_ols", "prediction_rlm"]
    assert len(out) == 10
    assert out["x"].iloc[0] == 0.0
    assert out["x"].iloc[-1] == 19.0
    assert out["prediction_ols"].is_monotonic_increasing
    np.testing.assert_allclose(out["prediction_ols"], out["prediction_rlm"], atol=3.0)

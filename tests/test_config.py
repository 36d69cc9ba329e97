"""Unit tests for AugmentConfig defaults, validation and tolerant loading."""

import logging

import pytest

from modelgrid.config import AugmentConfig
from modelgrid.errors import InvalidArgument


def test_defaults():
    cfg = AugmentConfig()
    assert cfg.prediction_column("m") == "prediction_m"
    assert cfg.residual_column("m") == "residual_m"
    assert cfg.max_workers == 1
    assert cfg.timeout is None


def test_round_trip_through_dict():
    cfg = AugmentConfig(prediction_prefix="pred_", max_workers=3, timeout=2.5)
    assert AugmentConfig.from_dict(cfg.to_dict()) == cfg


def test_from_dict_ignores_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING, logger="modelgrid"):
        cfg = AugmentConfig.from_dict({"max_workers": 2, "colour": "red"})
    assert cfg.max_workers == 2
    assert "colour" in caplog.text


def test_from_dict_unparsable_values_fall_back():
    cfg = AugmentConfig.from_dict({"max_workers": "many", "timeout": "soon"})
    assert cfg.max_workers == 1
    assert cfg.timeout is None


@pytest.mark.parametrize("kwargs", [
    {"max_workers": 0},
    {"max_workers": 1.5},
    {"timeout": 0},
    {"prediction_prefix": ""},
    {"prediction_prefix": "x_", "residual_prefix": "x_"},
])
def test_invalid_values_raise(kwargs):
    with pytest.raises(InvalidArgument):
        AugmentConfig(**kwargs)

"""Exception types raised by modelgrid.

Every error derives from ModelGridError so callers can catch the whole family.
Validation errors also derive from ValueError; a failing model derives from
RuntimeError.
"""

from __future__ import annotations


class ModelGridError(Exception):
    """Base class for all modelgrid errors."""


class InvalidArgument(ModelGridError, ValueError):
    """Malformed column spec, bad resampling request or invalid config value."""


class MissingPredictor(ModelGridError, ValueError):
    """A row lacks a field that a model declares as a predictor."""


class LabelCollision(ModelGridError, ValueError):
    """Two model labels (or a label and an existing column) map to one output column."""


class ResponseRequired(ModelGridError, ValueError):
    """Residuals were requested for a model that declares no response column."""


class PredictorMismatch(ModelGridError, ValueError):
    """A pipeline grid does not span exactly the predictors its models need."""


class ModelUnavailable(ModelGridError, RuntimeError):
    """A model's prediction capability failed, timed out or returned garbage."""

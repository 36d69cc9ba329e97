"""Augmentation settings.

AugmentConfig is passed explicitly to ModelAugmenter; there are no
process-wide defaults. to_dict()/from_dict() give a JSON-friendly round trip
so callers can keep settings next to their analysis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from modelgrid.errors import InvalidArgument
from modelgrid.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PREDICTION_PREFIX = "prediction_"
DEFAULT_RESIDUAL_PREFIX = "residual_"


@dataclass(frozen=True)
class AugmentConfig:
    """Output naming and execution settings for ModelAugmenter."""
    prediction_prefix: str = DEFAULT_PREDICTION_PREFIX
    residual_prefix: str = DEFAULT_RESIDUAL_PREFIX
    max_workers: int = 1               # > 1 runs per-row predictions in a thread pool
    timeout: Optional[float] = None    # seconds allowed for one model's full prediction pass

    def __post_init__(self) -> None:
        if not self.prediction_prefix or not self.residual_prefix:
            raise InvalidArgument("Output column prefixes must be non-empty")
        if self.prediction_prefix == self.residual_prefix:
            raise InvalidArgument("prediction_prefix and residual_prefix must differ")
        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise InvalidArgument(f"max_workers must be a positive integer, got {self.max_workers!r}")
        if self.timeout is not None and not self.timeout > 0:
            raise InvalidArgument(f"timeout must be positive or None, got {self.timeout!r}")

    def prediction_column(self, label: str) -> str:
        return f"{self.prediction_prefix}{label}"

    def residual_column(self, label: str) -> str:
        return f"{self.residual_prefix}{label}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "prediction_prefix": self.prediction_prefix,
            "residual_prefix": self.residual_prefix,
            "max_workers": self.max_workers,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AugmentConfig":
        """
        Tolerant loader:
        - ignores unknown keys (with a warning)
        - falls back to defaults for missing or unparsable values
        """
        known_keys = {"prediction_prefix", "residual_prefix", "max_workers", "timeout"}
        for key in data.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in augment config, ignoring")

        max_workers = 1
        if "max_workers" in data:
            try:
                max_workers = int(data["max_workers"])
            except (TypeError, ValueError):
                logger.warning(f"max_workers={data['max_workers']!r} is not an integer, using 1")

        timeout = None
        if data.get("timeout") is not None:
            try:
                timeout = float(data["timeout"])
            except (TypeError, ValueError):
                logger.warning(f"timeout={data['timeout']!r} is not a number, using no timeout")

        return cls(
            prediction_prefix=str(data.get("prediction_prefix", DEFAULT_PREDICTION_PREFIX)),
            residual_prefix=str(data.get("residual_prefix", DEFAULT_RESIDUAL_PREFIX)),
            max_workers=max_workers,
            timeout=timeout,
        )

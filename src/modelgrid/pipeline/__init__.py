"""Orchestration of grid building and model augmentation."""

from modelgrid.pipeline.comparative_fit import ComparativeFitPipeline

__all__ = [
    "ComparativeFitPipeline",
]

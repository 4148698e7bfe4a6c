"""
Resample pipeline.

Orchestrates table loading, date normalization and aggregation.
"""

from timeresample.etl.pipeline import ResamplePipeline, ResampleResult, run_pipeline

__all__ = ["ResamplePipeline", "ResampleResult", "run_pipeline"]

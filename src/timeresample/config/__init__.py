"""
Configuration management with typed Pydantic models.

Provides YAML loading with environment interpolation and
base-config inheritance.
"""

from timeresample.config.loader import load_config
from timeresample.config.settings import (
    AggregationConfig,
    DataPathsConfig,
    DateColumnConfig,
    DerivedFieldsConfig,
    IntervalConfig,
    LoggingConfig,
    PipelineConfig,
    RelativeDateConfig,
    ResampleConfig,
)

__all__ = [
    "AggregationConfig",
    "DataPathsConfig",
    "DateColumnConfig",
    "DerivedFieldsConfig",
    "IntervalConfig",
    "LoggingConfig",
    "PipelineConfig",
    "RelativeDateConfig",
    "ResampleConfig",
    "load_config",
]

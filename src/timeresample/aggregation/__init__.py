"""Group-and-aggregate (resampling) over calendar keys."""

from timeresample.aggregation.resample import (
    AGGREGATION_FUNCTIONS,
    Aggregation,
    resample,
    resample_by_period,
)

__all__ = ["AGGREGATION_FUNCTIONS", "Aggregation", "resample", "resample_by_period"]

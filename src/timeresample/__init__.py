"""
Timeresample: date normalization and resampling for tabular time series.

This package parses textual date columns in non-default layouts, derives
calendar fields and relative dates, and groups rows by calendar keys to
aggregate the remaining measurements.
"""

from importlib.metadata import version

__version__ = version("timeresample")

__all__ = ["__version__"]

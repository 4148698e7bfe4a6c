"""
Table sources for loading input data with schema validation.

All input tables enter the pipeline through this module to ensure
consistent validation at system boundaries.
"""

from timeresample.ingestion.base import TableSource
from timeresample.ingestion.csv_source import CsvTableSource
from timeresample.ingestion.frame import FrameTableSource

__all__ = ["CsvTableSource", "FrameTableSource", "TableSource"]

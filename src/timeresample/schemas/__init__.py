"""
Schema definitions using Pandera for data validation.

Tables are described by a mapping from column name to declared type and
validated when they enter the pipeline.
"""

from timeresample.schemas.table import PANDAS_DTYPES, ColumnType, build_table_schema

__all__ = ["PANDAS_DTYPES", "ColumnType", "build_table_schema"]

"""
Pandera schemas for declared table layouts.

A table layout maps column names to one of a small set of column types.
Every column is nullable; missing values are data, not schema violations.
"""

from collections.abc import Mapping
from enum import Enum

import pandera.pandas as pa


class ColumnType(str, Enum):
    """Declared type of a table column."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"


PANDAS_DTYPES: dict[ColumnType, str] = {
    ColumnType.STRING: "string",
    ColumnType.INTEGER: "Int64",
    ColumnType.FLOAT: "float64",
    ColumnType.DATE: "datetime64[ns]",
}


def build_table_schema(
    columns: Mapping[str, ColumnType | str],
    *,
    name: str = "TableSchema",
    strict: bool = False,
    coerce: bool = True,
) -> pa.DataFrameSchema:
    """
    Build a DataFrameSchema from declared column types.

    Args:
        columns: Column name -> declared type.
        name: Schema name shown in validation errors.
        strict: Reject columns that are not declared.
        coerce: Coerce values to the declared dtype where possible.

    Returns:
        Pandera DataFrameSchema.
    """
    return pa.DataFrameSchema(
        {
            column: pa.Column(
                PANDAS_DTYPES[ColumnType(declared)],
                nullable=True,
                coerce=coerce,
            )
            for column, declared in columns.items()
        },
        name=name,
        strict=strict,
    )

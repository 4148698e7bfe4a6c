"""
Typed configuration models using Pydantic.

A pipeline config describes one resampling job: where the table comes from,
how its date columns are laid out, what to derive from them and how to
group and reduce the result.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from timeresample.aggregation.resample import AGGREGATION_FUNCTIONS, DEFAULT_FUNCTION
from timeresample.normalization.columns import normalized_name
from timeresample.normalization.dates import DateFormat
from timeresample.normalization.fields import CalendarField
from timeresample.normalization.relative import RELATIVE_OPERATIONS
from timeresample.schemas.table import ColumnType


class DataPathsConfig(BaseModel):
    """Input and output file paths.

    Relative paths are resolved against data_root.
    """

    model_config = ConfigDict(frozen=True)

    data_root: Path = Field(default=Path("."), description="Root directory for data files")
    input: Path = Field(description="Path to the input CSV table")
    output: Path | None = Field(default=None, description="Path for the resampled CSV")

    def resolve(self, path_attr: str) -> Path:
        """Resolve a relative path against data_root."""
        rel_path = getattr(self, path_attr)
        if rel_path is None:
            msg = f"Path '{path_attr}' is not configured"
            raise ValueError(msg)
        return self.data_root / rel_path


class DateColumnConfig(BaseModel):
    """A textual date column and its layout."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(description="Source column holding date strings")
    format: str = Field(description="Date pattern, e.g. 'MM/dd/yyyy'")
    keep_time: bool = Field(default=False, description="Keep the time of day")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Ensure the pattern only uses supported letters."""
        DateFormat(v)
        return v


class DerivedFieldsConfig(BaseModel):
    """Calendar fields extracted from a parsed date column."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(description="Parsed date column")
    fields: list[str] = Field(min_length=1, description="Calendar fields to extract")
    prefix: str = Field(default="", description="Prefix for derived column names")

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: list[str]) -> list[str]:
        """Ensure every field name is a known calendar field."""
        return [CalendarField.from_name(name).value for name in v]


class RelativeDateConfig(BaseModel):
    """A new date column computed relative to a parsed date column."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(description="Parsed date column")
    operation: str = Field(description="Relative-date operation name")
    argument: int | str | None = Field(
        default=None, description="Weekday, month/day count or truncation unit"
    )
    output: str = Field(description="Name of the new column")

    @field_validator("operation")
    @classmethod
    def validate_operation(cls, v: str) -> str:
        """Ensure the operation is known."""
        if v not in RELATIVE_OPERATIONS:
            valid = ", ".join(RELATIVE_OPERATIONS)
            msg = f"Unknown relative-date operation {v!r}. Valid: {valid}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_argument(self) -> "RelativeDateConfig":
        """Ensure operations that need an argument have one."""
        if self.operation == "end_of_month":
            return self
        if self.argument is None:
            msg = f"Operation '{self.operation}' requires an argument"
            raise ValueError(msg)
        expects_name = self.operation in {"next_weekday", "truncate"}
        if expects_name != isinstance(self.argument, str):
            kind = "a name" if expects_name else "an integer"
            msg = f"Operation '{self.operation}' expects {kind}, got {self.argument!r}"
            raise ValueError(msg)
        return self


class IntervalConfig(BaseModel):
    """A signed interval between two date columns."""

    model_config = ConfigDict(frozen=True)

    start: str = Field(description="Start date column")
    end: str = Field(description="End date column")
    unit: Literal["days", "months"] = Field(default="days")
    output: str = Field(description="Name of the new column")


class AggregationConfig(BaseModel):
    """A reduction of one source column."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(description="Source column")
    function: str = Field(default=DEFAULT_FUNCTION, description="Aggregation function")

    @field_validator("function")
    @classmethod
    def validate_function(cls, v: str) -> str:
        """Ensure the aggregation function is supported."""
        if v not in AGGREGATION_FUNCTIONS:
            valid = ", ".join(AGGREGATION_FUNCTIONS)
            msg = f"Unsupported aggregation function {v!r}. Valid: {valid}"
            raise ValueError(msg)
        return v


class ResampleConfig(BaseModel):
    """Group-and-aggregate step."""

    model_config = ConfigDict(frozen=True)

    group_by: list[str] = Field(default_factory=list, description="Group key columns")
    aggregations: dict[str, AggregationConfig] = Field(
        min_length=1, description="Output column -> aggregation"
    )
    sort: bool = Field(default=True, description="Sort output by group keys")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Invalid log level: {v!r}"
            raise ValueError(msg)
        return level


class PipelineConfig(BaseModel):
    """Complete resampling job configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project identifier (e.g., 'weather-daily')")

    data: DataPathsConfig
    columns: dict[str, ColumnType] = Field(
        default_factory=dict, description="Declared types of the input columns"
    )
    rename: dict[str, str] = Field(default_factory=dict, description="Column renames")
    snake_case_columns: bool = Field(default=False)
    dates: list[DateColumnConfig] = Field(default_factory=list)
    derive: list[DerivedFieldsConfig] = Field(default_factory=list)
    relative: list[RelativeDateConfig] = Field(default_factory=list)
    intervals: list[IntervalConfig] = Field(default_factory=list)
    resample: ResampleConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_date_columns(self) -> "PipelineConfig":
        """
        Ensure parsed date columns are declared as strings when declared at all.

        Declared types are keyed by input header names, date columns by the
        names after renaming, so headers are mapped before comparing.
        """
        date_columns = set(self.date_formats)
        for source_name, declared in self.columns.items():
            name = normalized_name(
                source_name, self.rename, snake_case=self.snake_case_columns
            )
            if name in date_columns and declared is not ColumnType.STRING:
                msg = (
                    f"Date column '{name}' (input '{source_name}') must be "
                    f"declared as 'string', got '{declared.value}'"
                )
                raise ValueError(msg)
        return self

    @property
    def date_formats(self) -> dict[str, str]:
        """Column -> date pattern for every configured date column."""
        return {spec.column: spec.format for spec in self.dates}

    @property
    def output_path(self) -> Path | None:
        """Resolved output path, if configured."""
        if self.data.output is None:
            return None
        return self.data.resolve("output")

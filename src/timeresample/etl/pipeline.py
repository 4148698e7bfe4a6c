"""
Resampling pipeline implementation.

Runs the configured steps in order (parse dates, derive calendar fields and
relative dates, compute intervals, group and aggregate) and returns
the resampled table.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from timeresample.aggregation.resample import Aggregation, resample
from timeresample.config.settings import PipelineConfig
from timeresample.ingestion.base import TableSource
from timeresample.ingestion.csv_source import CsvTableSource
from timeresample.normalization.columns import (
    normalize_columns,
    normalized_name,
    validate_required_columns,
)
from timeresample.normalization.dates import normalize_date_columns
from timeresample.normalization.fields import derive_calendar_fields
from timeresample.normalization.intervals import days_between, months_between
from timeresample.normalization.relative import apply_relative
from timeresample.schemas.table import ColumnType, build_table_schema
from timeresample.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass
class ResampleResult:
    """
    Result of a pipeline run.

    Attributes:
        resampled: Grouped and aggregated table.
        normalized: Row-level table after date parsing and derivation.
        n_input_rows: Number of rows loaded from the source.
        n_groups: Number of output rows.
        null_dates: Column -> number of null dates after parsing.
        output_path: Path where the resampled table was saved (if any).
    """

    resampled: pd.DataFrame
    normalized: pd.DataFrame
    n_input_rows: int
    n_groups: int
    null_dates: dict[str, int] = field(default_factory=dict)
    output_path: Path | None = None


class ResamplePipeline:
    """
    Date normalization and resampling pipeline.

    The pipeline holds no data between runs; the table source is owned by
    the caller and passed to ``run``.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration.
        """
        self.config = config

    def default_source(self) -> TableSource:
        """
        Source reading the configured input CSV.

        Configured date columns are read as text, matched by their names
        after renaming, so numeric-looking layouts such as ``yyyyMMdd``
        are not inferred as numbers.
        """
        return CsvTableSource(
            self.config.data.resolve("input"),
            columns=self.config.columns,
            text_columns=list(self.config.date_formats),
            column_key=self._column_name,
        )

    def _column_name(self, source_name: str) -> str:
        return normalized_name(
            source_name,
            self.config.rename,
            snake_case=self.config.snake_case_columns,
        )

    def run(
        self,
        source: TableSource | None = None,
        output_path: Path | None = None,
    ) -> ResampleResult:
        """
        Run the full pipeline.

        Args:
            source: Table source. Defaults to the configured input CSV.
            output_path: Optional path to save the resampled CSV. Defaults
                to the configured output path.

        Returns:
            ResampleResult with the resampled table and statistics.
        """
        source = source or self.default_source()
        output_path = output_path or self.config.output_path

        with log_context(project=self.config.project):
            log.info("Starting resample pipeline")

            raw = source.load()
            normalized = self.normalize(raw)
            resampled = self.aggregate(normalized)

            null_dates = {
                spec.column: int(normalized[spec.column].isna().sum())
                for spec in self.config.dates
            }

            if output_path is not None:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                resampled.to_csv(output_path, index=False)
                log.info("Saved resampled table", path=str(output_path))

            log.info(
                "Resample pipeline complete",
                rows=len(raw),
                groups=len(resampled),
            )

        return ResampleResult(
            resampled=resampled,
            normalized=normalized,
            n_input_rows=len(raw),
            n_groups=len(resampled),
            null_dates=null_dates,
            output_path=output_path,
        )

    def normalize(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Parse date columns and add derived columns.

        Args:
            df: Raw table.

        Returns:
            New DataFrame with parsed dates and derived columns.
        """
        config = self.config

        df = normalize_columns(df, config.rename, snake_case=config.snake_case_columns)

        keep_time = [spec.column for spec in config.dates if spec.keep_time]
        df = normalize_date_columns(df, config.date_formats, keep_time=keep_time)
        self._validate_dates(df)

        for derived in config.derive:
            df = derive_calendar_fields(
                df, derived.column, derived.fields, prefix=derived.prefix
            )

        for relative in config.relative:
            validate_required_columns(df, [relative.column])
            df = df.assign(
                **{
                    relative.output: apply_relative(
                        df[relative.column], relative.operation, relative.argument
                    )
                }
            )
            log.debug(
                "Added relative date",
                column=relative.output,
                operation=relative.operation,
            )

        for interval in config.intervals:
            validate_required_columns(df, [interval.start, interval.end])
            between = days_between if interval.unit == "days" else months_between
            df = df.assign(
                **{interval.output: between(start=df[interval.start], end=df[interval.end])}
            )
            log.debug("Added interval", column=interval.output, unit=interval.unit)

        return df

    def aggregate(self, df: pd.DataFrame) -> pd.DataFrame:
        """Group and aggregate the normalized table."""
        step = self.config.resample
        aggregations = {
            name: Aggregation(column=agg.column, function=agg.function)
            for name, agg in step.aggregations.items()
        }
        return resample(df, step.group_by, aggregations, sort=step.sort)

    def _validate_dates(self, df: pd.DataFrame) -> None:
        """Check that every configured date column now holds dates."""
        schema = build_table_schema(
            {spec.column: ColumnType.DATE for spec in self.config.dates},
            name="ParsedDatesSchema",
            coerce=False,
        )
        schema.validate(df)


def run_pipeline(
    config: PipelineConfig,
    source: TableSource | None = None,
    output_path: Path | None = None,
) -> ResampleResult:
    """
    Convenience function to run the resample pipeline.

    Args:
        config: Pipeline configuration.
        source: Optional table source (defaults to the configured CSV).
        output_path: Optional path to save output CSV.

    Returns:
        ResampleResult with the resampled table and statistics.
    """
    pipeline = ResamplePipeline(config)
    return pipeline.run(source=source, output_path=output_path)

"""
Group-and-aggregate over derived calendar keys.

Rows sharing the same group-key values are reduced to one output row.
Missing key values form their own group; missing measurements are skipped
by every reduction.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from timeresample.exceptions import UnsupportedOperationError
from timeresample.normalization.columns import validate_required_columns
from timeresample.normalization.relative import truncate
from timeresample.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_FUNCTION = "mean"


def _sum(values: pd.Series) -> float:
    # An all-missing group sums to NaN rather than 0
    return values.sum(min_count=1)


def _count(values: pd.Series) -> float:
    # An all-missing group has no count rather than 0; cast to Int64 afterwards
    n = values.count()
    return float(n) if n else np.nan


AGGREGATION_FUNCTIONS = {
    "mean": "mean",
    "avg": "mean",
    "sum": _sum,
    "min": "min",
    "max": "max",
    "count": _count,
}


def _reduce(values: pd.Series, function: str) -> object:
    """Reduce a whole column with a named aggregation function."""
    func = AGGREGATION_FUNCTIONS[function]
    return func(values) if callable(func) else getattr(values, func)()


@dataclass(frozen=True)
class Aggregation:
    """
    A single reduction of a source column.

    Attributes:
        column: Source column to reduce.
        function: Aggregation function name.
    """

    column: str
    function: str = DEFAULT_FUNCTION

    def __post_init__(self) -> None:
        if self.function not in AGGREGATION_FUNCTIONS:
            raise UnsupportedOperationError(self.function, list(AGGREGATION_FUNCTIONS))


AggregationSpec = Aggregation | tuple[str, str] | str


def as_aggregation(spec: AggregationSpec) -> Aggregation:
    """
    Coerce an aggregation spec.

    Accepts an Aggregation, a ``(column, function)`` pair, or a bare column
    name, which is averaged.
    """
    if isinstance(spec, Aggregation):
        return spec
    if isinstance(spec, str):
        return Aggregation(column=spec)
    column, function = spec
    return Aggregation(column=column, function=function)


def resample(
    df: pd.DataFrame,
    group_by: Sequence[str],
    aggregations: Mapping[str, AggregationSpec],
    *,
    sort: bool = False,
) -> pd.DataFrame:
    """
    Group rows by key columns and reduce each requested column.

    Args:
        df: Input table. Not modified.
        group_by: Key columns. An empty sequence aggregates the whole table
            into a single row.
        aggregations: Output column name -> aggregation spec.
        sort: Sort output rows by the group keys.

    Returns:
        DataFrame with the group keys followed by one column per aggregation,
        one row per distinct key tuple.

    Raises:
        UnsupportedOperationError: If an aggregation function is unknown.
        ValueError: If a column is missing or an output name clashes with a
            group key.
    """
    group_by = list(group_by)
    specs = {name: as_aggregation(spec) for name, spec in aggregations.items()}
    if not specs:
        msg = "At least one aggregation is required"
        raise ValueError(msg)

    clashes = [name for name in specs if name in group_by]
    if clashes:
        msg = f"Aggregation output names clash with group keys: {clashes}"
        raise ValueError(msg)

    validate_required_columns(
        df, list(dict.fromkeys([*group_by, *(a.column for a in specs.values())]))
    )

    if not group_by:
        row = {name: _reduce(df[agg.column], agg.function) for name, agg in specs.items()}
        result = pd.DataFrame([row], columns=list(specs))
    else:
        named = {
            name: pd.NamedAgg(column=agg.column, aggfunc=AGGREGATION_FUNCTIONS[agg.function])
            for name, agg in specs.items()
        }
        result = (
            df.groupby(group_by, dropna=False, sort=sort)
            .agg(**named)
            .reset_index()
        )

    for name, agg in specs.items():
        if agg.function == "count":
            result[name] = result[name].astype("Int64")

    log.info(
        "Resampled table",
        group_by=group_by,
        aggregations={name: f"{a.function}({a.column})" for name, a in specs.items()},
        rows_before=len(df),
        rows_after=len(result),
    )

    return result


def resample_by_period(
    df: pd.DataFrame,
    date_column: str,
    period: str,
    aggregations: Mapping[str, AggregationSpec],
    *,
    group_by: Sequence[str] = (),
    sort: bool = True,
) -> pd.DataFrame:
    """
    Resample a table to a coarser calendar period.

    The date column is replaced by the first day of its year, quarter, month
    or week, then used as the leading group key.

    Args:
        df: Input table.
        date_column: Date column to bucket.
        period: ``year``, ``quarter``, ``month`` or ``week``.
        aggregations: Output column name -> aggregation spec.
        group_by: Additional key columns.
        sort: Sort output rows by period.

    Returns:
        Resampled DataFrame keyed by the truncated date column.
    """
    validate_required_columns(df, [date_column])
    bucketed = df.copy()
    bucketed[date_column] = truncate(df[date_column], period)
    return resample(bucketed, [date_column, *group_by], aggregations, sort=sort)
